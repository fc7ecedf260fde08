"""
Image upload for group, subject and review pictures
"""

from typing import Annotated

from fastapi import APIRouter, File, UploadFile

from reviewbox.core.auth import CurrentSession
from reviewbox.schemas.upload import ImageUploadResponse
from reviewbox.services.storage import save_review_image

router = APIRouter(prefix="/upload", tags=["uploads"])


@router.post("/image", response_model=ImageUploadResponse)
async def upload_image(
    file: Annotated[UploadFile, File(description="Image file (JPG, PNG, GIF or WebP)")],
    session: CurrentSession,
) -> ImageUploadResponse:
    """
    Store an image and return its public URL.

    The URL is then sent as image_url or in an images list when the group,
    subject or review is saved.
    """
    image_url = await save_review_image(file, session.user_id)
    return ImageUploadResponse(image_url=image_url)
