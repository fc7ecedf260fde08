"""
Image storage for group, subject and review pictures.

Uploads are written below settings.STORAGE_PATH and served by the web
server from settings.IMAGE_BASE_URL, so the returned URL is
``{IMAGE_BASE_URL}/images/review-groups/{user_id}_{timestamp_ms}.{ext}``.
"""

import time
from pathlib import Path as FilePath

from fastapi import UploadFile
from PIL import Image, UnidentifiedImageError

from reviewbox.config import settings
from reviewbox.core.errors import ValidationError
from reviewbox.core.logging import get_logger

logger = get_logger(__name__)

ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}
IMAGE_SUBDIR = "review-groups"


def validate_image_headers(file: UploadFile) -> str:
    """
    Check the client-declared content type and extension.

    Both are user-controlled, so the bytes are verified separately with PIL
    after they are written.

    Returns:
        The lowercase extension without the leading dot
    """
    if not file.filename:
        raise ValidationError("File is required")

    if not file.content_type or not file.content_type.startswith("image/"):
        raise ValidationError("File must be an image")

    ext = FilePath(file.filename).suffix.lower()
    if ext not in ALLOWED_EXTENSIONS:
        raise ValidationError(
            f"File extension {ext or '(none)'} not allowed. "
            f"Allowed: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
        )
    return ext.lstrip(".")


def verify_image_file(path: FilePath) -> None:
    """Raise ValidationError unless PIL recognises the file as an image."""
    try:
        with Image.open(path) as img:
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise ValidationError("File is not a valid image") from e


def image_url_for(filename: str) -> str:
    return f"{settings.IMAGE_BASE_URL.rstrip('/')}/images/{IMAGE_SUBDIR}/{filename}"


async def save_review_image(file: UploadFile, user_id: str) -> str:
    """
    Validate and store an uploaded image.

    Returns:
        Public URL of the stored image

    Raises:
        ValidationError: 400 for a non-image, disallowed extension, or oversized file
    """
    ext = validate_image_headers(file)

    content = await file.read()
    if not content:
        raise ValidationError("File is empty")
    if len(content) > settings.MAX_IMAGE_SIZE:
        raise ValidationError(f"File size exceeds maximum of {settings.MAX_IMAGE_SIZE} bytes")

    target_dir = FilePath(settings.STORAGE_PATH) / IMAGE_SUBDIR
    target_dir.mkdir(parents=True, exist_ok=True)

    filename = f"{user_id}_{int(time.time() * 1000)}.{ext}"
    temp_path = target_dir / f"temp_{filename}"
    final_path = target_dir / filename

    try:
        temp_path.write_bytes(content)
        verify_image_file(temp_path)
        temp_path.rename(final_path)
    finally:
        if temp_path.exists():
            temp_path.unlink()

    logger.info("image_uploaded", filename=filename, size=len(content))
    return image_url_for(filename)
