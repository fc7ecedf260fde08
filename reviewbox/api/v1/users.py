"""
Profile endpoints for the signed-in user
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from reviewbox.core.auth import CurrentUser
from reviewbox.core.database import get_db
from reviewbox.core.logging import get_logger
from reviewbox.models.base import utcnow
from reviewbox.schemas.user import ProfileResponse, ProfileUpdate, UserResponse

logger = get_logger(__name__)

router = APIRouter(prefix="/user", tags=["users"])


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(current_user: CurrentUser) -> ProfileResponse:
    """
    Get the caller's public profile (id, username, display_id, avatar_url).
    """
    return ProfileResponse(user=UserResponse.model_validate(current_user))


@router.put("/profile", response_model=ProfileResponse)
async def update_profile(
    data: ProfileUpdate,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> ProfileResponse:
    """
    Update the caller's username and avatar.

    The display ID is fixed at registration and cannot be changed here.
    """
    current_user.username = data.username
    current_user.avatar_url = data.avatar_url
    current_user.updated_at = utcnow()

    await db.commit()
    await db.refresh(current_user)

    logger.info("profile_updated")
    return ProfileResponse(user=UserResponse.model_validate(current_user))
