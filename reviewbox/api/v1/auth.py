"""
Registration endpoints.

Sign-in itself happens at the OAuth provider. After the first sign-in the
client checks whether the user row exists and, if not, posts the username
the user picked; the row's id and email come from the access token.
"""

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from reviewbox.core.auth import CurrentSession
from reviewbox.core.database import get_db
from reviewbox.core.logging import get_logger
from reviewbox.models import Users
from reviewbox.models.base import utcnow
from reviewbox.schemas.user import (
    ProfileResponse,
    RegisterRequest,
    RegistrationStatusResponse,
    UserResponse,
)
from reviewbox.services.display_id import generate_unique_display_id

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])


async def _find_user(db: AsyncSession, user_id: str) -> Users | None:
    result = await db.execute(
        select(Users).where(
            Users.id == user_id,  # type: ignore[arg-type]
            Users.deleted_at.is_(None),  # type: ignore[union-attr]
        )
    )
    return result.scalar_one_or_none()


@router.get("/register", response_model=RegistrationStatusResponse)
async def get_registration_status(
    session: CurrentSession,
    db: AsyncSession = Depends(get_db),
) -> RegistrationStatusResponse:
    """
    Tell the client whether the signed-in user still has to pick a username.
    """
    user = await _find_user(db, session.user_id)
    if user is None:
        return RegistrationStatusResponse(exists=False, needs_username=True)
    return RegistrationStatusResponse(exists=True, needs_username=not user.username)


@router.post("/register", response_model=ProfileResponse)
async def register(
    data: RegisterRequest,
    session: CurrentSession,
    db: AsyncSession = Depends(get_db),
) -> ProfileResponse:
    """
    Create the user row for the signed-in user, or set its username.

    New users get a fresh random display ID. Users that already exist keep
    theirs, so invitations addressed to the old handle stay valid.
    """
    user = await _find_user(db, session.user_id)
    if user is None:
        display_id = await generate_unique_display_id(db)
        user = Users(
            id=session.user_id,
            email=session.email,
            username=data.username,
            display_id=display_id,
        )
        db.add(user)
        logger.info("user_registered", display_id=display_id)
    else:
        user.username = data.username
        if session.email:
            user.email = session.email
        user.updated_at = utcnow()
        logger.info("user_username_set")

    await db.commit()
    await db.refresh(user)

    return ProfileResponse(user=UserResponse.model_validate(user))
