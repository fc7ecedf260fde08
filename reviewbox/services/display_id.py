"""
Display ID generation.

Every user gets a public numeric handle (e.g. "482913") that other users
type in to invite them. Handles are random rather than sequential so they do
not leak sign-up order.

Collisions are retried a bounded number of times. If the regular 6-digit
space keeps colliding the generator widens to DISPLAY_ID_FALLBACK_LENGTH
digits before giving up.
"""

import secrets

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from reviewbox.config import settings
from reviewbox.core.errors import InternalError
from reviewbox.core.logging import get_logger
from reviewbox.models import Users

logger = get_logger(__name__)


def generate_display_id(length: int = 6) -> str:
    """Random numeric string of exactly ``length`` digits with no leading zero."""
    lower = 10 ** (length - 1)
    return str(lower + secrets.randbelow(9 * lower))


async def display_id_exists(db: AsyncSession, display_id: str) -> bool:
    result = await db.execute(
        select(Users.id).where(Users.display_id == display_id).limit(1)  # type: ignore[call-overload]
    )
    return result.first() is not None


async def generate_unique_display_id(db: AsyncSession) -> str:
    """
    Generate a display ID not used by any existing user.

    Tries settings.DISPLAY_ID_MAX_ATTEMPTS times in the regular space, then
    as many times again in the widened fallback space.

    Raises:
        InternalError: if no free ID was found in either space
    """
    lengths = (settings.DISPLAY_ID_LENGTH, settings.DISPLAY_ID_FALLBACK_LENGTH)
    for length in lengths:
        for attempt in range(1, settings.DISPLAY_ID_MAX_ATTEMPTS + 1):
            candidate = generate_display_id(length)
            if not await display_id_exists(db, candidate):
                if attempt > 1 or length != settings.DISPLAY_ID_LENGTH:
                    logger.info("display_id_collisions", attempts=attempt, length=length)
                return candidate
        logger.warning(
            "display_id_space_exhausted", length=length, attempts=settings.DISPLAY_ID_MAX_ATTEMPTS
        )

    raise InternalError("Failed to generate a unique display ID")
