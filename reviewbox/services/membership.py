"""
Membership lookups and role checks.

Permissions are re-read from the store on every request: handlers call
require_membership() (or one of the stricter variants) with the session's
user id, never a cached role.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from reviewbox.config import MemberRole
from reviewbox.core.errors import AccessDenied, NotFound
from reviewbox.models import ReviewGroupMembers, ReviewGroups, ReviewSubjects


async def get_membership(
    db: AsyncSession, review_group_id: str, user_id: str
) -> ReviewGroupMembers | None:
    """Active membership of a user in a group, if any."""
    result = await db.execute(
        select(ReviewGroupMembers).where(
            ReviewGroupMembers.review_group_id == review_group_id,  # type: ignore[arg-type]
            ReviewGroupMembers.user_id == user_id,  # type: ignore[arg-type]
            ReviewGroupMembers.deleted_at.is_(None),  # type: ignore[union-attr]
        )
    )
    return result.scalars().first()


async def require_membership(
    db: AsyncSession, review_group_id: str, user_id: str, message: str = "Access denied"
) -> ReviewGroupMembers:
    """
    Raises:
        AccessDenied: 403 if the user is not an active member
    """
    membership = await get_membership(db, review_group_id, user_id)
    if membership is None:
        raise AccessDenied(message)
    return membership


async def require_owner(
    db: AsyncSession, review_group_id: str, user_id: str, message: str
) -> ReviewGroupMembers:
    """
    Raises:
        AccessDenied: 403 if the user is not the group's owner
    """
    membership = await get_membership(db, review_group_id, user_id)
    if membership is None or membership.role != MemberRole.OWNER:
        raise AccessDenied(message)
    return membership


def can_manage_subject(membership: ReviewGroupMembers, subject: ReviewSubjects) -> bool:
    """Owners and admins manage every subject; members only the ones they created."""
    return (
        membership.role in MemberRole.SUBJECT_MANAGERS
        or subject.created_by == membership.user_id
    )


async def get_active_group(db: AsyncSession, review_group_id: str) -> ReviewGroups:
    """
    Raises:
        NotFound: 404 if the group does not exist or was deleted
    """
    result = await db.execute(
        select(ReviewGroups).where(
            ReviewGroups.id == review_group_id,  # type: ignore[arg-type]
            ReviewGroups.deleted_at.is_(None),  # type: ignore[union-attr]
        )
    )
    group = result.scalar_one_or_none()
    if group is None:
        raise NotFound("Group not found")
    return group


async def get_active_subject(
    db: AsyncSession, review_group_id: str, subject_id: str
) -> ReviewSubjects:
    """
    Raises:
        NotFound: 404 if the subject is missing, deleted, or in another group
    """
    result = await db.execute(
        select(ReviewSubjects).where(
            ReviewSubjects.id == subject_id,  # type: ignore[arg-type]
            ReviewSubjects.review_group_id == review_group_id,  # type: ignore[arg-type]
            ReviewSubjects.deleted_at.is_(None),  # type: ignore[union-attr]
        )
    )
    subject = result.scalar_one_or_none()
    if subject is None:
        raise NotFound("Review subject not found")
    return subject
