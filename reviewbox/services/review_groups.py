"""
Review group lifecycle.

Creation writes the group, the creator's owner membership and the
evaluation criteria in the caller's transaction; deletion soft-deletes the
whole tree under a group and removes the evaluation scores of its reviews.
Neither function commits: the request handler commits once, so either every
row lands or none does.
"""

from dataclasses import dataclass

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from reviewbox.config import InvitationStatus, MemberRole
from reviewbox.core.errors import ValidationError
from reviewbox.core.logging import get_logger
from reviewbox.models import (
    Categories,
    EvaluationCriteria,
    EvaluationScores,
    Invitations,
    ReviewGroupMembers,
    ReviewGroups,
    Reviews,
    ReviewSubjects,
)
from reviewbox.models.base import utcnow
from reviewbox.schemas.review_group import ReviewGroupCreate

logger = get_logger(__name__)


@dataclass
class DeletionSummary:
    """Row counts touched by a group deletion."""

    members: int = 0
    criteria: int = 0
    subjects: int = 0
    reviews: int = 0
    scores: int = 0
    invitations: int = 0


async def create_review_group(
    db: AsyncSession, data: ReviewGroupCreate, owner_id: str
) -> ReviewGroups:
    """
    Stage a new group with its owner membership and criteria.

    Raises:
        ValidationError: 400 if the category does not exist
    """
    category = await db.get(Categories, data.category_id)
    if category is None:
        raise ValidationError("Invalid category")

    group = ReviewGroups(
        name=data.name,
        description=data.description,
        category_id=data.category_id,
        is_private=data.is_private,
        metadata_fields=(
            [field.model_dump() for field in data.metadata_fields]
            if data.metadata_fields
            else None
        ),
        image_url=data.image_url or None,
    )
    db.add(group)
    # Flush so the membership and criteria rows reference a persisted group
    await db.flush()

    db.add(ReviewGroupMembers(review_group_id=group.id, user_id=owner_id, role=MemberRole.OWNER))
    for index, criterion in enumerate(data.evaluation_criteria):
        db.add(EvaluationCriteria(review_group_id=group.id, name=criterion.name, order_index=index))
    await db.flush()

    logger.info(
        "review_group_created",
        review_group_id=group.id,
        criteria=len(data.evaluation_criteria),
        is_private=group.is_private,
    )
    return group


async def list_criteria(db: AsyncSession, review_group_id: str) -> list[EvaluationCriteria]:
    """Active criteria of a group in display order."""
    result = await db.execute(
        select(EvaluationCriteria)
        .where(
            EvaluationCriteria.review_group_id == review_group_id,  # type: ignore[arg-type]
            EvaluationCriteria.deleted_at.is_(None),  # type: ignore[union-attr]
        )
        .order_by(EvaluationCriteria.order_index)  # type: ignore[arg-type]
    )
    return list(result.scalars().all())


async def count_members(db: AsyncSession, review_group_id: str) -> int:
    result = await db.execute(
        select(func.count(ReviewGroupMembers.id)).where(  # type: ignore[arg-type]
            ReviewGroupMembers.review_group_id == review_group_id,  # type: ignore[arg-type]
            ReviewGroupMembers.deleted_at.is_(None),  # type: ignore[union-attr]
        )
    )
    return result.scalar() or 0


async def soft_delete_review_group(db: AsyncSession, review_group_id: str) -> DeletionSummary:
    """
    Cascade a group deletion.

    Soft-deletes the group, its memberships, criteria, subjects, the reviews
    on those subjects and pending invitations, all with the same timestamp.
    Evaluation scores of those reviews are removed physically. Rows that
    were already deleted keep their original deletion time.
    """
    now = utcnow()
    summary = DeletionSummary()

    await db.execute(
        update(ReviewGroups)
        .where(ReviewGroups.id == review_group_id)  # type: ignore[arg-type]
        .values(deleted_at=now, updated_at=now)
    )

    subject_ids = list(
        (
            await db.execute(
                select(ReviewSubjects.id).where(  # type: ignore[call-overload]
                    ReviewSubjects.review_group_id == review_group_id
                )
            )
        ).scalars()
    )
    review_ids: list[str] = []
    if subject_ids:
        review_ids = list(
            (
                await db.execute(
                    select(Reviews.id).where(  # type: ignore[call-overload]
                        Reviews.review_subject_id.in_(subject_ids),  # type: ignore[attr-defined]
                        Reviews.deleted_at.is_(None),  # type: ignore[union-attr]
                    )
                )
            ).scalars()
        )

    if review_ids:
        scores_result = await db.execute(
            delete(EvaluationScores).where(
                EvaluationScores.review_id.in_(review_ids)  # type: ignore[attr-defined]
            )
        )
        summary.scores = scores_result.rowcount or 0

        reviews_result = await db.execute(
            update(Reviews)
            .where(Reviews.id.in_(review_ids))  # type: ignore[attr-defined]
            .values(deleted_at=now)
        )
        summary.reviews = reviews_result.rowcount or 0

    subjects_result = await db.execute(
        update(ReviewSubjects)
        .where(
            ReviewSubjects.review_group_id == review_group_id,  # type: ignore[arg-type]
            ReviewSubjects.deleted_at.is_(None),  # type: ignore[union-attr]
        )
        .values(deleted_at=now)
    )
    summary.subjects = subjects_result.rowcount or 0

    criteria_result = await db.execute(
        update(EvaluationCriteria)
        .where(
            EvaluationCriteria.review_group_id == review_group_id,  # type: ignore[arg-type]
            EvaluationCriteria.deleted_at.is_(None),  # type: ignore[union-attr]
        )
        .values(deleted_at=now)
    )
    summary.criteria = criteria_result.rowcount or 0

    members_result = await db.execute(
        update(ReviewGroupMembers)
        .where(
            ReviewGroupMembers.review_group_id == review_group_id,  # type: ignore[arg-type]
            ReviewGroupMembers.deleted_at.is_(None),  # type: ignore[union-attr]
        )
        .values(deleted_at=now)
    )
    summary.members = members_result.rowcount or 0

    invitations_result = await db.execute(
        update(Invitations)
        .where(
            Invitations.review_group_id == review_group_id,  # type: ignore[arg-type]
            Invitations.status == InvitationStatus.PENDING,  # type: ignore[arg-type]
            Invitations.deleted_at.is_(None),  # type: ignore[union-attr]
        )
        .values(deleted_at=now)
    )
    summary.invitations = invitations_result.rowcount or 0

    logger.info(
        "review_group_deleted",
        review_group_id=review_group_id,
        members=summary.members,
        subjects=summary.subjects,
        reviews=summary.reviews,
        scores=summary.scores,
    )
    return summary
