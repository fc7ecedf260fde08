"""
Review subject endpoints.

Every member may add subjects. Editing and deleting a subject is limited
to the group's owner and admins and the member who created it, and a subject
that already has reviews cannot be deleted.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from reviewbox.core.auth import CurrentSession
from reviewbox.core.database import get_db
from reviewbox.core.errors import AccessDenied, ValidationError
from reviewbox.core.logging import bind_context, get_logger
from reviewbox.models import ReviewGroupMembers, ReviewGroups, Reviews, ReviewSubjects
from reviewbox.models.base import utcnow
from reviewbox.schemas.base import SuccessResponse
from reviewbox.schemas.common import CriterionResponse
from reviewbox.schemas.subject import (
    GroupContext,
    SubjectDetail,
    SubjectDetailResponse,
    SubjectEditResponse,
    SubjectListItem,
    SubjectListResponse,
    SubjectResponse,
    SubjectWrite,
    SubjectWriteResponse,
)
from reviewbox.services.membership import (
    can_manage_subject,
    get_active_group,
    get_active_subject,
    require_membership,
)
from reviewbox.services.review_groups import list_criteria
from reviewbox.services.reviews import subject_stats

logger = get_logger(__name__)

router = APIRouter(prefix="/review-groups/{review_group_id}/subjects", tags=["subjects"])

GroupId = Annotated[str, Path(description="Review group ID")]
SubjectId = Annotated[str, Path(description="Review subject ID")]


def _subject_fields(subject: ReviewSubjects) -> dict[str, Any]:
    return {
        "id": subject.id,
        "review_group_id": subject.review_group_id,
        "name": subject.name,
        "images": subject.images,
        "metadata": subject.metadata_values,
        "created_by": subject.created_by,
        "created_at": subject.created_at,
        "updated_at": subject.updated_at,
    }


async def _group_context(
    db: AsyncSession, group: ReviewGroups, membership: ReviewGroupMembers
) -> GroupContext:
    criteria = await list_criteria(db, group.id)
    return GroupContext(
        id=group.id,
        name=group.name,
        user_role=membership.role,
        metadata_fields=group.metadata_fields,
        evaluation_criteria=[CriterionResponse.model_validate(c) for c in criteria],
    )


async def _require_subject_manager(
    db: AsyncSession, review_group_id: str, subject_id: str, user_id: str, action: str
) -> tuple[ReviewGroups, ReviewGroupMembers, ReviewSubjects]:
    group = await get_active_group(db, review_group_id)
    membership = await require_membership(db, review_group_id, user_id)
    subject = await get_active_subject(db, review_group_id, subject_id)
    if not can_manage_subject(membership, subject):
        raise AccessDenied(f"You do not have permission to {action} this subject")
    return group, membership, subject


@router.get("", response_model=SubjectListResponse)
async def list_subjects(
    review_group_id: GroupId,
    session: CurrentSession,
    db: AsyncSession = Depends(get_db),
) -> SubjectListResponse:
    """
    List a group's subjects, newest first, with review count, average score
    and the most recent review.
    """
    await get_active_group(db, review_group_id)
    await require_membership(db, review_group_id, session.user_id)

    result = await db.execute(
        select(ReviewSubjects)
        .where(
            ReviewSubjects.review_group_id == review_group_id,  # type: ignore[arg-type]
            ReviewSubjects.deleted_at.is_(None),  # type: ignore[union-attr]
        )
        .order_by(ReviewSubjects.created_at.desc())  # type: ignore[attr-defined]
    )
    subjects = list(result.scalars().all())
    stats = await subject_stats(db, [subject.id for subject in subjects])

    return SubjectListResponse(
        subjects=[
            SubjectListItem(
                **_subject_fields(subject),
                review_count=stats[subject.id].review_count,
                average_score=stats[subject.id].average_score,
                latest_review=stats[subject.id].latest_review,
            )
            for subject in subjects
        ]
    )


@router.post("", response_model=SubjectWriteResponse, status_code=status.HTTP_201_CREATED)
async def create_subject(
    review_group_id: GroupId,
    data: SubjectWrite,
    session: CurrentSession,
    db: AsyncSession = Depends(get_db),
) -> SubjectWriteResponse:
    """
    Add a subject to the group. Any member may do this.

    Metadata is stored as submitted.
    """
    await get_active_group(db, review_group_id)
    await require_membership(
        db, review_group_id, session.user_id, "Only group members can add subjects"
    )

    subject = ReviewSubjects(
        review_group_id=review_group_id,
        name=data.name,
        images=data.images,
        metadata_values=data.metadata,
        created_by=session.user_id,
    )
    db.add(subject)
    await db.commit()
    await db.refresh(subject)

    logger.info("subject_created", review_group_id=review_group_id, subject_id=subject.id)
    return SubjectWriteResponse(subject=SubjectResponse.model_validate(subject))


@router.get("/{subject_id}", response_model=SubjectDetailResponse)
async def get_subject(
    review_group_id: GroupId,
    subject_id: SubjectId,
    session: CurrentSession,
    db: AsyncSession = Depends(get_db),
) -> SubjectDetailResponse:
    """
    Get a subject with its review statistics and the group's criteria.

    score_breakdown holds the mean score per criterion, in criterion order.
    """
    group = await get_active_group(db, review_group_id)
    membership = await require_membership(db, review_group_id, session.user_id)
    subject = await get_active_subject(db, review_group_id, subject_id)

    group_context = await _group_context(db, group, membership)
    criteria = await list_criteria(db, review_group_id)
    stats = (await subject_stats(db, [subject.id], criteria=criteria))[subject.id]

    return SubjectDetailResponse(
        subject=SubjectDetail(
            **_subject_fields(subject),
            review_count=stats.review_count,
            average_score=stats.average_score,
            score_breakdown=stats.score_breakdown,
        ),
        group=group_context,
    )


@router.get("/{subject_id}/edit", response_model=SubjectEditResponse)
async def get_subject_for_edit(
    review_group_id: GroupId,
    subject_id: SubjectId,
    session: CurrentSession,
    db: AsyncSession = Depends(get_db),
) -> SubjectEditResponse:
    """
    Get a subject and the group's metadata schema for the edit form.
    """
    group, membership, subject = await _require_subject_manager(
        db, review_group_id, subject_id, session.user_id, "edit"
    )
    return SubjectEditResponse(
        subject=SubjectResponse.model_validate(subject),
        group=await _group_context(db, group, membership),
    )


@router.put("/{subject_id}/edit", response_model=SubjectWriteResponse)
async def update_subject(
    review_group_id: GroupId,
    subject_id: SubjectId,
    data: SubjectWrite,
    session: CurrentSession,
    db: AsyncSession = Depends(get_db),
) -> SubjectWriteResponse:
    _, _, subject = await _require_subject_manager(
        db, review_group_id, subject_id, session.user_id, "edit"
    )

    subject.name = data.name
    subject.images = data.images
    subject.metadata_values = data.metadata
    subject.updated_at = utcnow()
    await db.commit()
    await db.refresh(subject)

    logger.info("subject_updated", review_group_id=review_group_id, subject_id=subject_id)
    return SubjectWriteResponse(subject=SubjectResponse.model_validate(subject))


@router.delete("/{subject_id}/edit", response_model=SuccessResponse)
async def delete_subject(
    review_group_id: GroupId,
    subject_id: SubjectId,
    session: CurrentSession,
    db: AsyncSession = Depends(get_db),
) -> SuccessResponse:
    """
    Soft-delete a subject that has no active reviews.
    """
    bind_context(review_group_id=review_group_id, subject_id=subject_id)
    _, _, subject = await _require_subject_manager(
        db, review_group_id, subject_id, session.user_id, "delete"
    )

    review_count_result = await db.execute(
        select(func.count(Reviews.id)).where(  # type: ignore[arg-type]
            Reviews.review_subject_id == subject_id,  # type: ignore[arg-type]
            Reviews.deleted_at.is_(None),  # type: ignore[union-attr]
        )
    )
    if review_count_result.scalar():
        raise ValidationError("Cannot delete subject with existing reviews")

    now = utcnow()
    subject.deleted_at = now
    subject.updated_at = now
    await db.commit()

    logger.info("subject_deleted")
    return SuccessResponse(message="Subject deleted successfully")
