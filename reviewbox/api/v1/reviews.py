"""
Review endpoints.

A member writes at most one review per subject. The review's scores must
cover exactly the group's evaluation criteria; the review row and its score
rows are written in the same transaction.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from reviewbox.core.auth import CurrentSession
from reviewbox.core.database import get_db
from reviewbox.core.errors import Conflict, NotFound
from reviewbox.core.logging import bind_context, get_logger
from reviewbox.models import Reviews, Users
from reviewbox.models.base import utcnow
from reviewbox.schemas.base import SuccessResponse
from reviewbox.schemas.common import CriterionResponse
from reviewbox.schemas.review import (
    OwnReviewResponse,
    ReviewCreated,
    ReviewCreateResponse,
    ReviewGroupContext,
    ReviewListResponse,
    ReviewSubjectContext,
    ReviewWrite,
)
from reviewbox.services.membership import get_active_group, get_active_subject, require_membership
from reviewbox.services.review_groups import list_criteria
from reviewbox.services.reviews import (
    add_scores,
    build_review_response,
    delete_scores,
    get_active_review,
    list_subject_reviews,
    load_scores,
    replace_scores,
)
from reviewbox.services.scoring import calculate_total_score, validate_scores

logger = get_logger(__name__)

router = APIRouter(
    prefix="/review-groups/{review_group_id}/subjects/{subject_id}/reviews",
    tags=["reviews"],
)

GroupId = Annotated[str, Path(description="Review group ID")]
SubjectId = Annotated[str, Path(description="Review subject ID")]


async def _checked_total(db: AsyncSession, review_group_id: str, scores: dict[str, int]) -> float:
    """Validate scores against the group's criteria and return the review total."""
    criteria = await list_criteria(db, review_group_id)
    validate_scores(scores, [criterion.id for criterion in criteria])
    return calculate_total_score(scores.values())


async def _require_own_review(db: AsyncSession, subject_id: str, user_id: str) -> Reviews:
    review = await get_active_review(db, subject_id, user_id)
    if review is None:
        raise NotFound("Review not found")
    return review


@router.get("", response_model=ReviewListResponse)
async def list_reviews(
    review_group_id: GroupId,
    subject_id: SubjectId,
    session: CurrentSession,
    db: AsyncSession = Depends(get_db),
) -> ReviewListResponse:
    """
    List a subject's reviews, newest first, with reviewer and per-criterion scores.
    """
    await get_active_group(db, review_group_id)
    await require_membership(db, review_group_id, session.user_id)
    await get_active_subject(db, review_group_id, subject_id)

    return ReviewListResponse(reviews=await list_subject_reviews(db, subject_id))


@router.post("", response_model=ReviewCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_review(
    review_group_id: GroupId,
    subject_id: SubjectId,
    data: ReviewWrite,
    session: CurrentSession,
    db: AsyncSession = Depends(get_db),
) -> ReviewCreateResponse:
    """
    Review a subject.

    Rejected with 409 if the caller already has an active review of the
    subject, whatever the new payload contains.
    """
    bind_context(review_group_id=review_group_id, subject_id=subject_id)
    await get_active_group(db, review_group_id)
    await require_membership(db, review_group_id, session.user_id)
    await get_active_subject(db, review_group_id, subject_id)

    if await get_active_review(db, subject_id, session.user_id) is not None:
        raise Conflict("You have already reviewed this subject")

    total_score = await _checked_total(db, review_group_id, data.scores)

    review = Reviews(
        review_subject_id=subject_id,
        user_id=session.user_id,
        comment=data.comment,
        images=data.images,
        total_score=total_score,
    )
    db.add(review)
    await db.flush()
    add_scores(db, review.id, data.scores)
    await db.commit()

    logger.info("review_created", review_id=review.id, total_score=total_score)
    return ReviewCreateResponse(review=ReviewCreated(id=review.id, total_score=total_score))


@router.get("/edit", response_model=OwnReviewResponse)
async def get_own_review(
    review_group_id: GroupId,
    subject_id: SubjectId,
    session: CurrentSession,
    db: AsyncSession = Depends(get_db),
) -> OwnReviewResponse:
    """
    Get the caller's review of a subject with the group's criteria, for the edit form.
    """
    group = await get_active_group(db, review_group_id)
    membership = await require_membership(db, review_group_id, session.user_id)
    subject = await get_active_subject(db, review_group_id, subject_id)
    review = await _require_own_review(db, subject_id, session.user_id)

    user = await db.get(Users, session.user_id)
    if user is None:
        raise NotFound("User not found")
    scores = await load_scores(db, [review.id])
    criteria = await list_criteria(db, review_group_id)

    return OwnReviewResponse(
        review=build_review_response(review, user, scores.get(review.id, [])),
        group=ReviewGroupContext(
            id=group.id,
            name=group.name,
            user_role=membership.role,
            evaluation_criteria=[CriterionResponse.model_validate(c) for c in criteria],
        ),
        subject=ReviewSubjectContext(id=subject.id, name=subject.name, images=subject.images),
    )


@router.put("/edit", response_model=ReviewCreateResponse)
async def update_own_review(
    review_group_id: GroupId,
    subject_id: SubjectId,
    data: ReviewWrite,
    session: CurrentSession,
    db: AsyncSession = Depends(get_db),
) -> ReviewCreateResponse:
    """
    Replace the caller's review: comment, images and the full set of scores.
    """
    bind_context(review_group_id=review_group_id, subject_id=subject_id)
    await get_active_group(db, review_group_id)
    await require_membership(db, review_group_id, session.user_id)
    await get_active_subject(db, review_group_id, subject_id)
    review = await _require_own_review(db, subject_id, session.user_id)

    total_score = await _checked_total(db, review_group_id, data.scores)

    review.comment = data.comment
    review.images = data.images
    review.total_score = total_score
    review.updated_at = utcnow()
    await replace_scores(db, review.id, data.scores)
    await db.commit()

    logger.info("review_updated", review_id=review.id, total_score=total_score)
    return ReviewCreateResponse(
        message="Review updated successfully",
        review=ReviewCreated(id=review.id, total_score=total_score),
    )


@router.delete("/edit", response_model=SuccessResponse)
async def delete_own_review(
    review_group_id: GroupId,
    subject_id: SubjectId,
    session: CurrentSession,
    db: AsyncSession = Depends(get_db),
) -> SuccessResponse:
    """
    Delete the caller's review. Its scores are removed, the review is soft-deleted.
    """
    await get_active_group(db, review_group_id)
    await require_membership(db, review_group_id, session.user_id)
    await get_active_subject(db, review_group_id, subject_id)
    review = await _require_own_review(db, subject_id, session.user_id)

    await delete_scores(db, review.id)
    review.deleted_at = utcnow()
    await db.commit()

    logger.info("review_deleted", review_id=review.id)
    return SuccessResponse(message="Review deleted successfully")
