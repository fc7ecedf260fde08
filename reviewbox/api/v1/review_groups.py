"""
Review group endpoints.

A group is created by its owner together with its evaluation criteria and
metadata schema. Criteria cannot be changed afterwards; the owner may edit
the name, description, image and visibility, or delete the whole group.

The settings routes are served both at /review-groups/{id} and at
/review-groups/{id}/settings, which is where the web client's settings page
posts to.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from reviewbox.core.auth import CurrentSession
from reviewbox.core.database import get_db
from reviewbox.core.logging import bind_context, get_logger
from reviewbox.models import Categories, ReviewGroupMembers, ReviewGroups
from reviewbox.models.base import utcnow
from reviewbox.schemas.base import SuccessResponse
from reviewbox.schemas.common import CategorySummary, CriterionResponse
from reviewbox.schemas.review_group import (
    MyReviewGroup,
    MyReviewGroupListResponse,
    ReviewGroupCreate,
    ReviewGroupCreated,
    ReviewGroupCreateResponse,
    ReviewGroupDetail,
    ReviewGroupDetailResponse,
    ReviewGroupResponse,
    ReviewGroupUpdate,
    ReviewGroupUpdateResponse,
)
from reviewbox.services.membership import get_active_group, require_membership, require_owner
from reviewbox.services.review_groups import (
    count_members,
    create_review_group,
    list_criteria,
    soft_delete_review_group,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/review-groups", tags=["review-groups"])

GroupId = Annotated[str, Path(description="Review group ID")]


@router.post(
    "",
    response_model=ReviewGroupCreateResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_group(
    data: ReviewGroupCreate,
    session: CurrentSession,
    db: AsyncSession = Depends(get_db),
) -> ReviewGroupCreateResponse:
    """
    Create a review group owned by the caller.

    The group, the caller's owner membership and the evaluation criteria are
    committed together.
    """
    group = await create_review_group(db, data, owner_id=session.user_id)
    await db.commit()

    return ReviewGroupCreateResponse(
        review_group=ReviewGroupCreated(
            id=group.id, name=group.name, description=group.description
        )
    )


@router.get("", response_model=MyReviewGroupListResponse)
async def list_my_groups(
    session: CurrentSession,
    db: AsyncSession = Depends(get_db),
) -> MyReviewGroupListResponse:
    """
    List the groups the caller belongs to, most recently joined first.
    """
    result = await db.execute(
        select(ReviewGroupMembers, ReviewGroups, Categories)
        .join(ReviewGroups, ReviewGroups.id == ReviewGroupMembers.review_group_id)  # type: ignore[arg-type]
        .join(Categories, Categories.id == ReviewGroups.category_id)  # type: ignore[arg-type]
        .where(
            ReviewGroupMembers.user_id == session.user_id,  # type: ignore[arg-type]
            ReviewGroupMembers.deleted_at.is_(None),  # type: ignore[union-attr]
            ReviewGroups.deleted_at.is_(None),  # type: ignore[union-attr]
        )
        .order_by(ReviewGroupMembers.joined_at.desc())  # type: ignore[attr-defined]
    )

    groups = [
        MyReviewGroup(
            id=group.id,
            name=group.name,
            description=group.description,
            is_private=group.is_private,
            image_url=group.image_url,
            created_at=group.created_at,
            category=CategorySummary.model_validate(category),
            role=membership.role,
            joined_at=membership.joined_at,
        )
        for membership, group, category in result.all()
    ]
    return MyReviewGroupListResponse(review_groups=groups)


@router.get("/{review_group_id}", response_model=ReviewGroupDetailResponse)
async def get_group(
    review_group_id: GroupId,
    session: CurrentSession,
    db: AsyncSession = Depends(get_db),
) -> ReviewGroupDetailResponse:
    """
    Get a group with its category, member count, criteria and the caller's role.

    Only members may read a group.
    """
    group = await get_active_group(db, review_group_id)
    membership = await require_membership(db, review_group_id, session.user_id)

    category = await db.get(Categories, group.category_id)
    criteria = await list_criteria(db, review_group_id)

    return ReviewGroupDetailResponse(
        group=ReviewGroupDetail(
            id=group.id,
            name=group.name,
            description=group.description,
            image_url=group.image_url,
            is_private=group.is_private,
            metadata_fields=group.metadata_fields,
            created_at=group.created_at,
            category=CategorySummary.model_validate(category),
            member_count=await count_members(db, review_group_id),
            user_role=membership.role,
            evaluation_criteria=[CriterionResponse.model_validate(c) for c in criteria],
        )
    )


@router.put("/{review_group_id}", response_model=ReviewGroupUpdateResponse)
@router.put("/{review_group_id}/settings", response_model=ReviewGroupUpdateResponse)
async def update_group(
    review_group_id: GroupId,
    data: ReviewGroupUpdate,
    session: CurrentSession,
    db: AsyncSession = Depends(get_db),
) -> ReviewGroupUpdateResponse:
    """
    Update a group's name, description, image and visibility. Owner only.
    """
    group = await get_active_group(db, review_group_id)
    await require_owner(
        db, review_group_id, session.user_id, "Only the group owner can change settings"
    )

    group.name = data.name
    group.description = data.description
    group.is_private = data.is_private
    group.image_url = data.image_url or None
    group.updated_at = utcnow()

    await db.commit()
    await db.refresh(group)

    logger.info("review_group_updated", review_group_id=review_group_id)
    return ReviewGroupUpdateResponse(group=ReviewGroupResponse.model_validate(group))


@router.delete("/{review_group_id}", response_model=SuccessResponse)
@router.delete("/{review_group_id}/settings", response_model=SuccessResponse)
async def delete_group(
    review_group_id: GroupId,
    session: CurrentSession,
    db: AsyncSession = Depends(get_db),
) -> SuccessResponse:
    """
    Delete a group and everything in it. Owner only.

    Memberships, criteria, subjects, reviews and pending invitations are
    soft-deleted and the reviews' scores removed, in one transaction.
    """
    bind_context(review_group_id=review_group_id)
    await get_active_group(db, review_group_id)
    await require_owner(
        db, review_group_id, session.user_id, "Only the group owner can delete this group"
    )

    await soft_delete_review_group(db, review_group_id)
    await db.commit()

    return SuccessResponse(message="Review group deleted successfully")
