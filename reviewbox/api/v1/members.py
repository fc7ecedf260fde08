"""
Group membership endpoints: member list and invitations by display ID.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from reviewbox.config import InvitationStatus
from reviewbox.core.auth import CurrentSession
from reviewbox.core.database import get_db
from reviewbox.core.errors import Conflict, NotFound
from reviewbox.core.logging import get_logger
from reviewbox.models import Invitations, ReviewGroupMembers, Users
from reviewbox.schemas.review_group import (
    InvitationResponse,
    InviteRequest,
    InviteResponse,
    MemberListResponse,
    MemberResponse,
)
from reviewbox.services.membership import get_active_group, get_membership, require_membership

logger = get_logger(__name__)

router = APIRouter(prefix="/review-groups/{review_group_id}/members", tags=["members"])

GroupId = Annotated[str, Path(description="Review group ID")]


@router.get("", response_model=MemberListResponse)
async def list_members(
    review_group_id: GroupId,
    session: CurrentSession,
    db: AsyncSession = Depends(get_db),
) -> MemberListResponse:
    """
    List a group's members in joining order. Members only.
    """
    await get_active_group(db, review_group_id)
    await require_membership(db, review_group_id, session.user_id)

    result = await db.execute(
        select(ReviewGroupMembers, Users)
        .join(Users, Users.id == ReviewGroupMembers.user_id)  # type: ignore[arg-type]
        .where(
            ReviewGroupMembers.review_group_id == review_group_id,  # type: ignore[arg-type]
            ReviewGroupMembers.deleted_at.is_(None),  # type: ignore[union-attr]
        )
        .order_by(ReviewGroupMembers.joined_at)  # type: ignore[arg-type]
    )

    members = [
        MemberResponse(
            id=user.id,
            username=user.username,
            display_id=user.display_id,
            avatar_url=user.avatar_url,
            role=membership.role,
            joined_at=membership.joined_at,
        )
        for membership, user in result.all()
    ]
    return MemberListResponse(members=members)


@router.post("/invite", response_model=InviteResponse, status_code=status.HTTP_201_CREATED)
async def invite_member(
    review_group_id: GroupId,
    data: InviteRequest,
    session: CurrentSession,
    db: AsyncSession = Depends(get_db),
) -> InviteResponse:
    """
    Invite a user to the group by their display ID.

    Any member may invite. A user who is already a member, or who already has
    a pending invitation to this group, cannot be invited again.
    """
    await get_active_group(db, review_group_id)
    await require_membership(
        db, review_group_id, session.user_id, "Only group members can invite users"
    )

    user_result = await db.execute(
        select(Users).where(
            Users.display_id == data.invited_user_display_id,  # type: ignore[arg-type]
            Users.deleted_at.is_(None),  # type: ignore[union-attr]
        )
    )
    invited_user = user_result.scalar_one_or_none()
    if invited_user is None:
        raise NotFound("User not found")

    if await get_membership(db, review_group_id, invited_user.id) is not None:
        raise Conflict("This user is already a member of the group")

    pending_result = await db.execute(
        select(Invitations.id).where(  # type: ignore[call-overload]
            Invitations.review_group_id == review_group_id,
            Invitations.invited_user_display_id == data.invited_user_display_id,
            Invitations.status == InvitationStatus.PENDING,
            Invitations.deleted_at.is_(None),  # type: ignore[union-attr]
        )
    )
    if pending_result.first() is not None:
        raise Conflict("An invitation has already been sent to this user")

    invitation = Invitations(
        review_group_id=review_group_id,
        inviter_id=session.user_id,
        invited_user_display_id=data.invited_user_display_id,
    )
    db.add(invitation)
    await db.commit()
    await db.refresh(invitation)

    logger.info(
        "invitation_created",
        review_group_id=review_group_id,
        invitation_id=invitation.id,
    )
    return InviteResponse(
        message="Invitation sent",
        invitation=InvitationResponse.model_validate(invitation),
    )
