"""
Invitation inbox for the signed-in user.

Invitations are addressed by display ID, so the caller's pending
invitations are the ones sent to their current handle.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from reviewbox.config import InvitationStatus, MemberRole
from reviewbox.core.auth import CurrentUser
from reviewbox.core.database import get_db
from reviewbox.core.errors import Conflict, NotFound
from reviewbox.core.logging import get_logger
from reviewbox.models import Invitations, ReviewGroupMembers, ReviewGroups, Users
from reviewbox.models.base import utcnow
from reviewbox.schemas.base import SuccessResponse
from reviewbox.schemas.common import UserSummary
from reviewbox.schemas.review_group import PendingInvitation, PendingInvitationListResponse
from reviewbox.services.membership import get_membership

logger = get_logger(__name__)

router = APIRouter(prefix="/invitations", tags=["invitations"])

InvitationId = Annotated[str, Path(description="Invitation ID")]


async def _get_pending_invitation(
    db: AsyncSession, invitation_id: str, user: Users
) -> Invitations:
    """
    Raises:
        NotFound: 404 unless the invitation is pending, addressed to the user,
            and its group still exists
    """
    result = await db.execute(
        select(Invitations)
        .join(ReviewGroups, ReviewGroups.id == Invitations.review_group_id)  # type: ignore[arg-type]
        .where(
            Invitations.id == invitation_id,  # type: ignore[arg-type]
            Invitations.invited_user_display_id == user.display_id,  # type: ignore[arg-type]
            Invitations.status == InvitationStatus.PENDING,  # type: ignore[arg-type]
            Invitations.deleted_at.is_(None),  # type: ignore[union-attr]
            ReviewGroups.deleted_at.is_(None),  # type: ignore[union-attr]
        )
    )
    invitation = result.scalar_one_or_none()
    if invitation is None:
        raise NotFound("Invitation not found")
    return invitation


@router.get("", response_model=PendingInvitationListResponse)
async def list_invitations(
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> PendingInvitationListResponse:
    """
    List the caller's pending invitations, newest first.
    """
    inviter = aliased(Users)
    result = await db.execute(
        select(Invitations, ReviewGroups, inviter)
        .join(ReviewGroups, ReviewGroups.id == Invitations.review_group_id)  # type: ignore[arg-type]
        .join(inviter, inviter.id == Invitations.inviter_id)  # type: ignore[arg-type]
        .where(
            Invitations.invited_user_display_id == current_user.display_id,  # type: ignore[arg-type]
            Invitations.status == InvitationStatus.PENDING,  # type: ignore[arg-type]
            Invitations.deleted_at.is_(None),  # type: ignore[union-attr]
            ReviewGroups.deleted_at.is_(None),  # type: ignore[union-attr]
        )
        .order_by(Invitations.created_at.desc())  # type: ignore[attr-defined]
    )

    invitations = [
        PendingInvitation(
            id=invitation.id,
            review_group_id=group.id,
            review_group_name=group.name,
            inviter=UserSummary.model_validate(sender),
            status=invitation.status,
            created_at=invitation.created_at,
        )
        for invitation, group, sender in result.all()
    ]
    return PendingInvitationListResponse(invitations=invitations)


@router.post("/{invitation_id}/accept", response_model=SuccessResponse)
async def accept_invitation(
    invitation_id: InvitationId,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> SuccessResponse:
    """
    Join the inviting group as a member.
    """
    invitation = await _get_pending_invitation(db, invitation_id, current_user)

    if await get_membership(db, invitation.review_group_id, current_user.id) is not None:
        raise Conflict("You are already a member of this group")

    db.add(
        ReviewGroupMembers(
            review_group_id=invitation.review_group_id,
            user_id=current_user.id,
            role=MemberRole.MEMBER,
        )
    )
    invitation.status = InvitationStatus.ACCEPTED
    invitation.responded_at = utcnow()
    await db.commit()

    logger.info(
        "invitation_accepted",
        invitation_id=invitation.id,
        review_group_id=invitation.review_group_id,
    )
    return SuccessResponse(message="Invitation accepted")


@router.post("/{invitation_id}/decline", response_model=SuccessResponse)
async def decline_invitation(
    invitation_id: InvitationId,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> SuccessResponse:
    invitation = await _get_pending_invitation(db, invitation_id, current_user)

    invitation.status = InvitationStatus.DECLINED
    invitation.responded_at = utcnow()
    await db.commit()

    logger.info("invitation_declined", invitation_id=invitation.id)
    return SuccessResponse(message="Invitation declined")
