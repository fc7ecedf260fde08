"""
Invitations to join a review group, addressed by the invitee's display_id.
"""

from datetime import datetime

from sqlalchemy import Index
from sqlmodel import Field, SQLModel

from reviewbox.config import InvitationStatus
from reviewbox.models.base import new_id, utcnow


class Invitations(SQLModel, table=True):
    __tablename__ = "invitations"  # type: ignore[assignment]
    __table_args__ = (
        Index(
            "ix_invitations_group_display_status",
            "review_group_id",
            "invited_user_display_id",
            "status",
        ),
    )

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    review_group_id: str = Field(foreign_key="review_groups.id", max_length=36)
    inviter_id: str = Field(foreign_key="users.id", max_length=36)
    invited_user_display_id: str = Field(max_length=12, index=True)
    status: str = Field(default=InvitationStatus.PENDING, max_length=20)

    created_at: datetime = Field(default_factory=utcnow)
    responded_at: datetime | None = Field(default=None)
    deleted_at: datetime | None = Field(default=None)
