"""
SQLModel-based review group models.

ReviewGroupBase (shared public fields)
    ├─> ReviewGroups (database table)
    └─> ReviewGroupResponse (API schema, defined in reviewbox/schemas)

ReviewGroupMembers joins users to groups with a role; EvaluationCriteria are
the per-group rating axes, written once when the group is created.

Note: Relationships are intentionally omitted. Foreign keys are sufficient
for the explicit joins the handlers run, and omitting them avoids accidental
lazy loads under the async session.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Column, Index
from sqlmodel import Field, SQLModel

from reviewbox.config import MemberRole
from reviewbox.models.base import new_id, utcnow


class ReviewGroupBase(SQLModel):
    """Base model with the public fields of a review group."""

    name: str = Field(max_length=100)
    description: str | None = Field(default=None, max_length=500)
    is_private: bool = Field(default=True)
    image_url: str | None = Field(default=None, max_length=500)


class ReviewGroups(ReviewGroupBase, table=True):
    """
    Database table for review groups.

    metadata_fields holds the schema subjects' metadata is entered against:
    a list of {key, label, type, options, required} objects.
    """

    __tablename__ = "review_groups"  # type: ignore[assignment]

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    category_id: str = Field(foreign_key="categories.id", max_length=36, index=True)
    metadata_fields: list[dict[str, Any]] | None = Field(
        default=None, sa_column=Column(JSON, nullable=True)
    )

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    deleted_at: datetime | None = Field(default=None)


class ReviewGroupMembers(SQLModel, table=True):
    """Membership of a user in a review group with one of MemberRole's roles."""

    __tablename__ = "review_group_members"  # type: ignore[assignment]
    __table_args__ = (
        Index("ix_review_group_members_group_user", "review_group_id", "user_id"),
    )

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    review_group_id: str = Field(foreign_key="review_groups.id", max_length=36)
    user_id: str = Field(foreign_key="users.id", max_length=36, index=True)
    role: str = Field(default=MemberRole.MEMBER, max_length=20)
    joined_at: datetime = Field(default_factory=utcnow)
    deleted_at: datetime | None = Field(default=None)


class EvaluationCriteria(SQLModel, table=True):
    """A rating axis of a review group (e.g. "Taste", "Price")."""

    __tablename__ = "evaluation_criteria"  # type: ignore[assignment]

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    review_group_id: str = Field(foreign_key="review_groups.id", max_length=36, index=True)
    name: str = Field(max_length=100)
    order_index: int = Field(default=0)
    created_at: datetime = Field(default_factory=utcnow)
    deleted_at: datetime | None = Field(default=None)
