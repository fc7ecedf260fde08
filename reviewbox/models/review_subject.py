"""
SQLModel-based review subject models.

A subject is the thing being reviewed inside a group (a drama, a
restaurant...). Its metadata is keyed by the group's metadata_fields schema
but is stored exactly as submitted.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

from reviewbox.models.base import new_id, utcnow


class ReviewSubjectBase(SQLModel):
    name: str = Field(max_length=200)


class ReviewSubjects(ReviewSubjectBase, table=True):
    __tablename__ = "review_subjects"  # type: ignore[assignment]

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    review_group_id: str = Field(foreign_key="review_groups.id", max_length=36, index=True)
    images: list[str] | None = Field(default=None, sa_column=Column(JSON, nullable=True))
    metadata_values: dict[str, Any] | None = Field(
        default=None, sa_column=Column("metadata", JSON, nullable=True)
    )
    created_by: str = Field(foreign_key="users.id", max_length=36)

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    deleted_at: datetime | None = Field(default=None)
