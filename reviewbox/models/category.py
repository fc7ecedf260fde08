"""
Category reference data (dramas, restaurants, ...).

Rows are seeded by migration and never modified through the API.
"""

from datetime import datetime

from sqlmodel import Field, SQLModel

from reviewbox.models.base import new_id, utcnow


class Categories(SQLModel, table=True):
    __tablename__ = "categories"  # type: ignore[assignment]

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    name: str = Field(max_length=50)
    icon: str | None = Field(default=None, max_length=50)
    order_index: int = Field(default=0, index=True)
    created_at: datetime = Field(default_factory=utcnow)
