"""
SQLModel-based User models with inheritance for security

UserBase (shared public fields)
    ├─> Users (database table, adds internal fields)
    └─> UserResponse/ProfileResponse (API schemas, defined in reviewbox/schemas)

A row is created the first time a signed-in user completes registration;
its primary key is the OAuth subject from the access token.
"""

from datetime import datetime

from sqlalchemy import Index
from sqlmodel import Field, SQLModel

from reviewbox.models.base import utcnow


class UserBase(SQLModel):
    """
    Base model with shared public fields for Users.

    These fields are safe to show to other members of a review group.
    """

    username: str | None = Field(default=None, max_length=10)
    # Public handle other users invite by (numeric string, unique)
    display_id: str = Field(max_length=12)
    avatar_url: str | None = Field(default=None, max_length=500)


class Users(UserBase, table=True):
    """
    Database table for users.

    Internal fields (not exposed to other users):
    - email: Privacy-sensitive, comes from the OAuth provider
    - timestamps and soft-delete marker
    """

    __tablename__ = "users"  # type: ignore[assignment]
    __table_args__ = (Index("ux_users_display_id", "display_id", unique=True),)

    id: str = Field(primary_key=True, max_length=36)
    email: str | None = Field(default=None, max_length=255)

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    deleted_at: datetime | None = Field(default=None)
