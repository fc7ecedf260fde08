"""
Pydantic schemas for registration and profile endpoints
"""

from pydantic import BaseModel, Field, field_validator

from reviewbox.config import Limits
from reviewbox.models.user import UserBase
from reviewbox.schemas.base import RequestModel


def _validate_username(v: str) -> str:
    v = v.strip()
    if not 1 <= len(v) <= Limits.USERNAME_MAX:
        raise ValueError(f"Username must be 1-{Limits.USERNAME_MAX} characters")
    return v


class RegisterRequest(RequestModel):
    """First-login registration: the only thing the user chooses is a username."""

    username: str

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        return _validate_username(v)


class RegistrationStatusResponse(BaseModel):
    success: bool = True
    exists: bool
    needs_username: bool


class ProfileUpdate(RequestModel):
    """Schema for updating the caller's profile"""

    username: str
    avatar_url: str | None = Field(default=None, max_length=500)

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        return _validate_username(v)

    @field_validator("avatar_url")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return v.strip() or None


class UserResponse(UserBase):
    """Schema for user response - what API returns"""

    id: str

    model_config = {"from_attributes": True}


class ProfileResponse(BaseModel):
    success: bool = True
    user: UserResponse
