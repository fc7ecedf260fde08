"""
Shared/common Pydantic schemas used across multiple endpoints
"""

from pydantic import BaseModel

from reviewbox.schemas.base import UTCDatetime


class UserSummary(BaseModel):
    """
    Minimal user information for embedding in responses.

    Used across member, review and invitation endpoints so clients can show
    who did something without fetching the full profile.
    """

    id: str
    username: str | None = None
    display_id: str
    avatar_url: str | None = None

    # Allow Pydantic to read from SQLModel attributes (not just dicts)
    model_config = {"from_attributes": True}


class CategorySummary(BaseModel):
    id: str
    name: str
    icon: str | None = None

    model_config = {"from_attributes": True}


class CriterionResponse(BaseModel):
    id: str
    name: str
    order_index: int

    model_config = {"from_attributes": True}


class LatestReview(BaseModel):
    comment: str | None = None
    total_score: float
    created_at: UTCDatetime
    user: UserSummary
