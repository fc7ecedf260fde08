"""
Pydantic schemas for review endpoints
"""

from typing import Any

from pydantic import BaseModel, field_validator

from reviewbox.schemas.base import RequestModel, UTCDatetime
from reviewbox.schemas.common import CriterionResponse, UserSummary


class ReviewWrite(RequestModel):
    """
    Schema for creating or editing the caller's review.

    scores maps evaluation criterion id to an integer star rating. Only
    emptiness is checked here: value types, range and completeness against
    the group's criteria are checked by the handler after its duplicate
    review check.
    """

    comment: str | None = None
    scores: dict[str, Any]
    images: list[str] | None = None

    @field_validator("scores")
    @classmethod
    def require_scores(cls, v: dict[str, Any]) -> dict[str, Any]:
        if not v:
            raise ValueError("Scores required")
        return v

    @field_validator("comment")
    @classmethod
    def strip_comment(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None

    @field_validator("images")
    @classmethod
    def drop_blank_images(cls, v: list[str] | None) -> list[str] | None:
        if v is None:
            return None
        return [url for url in v if url.strip()] or None


class ScoreResponse(BaseModel):
    criteria_id: str
    criteria_name: str
    score: int


class ReviewResponse(BaseModel):
    id: str
    comment: str | None = None
    total_score: float
    images: list[str] | None = None
    created_at: UTCDatetime
    updated_at: UTCDatetime
    user: UserSummary
    evaluation_scores: list[ScoreResponse]


class ReviewListResponse(BaseModel):
    success: bool = True
    reviews: list[ReviewResponse]


class ReviewCreated(BaseModel):
    id: str
    total_score: float


class ReviewCreateResponse(BaseModel):
    success: bool = True
    message: str = "Review created successfully"
    review: ReviewCreated


class ReviewGroupContext(BaseModel):
    id: str
    name: str
    user_role: str
    evaluation_criteria: list[CriterionResponse]


class ReviewSubjectContext(BaseModel):
    id: str
    name: str
    images: list[str] | None = None


class OwnReviewResponse(BaseModel):
    success: bool = True
    review: ReviewResponse
    group: ReviewGroupContext
    subject: ReviewSubjectContext
