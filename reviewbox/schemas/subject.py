"""
Pydantic schemas for review subject endpoints
"""

from typing import Any

from pydantic import BaseModel, Field, field_validator

from reviewbox.config import Limits
from reviewbox.schemas.base import RequestModel, UTCDatetime
from reviewbox.schemas.common import CriterionResponse, LatestReview


class SubjectWrite(RequestModel):
    """Schema for creating or editing a subject"""

    name: str
    images: list[str] | None = None
    # Free-form values keyed by the group's metadata field keys
    metadata: dict[str, Any] | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not 1 <= len(v) <= Limits.SUBJECT_NAME_MAX:
            raise ValueError(f"Name must be 1-{Limits.SUBJECT_NAME_MAX} characters")
        return v

    @field_validator("images")
    @classmethod
    def drop_blank_images(cls, v: list[str] | None) -> list[str] | None:
        if v is None:
            return None
        return [url for url in v if url.strip()] or None


class SubjectResponse(BaseModel):
    id: str
    review_group_id: str
    name: str
    images: list[str] | None = None
    metadata: dict[str, Any] | None = Field(default=None, validation_alias="metadata_values")
    created_by: str
    created_at: UTCDatetime
    updated_at: UTCDatetime

    model_config = {"from_attributes": True, "populate_by_name": True}


class SubjectWriteResponse(BaseModel):
    success: bool = True
    subject: SubjectResponse


class SubjectListItem(SubjectResponse):
    review_count: int
    average_score: float
    latest_review: LatestReview | None = None


class SubjectListResponse(BaseModel):
    success: bool = True
    subjects: list[SubjectListItem]


class CriterionAverage(BaseModel):
    criteria_id: str
    criteria_name: str
    average_score: float


class SubjectDetail(SubjectResponse):
    review_count: int
    average_score: float
    score_breakdown: list[CriterionAverage]


class GroupContext(BaseModel):
    """The parts of the owning group a subject page needs"""

    id: str
    name: str
    user_role: str
    metadata_fields: list[dict[str, Any]] | None = None
    evaluation_criteria: list[CriterionResponse]


class SubjectDetailResponse(BaseModel):
    success: bool = True
    subject: SubjectDetail
    group: GroupContext


class SubjectEditResponse(BaseModel):
    success: bool = True
    subject: SubjectResponse
    group: GroupContext
    can_edit: bool = True
