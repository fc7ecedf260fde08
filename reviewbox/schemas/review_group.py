"""
Pydantic schemas for review group endpoints
"""

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from reviewbox.config import Limits, MetadataFieldType
from reviewbox.schemas.base import RequestModel, UTCDatetime
from reviewbox.schemas.common import CategorySummary, CriterionResponse, UserSummary


def _validate_group_name(v: str) -> str:
    v = v.strip()
    if not 1 <= len(v) <= Limits.GROUP_NAME_MAX:
        raise ValueError(f"Group name must be 1-{Limits.GROUP_NAME_MAX} characters")
    return v


def _validate_description(v: str | None) -> str | None:
    if v is None:
        return None
    v = v.strip()
    if len(v) > Limits.DESCRIPTION_MAX:
        raise ValueError(f"Description must be {Limits.DESCRIPTION_MAX} characters or less")
    return v or None


class MetadataField(RequestModel):
    """One entry of a group's subject metadata schema."""

    key: str = Field(min_length=1, max_length=50)
    label: str = Field(min_length=1, max_length=100)
    type: Literal["text", "select"] = MetadataFieldType.TEXT
    options: list[str] | None = None
    required: bool = False

    @model_validator(mode="after")
    def check_options(self) -> "MetadataField":
        if self.type == MetadataFieldType.SELECT:
            options = [option.strip() for option in self.options or [] if option.strip()]
            if not options:
                raise ValueError(f"Select field '{self.key}' needs at least one option")
            self.options = options
        else:
            self.options = None
        return self


class CriterionInput(RequestModel):
    name: str


class ReviewGroupCreate(RequestModel):
    """Schema for creating a review group"""

    name: str
    description: str | None = None
    category_id: str
    is_private: bool = True
    metadata_fields: list[MetadataField] | None = None
    # Accepts ["Taste", "Price"] or [{"name": "Taste"}, {"name": "Price"}]
    evaluation_criteria: list[CriterionInput]
    image_url: str | None = Field(default=None, max_length=500)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _validate_group_name(v)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str | None) -> str | None:
        return _validate_description(v)

    @field_validator("evaluation_criteria", mode="before")
    @classmethod
    def wrap_plain_names(cls, v: Any) -> Any:
        if isinstance(v, list):
            return [{"name": item} if isinstance(item, str) else item for item in v]
        return v

    @field_validator("evaluation_criteria")
    @classmethod
    def validate_criteria(cls, v: list[CriterionInput]) -> list[CriterionInput]:
        criteria = [CriterionInput(name=c.name.strip()) for c in v if c.name.strip()]
        if not criteria:
            raise ValueError("At least one evaluation criteria is required")
        for criterion in criteria:
            if len(criterion.name) > Limits.CRITERION_NAME_MAX:
                raise ValueError(
                    f"Criteria name must be {Limits.CRITERION_NAME_MAX} characters or less"
                )
        return criteria

    @field_validator("metadata_fields")
    @classmethod
    def validate_metadata_fields(cls, v: list[MetadataField] | None) -> list[MetadataField] | None:
        if not v:
            return None
        if len(v) > Limits.METADATA_FIELDS_MAX:
            raise ValueError(f"At most {Limits.METADATA_FIELDS_MAX} metadata fields are allowed")
        keys = [field.key for field in v]
        if len(keys) != len(set(keys)):
            raise ValueError("Metadata field keys must be unique")
        return v


class ReviewGroupUpdate(RequestModel):
    """Schema for updating group settings (evaluation criteria are not editable)"""

    name: str
    description: str | None = None
    is_private: bool = True
    image_url: str | None = Field(default=None, max_length=500)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _validate_group_name(v)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str | None) -> str | None:
        return _validate_description(v)


class ReviewGroupCreated(BaseModel):
    id: str
    name: str
    description: str | None = None


class ReviewGroupCreateResponse(BaseModel):
    success: bool = True
    review_group: ReviewGroupCreated


class ReviewGroupResponse(BaseModel):
    """A review group as stored, without per-caller details"""

    id: str
    name: str
    description: str | None = None
    is_private: bool
    image_url: str | None = None
    category_id: str
    metadata_fields: list[dict[str, Any]] | None = None
    created_at: UTCDatetime
    updated_at: UTCDatetime

    model_config = {"from_attributes": True}


class ReviewGroupUpdateResponse(BaseModel):
    success: bool = True
    group: ReviewGroupResponse


class MyReviewGroup(BaseModel):
    """A group in the caller's group list"""

    id: str
    name: str
    description: str | None = None
    is_private: bool
    image_url: str | None = None
    created_at: UTCDatetime
    category: CategorySummary
    role: str
    joined_at: UTCDatetime


class MyReviewGroupListResponse(BaseModel):
    success: bool = True
    review_groups: list[MyReviewGroup]


class ReviewGroupDetail(BaseModel):
    id: str
    name: str
    description: str | None = None
    image_url: str | None = None
    is_private: bool
    metadata_fields: list[dict[str, Any]] | None = None
    created_at: UTCDatetime
    category: CategorySummary
    member_count: int
    user_role: str
    evaluation_criteria: list[CriterionResponse]


class ReviewGroupDetailResponse(BaseModel):
    success: bool = True
    group: ReviewGroupDetail


class MemberResponse(BaseModel):
    id: str
    username: str | None = None
    display_id: str
    avatar_url: str | None = None
    role: str
    joined_at: UTCDatetime


class MemberListResponse(BaseModel):
    success: bool = True
    members: list[MemberResponse]


class InviteRequest(RequestModel):
    invited_user_display_id: str = Field(min_length=1, max_length=12)

    @field_validator("invited_user_display_id")
    @classmethod
    def strip_display_id(cls, v: str) -> str:
        v = v.strip()
        if not v.isdigit():
            raise ValueError("Display ID must be numeric")
        return v


class InvitationResponse(BaseModel):
    id: str
    review_group_id: str
    inviter_id: str
    invited_user_display_id: str
    status: str
    created_at: UTCDatetime

    model_config = {"from_attributes": True}


class InviteResponse(BaseModel):
    success: bool = True
    message: str
    invitation: InvitationResponse


class PendingInvitation(BaseModel):
    id: str
    review_group_id: str
    review_group_name: str
    inviter: UserSummary
    status: str
    created_at: UTCDatetime


class PendingInvitationListResponse(BaseModel):
    success: bool = True
    invitations: list[PendingInvitation]
