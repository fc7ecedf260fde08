"""
Base schema pieces shared by request and response models.

Provides UTCDatetime type annotation that serializes datetime
objects with Z suffix indicating UTC timezone, and RequestModel, the base
for every JSON request body.
"""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

# Custom datetime type that serializes with Z suffix for UTC
# Usage: created_at: UTCDatetime instead of created_at: datetime
UTCDatetime = Annotated[
    datetime,
    PlainSerializer(
        lambda dt: dt.strftime("%Y-%m-%dT%H:%M:%SZ") if dt else None,
        return_type=str,
    ),
]

# Optional version for nullable datetime fields
UTCDatetimeOptional = Annotated[
    datetime | None,
    PlainSerializer(
        lambda dt: dt.strftime("%Y-%m-%dT%H:%M:%SZ") if dt else None,
        return_type=str | None,
    ),
]


class RequestModel(BaseModel):
    """
    Base for JSON request bodies.

    Accepts snake_case or camelCase keys (the web client sends camelCase) and
    rejects unknown keys, so a body cannot smuggle in a userId.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


class SuccessResponse(BaseModel):
    """Plain acknowledgement body."""

    success: bool = True
    message: str | None = None
