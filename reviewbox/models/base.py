"""
Shared column helpers for the SQLModel tables.

Primary keys are string UUIDs so rows can be referenced before they are
flushed, and every timestamp is written timezone-aware in UTC.
"""

from datetime import UTC, datetime
from uuid import uuid4


def new_id() -> str:
    """Generate a primary key value."""
    return str(uuid4())


def utcnow() -> datetime:
    return datetime.now(UTC)
