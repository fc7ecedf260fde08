"""
Authentication dependencies for FastAPI route protection.

This module provides dependency functions for:
- Extracting and verifying the provider-issued access token
- Building the per-request SessionContext that handlers receive
- Loading the current user row from the database

Identity is taken from the verified token only. Requests that try to name
the acting user themselves (a ``userId`` query parameter) are rejected.
"""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Cookie, Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from reviewbox.core.database import get_db
from reviewbox.core.errors import AuthenticationError, NotFound, ValidationError
from reviewbox.core.logging import bind_context
from reviewbox.core.security import verify_access_token
from reviewbox.models.user import Users

IDENTITY_QUERY_PARAMS = ("userId", "user_id")


@dataclass(frozen=True)
class SessionContext:
    """The verified caller of the current request."""

    user_id: str
    email: str | None = None


async def get_session_context(
    request: Request,
    access_token: Annotated[str | None, Cookie()] = None,
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(HTTPBearer(auto_error=False))
    ] = None,
) -> SessionContext:
    """
    Resolve the caller from the access token cookie or the Bearer header.

    Raises:
        ValidationError: 400 if the request supplies its own user id
        AuthenticationError: 401 if the token is missing, invalid, or expired
    """
    for param in IDENTITY_QUERY_PARAMS:
        if param in request.query_params:
            raise ValidationError("Client-supplied user identity is not accepted")

    token = access_token or (credentials.credentials if credentials else None)
    if not token:
        raise AuthenticationError("Not authenticated")

    claims = verify_access_token(token)
    if claims is None:
        raise AuthenticationError("Could not validate credentials")

    bind_context(user_id=claims.user_id)
    return SessionContext(user_id=claims.user_id, email=claims.email)


async def get_current_user(
    session: Annotated[SessionContext, Depends(get_session_context)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Users:
    """
    Load the registered user for the session.

    Raises:
        NotFound: 404 if the user has not completed registration
    """
    result = await db.execute(
        select(Users).where(
            Users.id == session.user_id,  # type: ignore[arg-type]
            Users.deleted_at.is_(None),  # type: ignore[union-attr]
        )
    )
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFound("User not found")
    return user


# Type aliases for dependency injection
CurrentSession = Annotated[SessionContext, Depends(get_session_context)]
CurrentUser = Annotated[Users, Depends(get_current_user)]
