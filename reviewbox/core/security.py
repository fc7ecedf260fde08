"""
Access token handling.

Sign-in happens at the external OAuth provider, which hands the client an
HS256 JWT signed with the shared SECRET_KEY. This module verifies those
tokens and can mint tokens of the same shape for local development and
tests.

Claims used:
- sub: the user's id (also the primary key of the users table)
- email: the address the provider authenticated
- aud: must equal settings.AUTH_JWT_AUDIENCE
- exp: expiry
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import jwt

from reviewbox.config import settings


@dataclass(frozen=True)
class TokenClaims:
    """The identity claims extracted from a verified access token."""

    user_id: str
    email: str | None


def create_access_token(
    user_id: str, email: str | None = None, expires_delta: timedelta | None = None
) -> str:
    """
    Create a JWT access token in the provider's format.

    Args:
        user_id: The user ID to encode in the token
        email: Optional email claim
        expires_delta: Optional custom expiration time (defaults to settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    Returns:
        Encoded JWT token string
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    payload = {
        "sub": user_id,
        "email": email,
        "aud": settings.AUTH_JWT_AUDIENCE,
        "exp": datetime.now(UTC) + expires_delta,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_access_token(token: str) -> TokenClaims | None:
    """
    Verify and decode an access token.

    Returns:
        The token's claims if signature, audience and expiry check out, None otherwise
    """
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            audience=settings.AUTH_JWT_AUDIENCE,
            options={"verify_exp": True, "verify_signature": True, "require": ["sub", "exp"]},
        )
    except jwt.PyJWTError:
        return None

    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not user_id:
        return None

    email = payload.get("email")
    return TokenClaims(user_id=user_id, email=email if isinstance(email, str) else None)
