"""JWT helpers for identifying the calling user.

Tokens are issued by the platform's identity provider; this service only needs
the ``sub`` claim (the user id). ``create_access_token`` exists for tooling and
tests that need to mint a token with the shared secret.
"""

from datetime import UTC, datetime, timedelta
from uuid import UUID

import jwt
from jwt import exceptions as jwt_exceptions

from orgtree.core.config import get_settings


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """Create a JWT access token.

    Args:
        data: Dictionary of claims to encode in the token
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    settings = get_settings()
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(UTC) + expires_delta
    else:
        expire = datetime.now(UTC) + timedelta(minutes=settings.jwt_access_token_expire_minutes)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict | None:
    """Decode and validate a JWT token.

    Args:
        token: JWT token string to decode

    Returns:
        Decoded token payload if valid, None otherwise
    """
    settings = get_settings()
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt_exceptions.PyJWTError:
        return None


def subject_user_id(token: str) -> UUID | None:
    """Return the user id carried in the token's ``sub`` claim, if valid."""
    payload = decode_token(token)
    if not payload or not payload.get("sub"):
        return None
    try:
        return UUID(str(payload["sub"]))
    except ValueError:
        return None
