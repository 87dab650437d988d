"""
JWT token utilities for session authentication.

This module provides functions for encoding and decoding the signed session
token carried in the ``token`` cookie (or an ``Authorization`` header).
Tokens are self-contained: there is no revocation list, so a token stays
valid for its whole lifetime even after logout.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any, Tuple
from jose import JWTError, jwt
from carrental.app.core.config import settings
from carrental.app.core.exceptions import InvalidTokenError


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token.

    Args:
        data: Data payload to encode in the token (should include: sub, user_id, is_admin)
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string

    Example payload:
        {
            "sub": "3f2a...",
            "user_id": "3f2a...",
            "email": "jane@example.com",
            "name": "Jane Doe",
            "is_admin": false,
            "exp": 1234567890
        }
    """
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)

    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)

    return encoded_jwt


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Decode and validate a JWT access token.

    Args:
        token: JWT token string to decode

    Returns:
        Decoded token payload (includes: sub, user_id, email, name, is_admin, exp)

    Raises:
        InvalidTokenError: bad signature, malformed payload or expired token
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        raise InvalidTokenError()

    if not isinstance(payload, dict) or not payload.get("user_id"):
        raise InvalidTokenError()

    return payload


def session_claims(user) -> Dict[str, Any]:
    """Claims embedded in a session token for the given user row."""
    return {
        "sub": user.id,
        "user_id": user.id,
        "email": user.email,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "name": f"{user.first_name} {user.last_name}".strip(),
        "is_admin": bool(user.is_admin),
    }


def session_lifetime(remember: bool = False) -> timedelta:
    if remember:
        return timedelta(days=settings.remember_token_expire_days)
    return timedelta(minutes=settings.access_token_expire_minutes)


def issue_session_token(user, remember: bool = False) -> Tuple[str, int]:
    """
    Mint a session token for a user.

    Returns:
        (token, max_age_seconds) where max_age matches the token expiry,
        24 hours by default or 30 days when ``remember`` is set.
    """
    lifetime = session_lifetime(remember)
    token = create_access_token(session_claims(user), expires_delta=lifetime)
    return token, int(lifetime.total_seconds())
