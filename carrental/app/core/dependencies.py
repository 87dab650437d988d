"""
Authentication dependencies for FastAPI.

The session token is read from the ``token`` cookie first and from an
``Authorization: Bearer`` header second. Identity lives on the request
(``request.state.user``); nothing about the caller is kept at module level.
"""

import logging
from typing import Optional, Dict, Any
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from carrental.app.core.config import settings
from carrental.app.core.exceptions import AuthenticationError, InvalidTokenError
from carrental.app.core.jwt import decode_access_token

logger = logging.getLogger("carrental.auth")


def extract_token(request: Request) -> Optional[str]:
    """Return the raw session token carried by the request, if any."""
    token = request.cookies.get(settings.session_cookie_name)
    if token:
        return token

    authorization = request.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return None


def resolve_identity(request: Request) -> Optional[Dict[str, Any]]:
    """Best-effort decode of the request's token; never raises."""
    token = extract_token(request)
    if not token:
        return None
    try:
        return decode_access_token(token)
    except InvalidTokenError:
        return None


class SessionIdentityMiddleware(BaseHTTPMiddleware):
    """
    Attach the caller's identity to every request.

    Sets ``request.state.user`` to the decoded token claims, or None for
    anonymous callers and unverifiable tokens. Never rejects a request.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request.state.user = resolve_identity(request)
        return await call_next(request)


async def get_optional_user(request: Request) -> Optional[Dict[str, Any]]:
    """
    FastAPI dependency for page routes: decoded claims or None.
    """
    user = getattr(request.state, "user", None)
    if user is None:
        user = resolve_identity(request)
        request.state.user = user
    return user


async def get_current_user(request: Request) -> Dict[str, Any]:
    """
    FastAPI dependency for routes that require a signed-in caller.

    Returns:
        Decoded token payload (sub, user_id, email, name, is_admin, exp)

    Raises:
        AuthenticationError: 401 when no token is present
        InvalidTokenError: 403 when a token is present but cannot be verified
    """
    token = extract_token(request)
    if not token:
        raise AuthenticationError("Authentication required")

    try:
        payload = decode_access_token(token)
    except InvalidTokenError:
        logger.warning("Rejected invalid session token on %s", request.url.path)
        raise

    request.state.user = payload
    return payload
