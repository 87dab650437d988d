"""
Security guards for role-based access control.
"""

from typing import Any, Dict, Optional
from fastapi import Depends
from carrental.app.core.dependencies import get_current_user
from carrental.app.core.exceptions import InsufficientPermissionsError


def is_admin(user: Optional[Dict[str, Any]]) -> bool:
    return bool(user and user.get("is_admin"))


def require_admin(current_user: dict = Depends(get_current_user)) -> dict:
    """
    Dependency for admin-only endpoints.

    Usage:
        @router.post("/api/cars")
        async def create_car(admin: dict = Depends(require_admin)):
            ...

    Args:
        current_user: Authenticated user from the session token

    Returns:
        User payload if admin, raises 403 otherwise
    """
    if not is_admin(current_user):
        raise InsufficientPermissionsError("Admin access required")

    return current_user
