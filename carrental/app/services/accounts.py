"""
Credential store: registration, authentication and user lookup.
"""

import logging
from typing import Optional, Tuple

from pydantic import ValidationError as SchemaValidationError
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from carrental.app.core.exceptions import (
    AuthenticationError,
    ConflictError,
    ResourceNotFoundError,
    ValidationError,
)
from carrental.app.core.jwt import issue_session_token
from carrental.app.core.security import get_password_hash, verify_password
from carrental.app.models.user import User
from carrental.app.schemas.auth import UserRegister

logger = logging.getLogger("carrental.accounts")

INVALID_CREDENTIALS = "Invalid email or password"


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


async def find_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def register(
    db: AsyncSession,
    first_name: str,
    last_name: str,
    email: str,
    phone: str,
    password: str,
    is_admin: bool = False
) -> Tuple[User, str]:
    """
    Create a user account and issue a 24 hour session token.

    Raises:
        ValidationError: a field is blank or malformed
        ConflictError: the email is already registered
    """
    if not all([first_name, last_name, email, phone, password]):
        raise ValidationError("All fields are required")

    email = normalize_email(email)

    try:
        data = UserRegister(
            first_name=first_name,
            last_name=last_name,
            email=email,
            phone=phone,
            password=password
        )
    except SchemaValidationError as exc:
        raise ValidationError(
            "Invalid registration details",
            details={"fields": [".".join(str(part) for part in error["loc"]) for error in exc.errors()]}
        )

    if await find_by_email(db, data.email):
        raise ConflictError("Email already registered")

    user = User(
        first_name=data.first_name,
        last_name=data.last_name,
        email=data.email,
        phone=data.phone,
        hashed_password=get_password_hash(data.password),
        is_admin=is_admin
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration of the same email
        await db.rollback()
        raise ConflictError("Email already registered")
    await db.refresh(user)

    token, _ = issue_session_token(user)
    logger.info("User registered: %s", user.email)
    return user, token


async def authenticate(
    db: AsyncSession,
    email: str,
    password: str,
    remember: bool = False
) -> Tuple[User, str]:
    """
    Verify credentials and issue a session token.

    The same error is raised for an unknown email and a wrong password.
    """
    email = normalize_email(email)
    user = await find_by_email(db, email) if email else None

    if user is None or not verify_password(password, user.hashed_password):
        logger.warning("Failed login attempt for %s", email)
        raise AuthenticationError(INVALID_CREDENTIALS)

    token, _ = issue_session_token(user, remember=remember)
    logger.info("User logged in: %s", user.email)
    return user, token


async def lookup(db: AsyncSession, user_id: str) -> User:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise ResourceNotFoundError("User", user_id)
    return user
