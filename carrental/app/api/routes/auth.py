"""
Account endpoints: register, login, logout and profile.

Register and login receive the sign-up/sign-in HTML forms and answer with a
redirect that carries the session cookie.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import RedirectResponse, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from carrental.app.core.config import settings
from carrental.app.core.dependencies import get_current_user
from carrental.app.core.exceptions import AuthenticationError, InternalError
from carrental.app.core.jwt import session_lifetime
from carrental.app.core.templating import templates
from carrental.app.db.session import get_db
from carrental.app.schemas.auth import ProfileResponse
from carrental.app.services import accounts

logger = logging.getLogger("carrental.api.auth")

router = APIRouter(tags=["Authentication"])

TRUTHY = {"1", "true", "on", "yes"}


def is_truthy(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in TRUTHY


def set_session_cookie(response: Response, token: str, remember: bool = False) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=int(session_lifetime(remember).total_seconds()),
        httponly=True,
        secure=settings.production,
        samesite="lax",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(settings.session_cookie_name)


@router.post("/api/register")
async def register(
    first_name: Optional[str] = Form(None, alias="firstName"),
    last_name: Optional[str] = Form(None, alias="lastName"),
    email: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    db: AsyncSession = Depends(get_db)
):
    """
    Register a new customer account.

    Sets the session cookie and redirects to the sign-in page.
    """
    try:
        user, token = await accounts.register(db, first_name, last_name, email, phone, password)
    except SQLAlchemyError as exc:
        logger.exception("Registration error")
        raise InternalError("Registration failed") from exc

    response = RedirectResponse("/signin", status_code=status.HTTP_303_SEE_OTHER)
    set_session_cookie(response, token)
    return response


@router.post("/api/login")
async def login(
    request: Request,
    email: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    remember: Optional[str] = Form(None),
    db: AsyncSession = Depends(get_db)
):
    """
    Sign in with email and password.

    Admins land on the dashboard, everyone else on the home page. Failures
    re-render the sign-in form with an inline message.
    """
    remember_me = is_truthy(remember)
    try:
        user, token = await accounts.authenticate(db, email, password, remember=remember_me)
    except AuthenticationError as exc:
        return templates.TemplateResponse(
            request,
            "signin.html",
            {"error": exc.message, "email": email or "", "user": None},
            status_code=exc.status_code
        )
    except SQLAlchemyError:
        logger.exception("Login error")
        return templates.TemplateResponse(
            request,
            "signin.html",
            {"error": "An error occurred during login. Please try again.", "email": email or "", "user": None},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    target = "/dashboard" if user.is_admin else "/"
    response = RedirectResponse(target, status_code=status.HTTP_303_SEE_OTHER)
    set_session_cookie(response, token, remember=remember_me)
    return response


@router.post("/api/logout")
async def logout():
    """Clear the session cookie. The token itself stays valid until it expires."""
    response = RedirectResponse("/signin", status_code=status.HTTP_303_SEE_OTHER)
    clear_session_cookie(response)
    return response


@router.get("/logout")
async def logout_link():
    return await logout()


@router.get("/api/profile")
async def get_profile(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Get the signed-in user's profile.

    Raises:
        404: If the token's user no longer exists
    """
    user = await accounts.lookup(db, current_user["user_id"])
    return {"user": ProfileResponse.model_validate(user).model_dump(mode="json")}
