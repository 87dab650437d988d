"""
Server-rendered pages.

Every page receives the caller's identity (or None) as ``user`` so the
templates can switch navigation between signed-in and anonymous states.
"""

from html import escape
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import RedirectResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession

from carrental.app.core.dependencies import get_current_user, get_optional_user
from carrental.app.core.guards import is_admin
from carrental.app.core.templating import templates
from carrental.app.db.session import get_db
from carrental.app.services import accounts, catalog

router = APIRouter(tags=["Pages"])

FEATURED_CAR_COUNT = 6

INFO_PAGES = {
    "locations": "Locations",
    "insurance": "Insurance",
    "support": "Support",
    "privacy-policy": "Privacy Policy",
    "terms-of-service": "Terms of Service",
    "cookie-policy": "Cookie Policy",
}


def render(request: Request, template: str, user: Optional[dict], **context):
    return templates.TemplateResponse(request, template, {"user": user, **context})


@router.get("/")
async def home(
    request: Request,
    user: Optional[dict] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db)
):
    cars = await catalog.list_cars(db, available_only=True)
    return render(request, "index.html", user, featured_cars=cars[:FEATURED_CAR_COUNT])


@router.get("/cars")
async def cars_page(
    request: Request,
    user: Optional[dict] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db)
):
    cars = await catalog.list_cars(db, available_only=True)
    return render(request, "cars.html", user, cars=cars)


@router.get("/signin")
async def signin_page(request: Request, user: Optional[dict] = Depends(get_optional_user)):
    return render(request, "signin.html", user, error=None, email="")


@router.get("/signup")
async def signup_page(request: Request, user: Optional[dict] = Depends(get_optional_user)):
    return render(request, "signup.html", user)


@router.get("/dashboard")
async def dashboard(
    request: Request,
    user: Optional[dict] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db)
):
    """Admin catalog dashboard; anonymous callers go to sign-in, customers home."""
    if user is None:
        return RedirectResponse("/signin", status_code=status.HTTP_303_SEE_OTHER)
    if not is_admin(user):
        return RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)

    cars = await catalog.list_cars(db)
    return render(request, "dashboard.html", user, cars=cars)


@router.get("/profile")
async def profile_page(
    request: Request,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    profile = await accounts.lookup(db, current_user["user_id"])
    return render(request, "profile.html", current_user, profile=profile)


@router.get("/booking")
async def booking_page(
    request: Request,
    car_id: Optional[str] = Query(None),
    user: Optional[dict] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db)
):
    cars = await catalog.list_cars(db, available_only=True)
    return render(request, "booking.html", user, cars=cars, selected_car_id=car_id)


@router.get("/book-success")
async def booking_success(request: Request, user: Optional[dict] = Depends(get_optional_user)):
    return render(request, "book_success.html", user)


def _info_page(slug: str, title: str):
    async def page(request: Request, user: Optional[dict] = Depends(get_optional_user)):
        return render(request, "info.html", user, title=title, slug=slug)

    page.__name__ = f"{slug.replace('-', '_')}_page"
    return page


for _slug, _title in INFO_PAGES.items():
    router.add_api_route(f"/{_slug}", _info_page(_slug, _title), methods=["GET"])


def _int_or(value: Optional[str], default: int) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return default
    return parsed if parsed > 0 else default


def _float_or(value: Optional[str], default: float) -> float:
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return default
    return parsed if parsed > 0 else default


@router.get("/placeholder.svg")
async def placeholder_svg(
    width: Optional[str] = Query(None),
    height: Optional[str] = Query(None),
    text: Optional[str] = Query(None),
    opacity: Optional[str] = Query(None)
):
    """Generated placeholder image for cars without an uploaded picture."""
    w = _int_or(width, 1200)
    h = _int_or(height, 400)
    alpha = _float_or(opacity, 0.06)
    label = escape(text or "", quote=True)

    svg = (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f"<svg xmlns='http://www.w3.org/2000/svg' width='{w}' height='{h}' viewBox='0 0 {w} {h}'>"
        "<rect width='100%' height='100%' fill='#f3f4f6' />"
        f"<text x='50%' y='50%' dominant-baseline='middle' text-anchor='middle' fill='#9ca3af' "
        f"opacity='{alpha}' font-family='Arial, Helvetica, sans-serif' font-size='24'>{label}</text>"
        "</svg>"
    )
    return Response(content=svg, media_type="image/svg+xml")
