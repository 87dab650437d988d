"""
Booking endpoints.

POST /book is the priced booking form; POST /bookings is the raw booking
submission used by the booking modal. They share the store but not the rules.
"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import PlainTextResponse, RedirectResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from carrental.app.core.dependencies import get_current_user, get_optional_user
from carrental.app.core.exceptions import InternalError, ValidationError
from carrental.app.core.templating import templates
from carrental.app.db.session import get_db
from carrental.app.schemas.booking import RawBookingSubmission
from carrental.app.services import bookings, catalog

logger = logging.getLogger("carrental.api.bookings")

router = APIRouter(tags=["Bookings"])


def parse_date(value: Optional[str], field: str) -> Optional[date]:
    if value is None or not value.strip():
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        raise ValidationError(f"Invalid date for {field}", details={"field": field, "value": value})


@router.post("/book")
async def submit_booking_with_pricing(
    car_id: Optional[str] = Form(None),
    start_date: Optional[str] = Form(None),
    end_date: Optional[str] = Form(None),
    name: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    current_user: Optional[dict] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Book a car from the booking form.

    The total is the daily price times the number of rental days. Signed-in
    submitters are linked to the booking by user id. An unknown car is
    reported before any problem with the dates.
    """
    await catalog.get_car(db, car_id)

    start = parse_date(start_date, "start_date")
    end = parse_date(end_date, "end_date")

    try:
        await bookings.submit_booking_with_pricing(
            db,
            car_id=car_id,
            user_id=current_user["user_id"] if current_user else None,
            name=name,
            start_date=start,
            end_date=end,
            email=email,
            phone=phone,
            location=location
        )
    except SQLAlchemyError as exc:
        logger.exception("Error saving booking for car %s", car_id)
        raise InternalError("Error saving booking") from exc

    return RedirectResponse("/book-success", status_code=status.HTTP_303_SEE_OTHER)


async def read_submission(request: Request) -> RawBookingSubmission:
    """
    Parse the booking modal's body, sent either as JSON or as a form.

    Raises:
        ValueError: undecodable JSON or a field that fails validation
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        payload = await request.json()
    else:
        form = await request.form()
        payload = {key: value for key, value in form.items() if isinstance(value, str)}
    return RawBookingSubmission.model_validate(payload)


@router.post("/bookings", response_class=PlainTextResponse)
async def submit_booking_raw(
    request: Request,
    db: AsyncSession = Depends(get_db)
):
    """
    Save a booking as submitted, with a zero total and no checks.

    Any failure, from an unreadable body to a rejected row, answers with the
    same plain-text 500.
    """
    try:
        submission = await read_submission(request)
        await bookings.submit_booking_raw(
            db,
            car_id=submission.carId,
            name=submission.name,
            start_date=submission.startDate,
            end_date=submission.endDate,
            email=submission.email,
            phone=submission.phone,
            location=submission.location
        )
    except (ValueError, SQLAlchemyError):
        logger.exception("Error saving raw booking")
        return PlainTextResponse("Error saving booking", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return PlainTextResponse("Booking saved")


@router.get("/bookings")
async def my_bookings(
    request: Request,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Render the signed-in user's bookings."""
    items = await bookings.list_bookings_for_user(db, current_user["user_id"])
    return templates.TemplateResponse(
        request,
        "bookings.html",
        {"bookings": items, "user": current_user}
    )
