"""
Booking store.

Two submission paths share the bookings table:

* ``submit_booking_with_pricing`` (POST /book) checks the car, validates the
  date range and prices the booking.
* ``submit_booking_raw`` (POST /bookings) stores what it is given with a zero
  total and no checks, putting the customer's name in ``user_id``.
"""

import logging
import math
from datetime import date
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from carrental.app.core.exceptions import ValidationError
from carrental.app.models.booking import Booking, BookingStatus
from carrental.app.models.car import Car
from carrental.app.schemas.booking import BookingListItem, BookingResponse
from carrental.app.services.catalog import get_car

logger = logging.getLogger("carrental.bookings")

SECONDS_PER_DAY = 24 * 60 * 60


def rental_days(start_date: date, end_date: date) -> int:
    """Whole days charged for a rental, rounding any partial day up."""
    return math.ceil((end_date - start_date).total_seconds() / SECONDS_PER_DAY)


def calculate_total_price(daily_price: int, start_date: date, end_date: date) -> int:
    return rental_days(start_date, end_date) * int(daily_price)


async def submit_booking_with_pricing(
    db: AsyncSession,
    car_id: str,
    user_id: Optional[str],
    name: Optional[str],
    start_date: Optional[date],
    end_date: Optional[date],
    email: Optional[str] = None,
    phone: Optional[str] = None,
    location: Optional[str] = None
) -> Booking:
    """
    Create a priced booking for an existing car.

    Args:
        user_id: session user id when the submitter is signed in, else None
        name: customer name as typed into the booking form

    Raises:
        ResourceNotFoundError: unknown car
        ValidationError: missing dates or end date not after start date
    """
    car = await get_car(db, car_id)

    if start_date is None or end_date is None:
        raise ValidationError("Start and end dates are required")
    if end_date <= start_date:
        raise ValidationError(
            "End date must be after start date",
            details={"start_date": start_date.isoformat(), "end_date": end_date.isoformat()}
        )

    booking = Booking(
        car_id=car.id,
        user_id=user_id or None,
        start_date=start_date,
        end_date=end_date,
        total_price=calculate_total_price(car.price, start_date, end_date),
        status=BookingStatus.PENDING.value,
        customer_name=name or None,
        customer_email=email or None,
        customer_phone=phone or None,
        pickup_location=location or None
    )
    db.add(booking)
    await db.commit()
    await db.refresh(booking)

    logger.info("Booking saved: %s for car %s (total %s)", booking.id, car.id, booking.total_price)
    return booking


async def submit_booking_raw(
    db: AsyncSession,
    car_id: Optional[str],
    name: Optional[str],
    start_date: Optional[date],
    end_date: Optional[date],
    email: Optional[str] = None,
    phone: Optional[str] = None,
    location: Optional[str] = None
) -> Booking:
    """
    Store a booking exactly as submitted, priced at zero.

    The car is not looked up and the dates are not compared. Store errors
    (missing dates violate NOT NULL) propagate to the caller.
    """
    booking = Booking(
        car_id=car_id,
        user_id=name or None,
        start_date=start_date,
        end_date=end_date,
        total_price=0,
        status=BookingStatus.PENDING.value,
        customer_name=name or None,
        customer_email=email or None,
        customer_phone=phone or None,
        pickup_location=location or None
    )
    db.add(booking)
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    await db.refresh(booking)

    logger.info("Booking saved without pricing: %s for car %s", booking.id, car_id)
    return booking


async def list_bookings_for_user(db: AsyncSession, user_id: str) -> List[BookingListItem]:
    """A user's bookings, newest first, with the booked car's name and image."""
    result = await db.execute(
        select(Booking, Car.name, Car.image)
        .join(Car, Booking.car_id == Car.id)
        .where(Booking.user_id == user_id)
        .order_by(Booking.created_at.desc(), Booking.id)
    )

    return [
        BookingListItem(
            **BookingResponse.model_validate(booking).model_dump(),
            car_name=car_name,
            car_image=car_image
        )
        for booking, car_name, car_image in result.all()
    ]
