"""
Catalog store: car listing and admin catalog management.

Image files and car rows are two separate resources. Every mutation that
touches both writes the file first and the row second; if the row write
fails the freshly written file is deleted again, and a replaced image is only
removed once the new row state is committed.
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as SchemaValidationError
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from carrental.app.core.exceptions import ConflictError, ResourceNotFoundError, ValidationError
from carrental.app.models.booking import Booking, BookingStatus
from carrental.app.models.car import Car
from carrental.app.models.common import new_id
from carrental.app.schemas.car import CarCreate, CarUpdate
from carrental.app.services.image_storage import ImageStorage

logger = logging.getLogger("carrental.catalog")

REQUIRED_FIELDS = ("name", "price", "seats", "transmission", "fuel")

# Changed on update only when a non-empty value is supplied
VALUE_FIELDS = ("name", "category", "price", "seats", "transmission", "fuel")

# Changed on update whenever supplied; an empty value clears them
CLEARABLE_FIELDS = ("rating", "badge", "features")


class ImageUpload:
    """An uploaded image read into memory."""

    def __init__(self, filename: Optional[str], content: bytes):
        self.filename = filename
        self.content = content


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _schema_error(exc: SchemaValidationError) -> ValidationError:
    fields = sorted({str(error["loc"][0]) for error in exc.errors() if error.get("loc")})
    return ValidationError(f"Invalid value for: {', '.join(fields)}", details={"fields": fields})


async def list_cars(db: AsyncSession, available_only: bool = False) -> List[Car]:
    """List cars newest first, optionally only those marked available."""
    query = select(Car)
    if available_only:
        query = query.where(Car.available == True)  # noqa: E712
    query = query.order_by(Car.created_at.desc(), Car.id)

    result = await db.execute(query)
    return list(result.scalars().all())


async def get_car(db: AsyncSession, car_id: str) -> Car:
    result = await db.execute(select(Car).where(Car.id == car_id))
    car = result.scalar_one_or_none()
    if car is None:
        raise ResourceNotFoundError("Car", car_id)
    return car


async def create_car(
    db: AsyncSession,
    storage: ImageStorage,
    fields: Dict[str, Any],
    image: Optional[ImageUpload] = None
) -> Car:
    """
    Add a car to the catalog.

    Raises:
        ValidationError: a required field is missing or a value is out of range
    """
    if any(_blank(fields.get(name)) for name in REQUIRED_FIELDS):
        raise ValidationError("Missing required fields")

    cleaned = {key: (None if _blank(value) else value) for key, value in fields.items()}
    try:
        data = CarCreate.model_validate(cleaned)
    except SchemaValidationError as exc:
        raise _schema_error(exc)

    car = Car(id=new_id(), available=True, **data.model_dump())

    if image is not None:
        car.image = await storage.save(car.id, image.filename, image.content)

    db.add(car)
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        await storage.delete(car.image)
        raise
    await db.refresh(car)

    logger.info("Car added: %s (%s)", car.name, car.id)
    return car


def _collect_changes(fields: Dict[str, Any]) -> Dict[str, Any]:
    changes = {}
    for name in VALUE_FIELDS:
        if not _blank(fields.get(name)):
            changes[name] = fields[name]
    for name in CLEARABLE_FIELDS:
        if name in fields:
            changes[name] = None if _blank(fields[name]) else fields[name]
    return changes


async def update_car(
    db: AsyncSession,
    storage: ImageStorage,
    car_id: str,
    fields: Dict[str, Any],
    image: Optional[ImageUpload] = None
) -> Car:
    """
    Partially update a car; only supplied fields change.

    Raises:
        ResourceNotFoundError: unknown car
        ValidationError: nothing to update, or a value is out of range
    """
    car = await get_car(db, car_id)

    changes = _collect_changes(fields)
    if not changes and image is None:
        raise ValidationError("No fields to update")

    try:
        update_data = CarUpdate.model_validate(changes).model_dump(exclude_unset=True)
    except SchemaValidationError as exc:
        raise _schema_error(exc)

    previous_image = car.image
    new_image = None
    if image is not None:
        new_image = await storage.save(car.id, image.filename, image.content)
        update_data["image"] = new_image

    for field, value in update_data.items():
        setattr(car, field, value)

    try:
        await db.commit()
    except Exception:
        await db.rollback()
        await storage.delete(new_image)
        raise
    await db.refresh(car)

    if new_image and previous_image:
        await storage.delete(previous_image)

    logger.info("Car updated: %s (%s)", car.id, ", ".join(sorted(update_data)))
    return car


async def set_availability(db: AsyncSession, car_id: str, available: bool) -> Car:
    car = await get_car(db, car_id)
    car.available = bool(available)
    await db.commit()
    await db.refresh(car)

    logger.info("Car availability updated: %s -> %s", car_id, car.available)
    return car


async def count_active_bookings(db: AsyncSession, car_id: str) -> int:
    """Bookings referencing the car whose status is anything but cancelled."""
    result = await db.execute(
        select(func.count(Booking.id)).where(
            Booking.car_id == car_id,
            func.lower(func.coalesce(Booking.status, "")) != BookingStatus.CANCELLED.value
        )
    )
    return result.scalar() or 0


async def delete_car(db: AsyncSession, storage: ImageStorage, car_id: str) -> None:
    """
    Remove a car and its image.

    Raises:
        ResourceNotFoundError: unknown car
        ConflictError: an active booking references the car
    """
    car = await get_car(db, car_id)

    active = await count_active_bookings(db, car_id)
    if active > 0:
        raise ConflictError(
            "Cannot delete car with active bookings",
            details={"car_id": car_id, "active_bookings": active}
        )

    image = car.image
    await db.delete(car)
    await db.commit()
    await storage.delete(image)

    logger.info("Car deleted: %s", car_id)
