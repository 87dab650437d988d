"""
Car catalog API.

Reads are public; every mutation requires an admin session.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Path, Query, UploadFile, status
from fastapi.responses import RedirectResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from carrental.app.core.exceptions import InternalError
from carrental.app.core.guards import require_admin
from carrental.app.db.session import get_db
from carrental.app.schemas.car import AvailabilityUpdate, CarResponse, MessageResponse
from carrental.app.services import catalog
from carrental.app.services.catalog import ImageUpload
from carrental.app.services.image_storage import ImageStorage, get_image_storage

logger = logging.getLogger("carrental.api.cars")

router = APIRouter(prefix="/api/cars", tags=["Cars"])


async def read_upload(image: Optional[UploadFile]) -> Optional[ImageUpload]:
    """Read an optional multipart upload; an empty file input counts as no image."""
    if image is None or not image.filename:
        return None
    content = await image.read()
    if not content:
        return None
    return ImageUpload(image.filename, content)


@router.get("", response_model=List[CarResponse])
async def list_cars(
    available_only: bool = Query(False, description="Only cars marked available"),
    db: AsyncSession = Depends(get_db)
):
    """List all cars, newest first."""
    try:
        cars = await catalog.list_cars(db, available_only=available_only)
    except SQLAlchemyError as exc:
        logger.exception("Error fetching cars")
        raise InternalError("Failed to fetch cars") from exc
    return [CarResponse.model_validate(car) for car in cars]


@router.get("/{car_id}", response_model=CarResponse)
async def get_car(
    car_id: str = Path(..., description="Car ID"),
    db: AsyncSession = Depends(get_db)
):
    try:
        car = await catalog.get_car(db, car_id)
    except SQLAlchemyError as exc:
        logger.exception("Error fetching car %s", car_id)
        raise InternalError("Failed to fetch car") from exc
    return CarResponse.model_validate(car)


@router.post("")
async def create_car(
    admin: dict = Depends(require_admin),
    name: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    rating: Optional[str] = Form(None),
    seats: Optional[str] = Form(None),
    transmission: Optional[str] = Form(None),
    fuel: Optional[str] = Form(None),
    badge: Optional[str] = Form(None),
    features: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db),
    storage: ImageStorage = Depends(get_image_storage)
):
    """
    Add a car from the dashboard form (admin only).

    Redirects back to the dashboard on success.
    """
    fields = {
        "name": name,
        "category": category,
        "price": price,
        "rating": rating,
        "seats": seats,
        "transmission": transmission,
        "fuel": fuel,
        "badge": badge,
        "features": features,
    }
    try:
        await catalog.create_car(db, storage, fields, await read_upload(image))
    except (SQLAlchemyError, OSError) as exc:
        logger.exception("Error adding car")
        raise InternalError("Failed to add car") from exc

    return RedirectResponse("/dashboard", status_code=status.HTTP_303_SEE_OTHER)


@router.put("/{car_id}", response_model=MessageResponse)
async def update_car(
    car_id: str = Path(..., description="Car ID"),
    admin: dict = Depends(require_admin),
    name: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    rating: Optional[str] = Form(None),
    seats: Optional[str] = Form(None),
    transmission: Optional[str] = Form(None),
    fuel: Optional[str] = Form(None),
    badge: Optional[str] = Form(None),
    features: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db),
    storage: ImageStorage = Depends(get_image_storage)
):
    """
    Update the supplied fields of a car (admin only).

    A new image replaces the previous one, which is deleted afterwards.
    """
    submitted = {
        "name": name,
        "category": category,
        "price": price,
        "rating": rating,
        "seats": seats,
        "transmission": transmission,
        "fuel": fuel,
        "badge": badge,
        "features": features,
    }
    fields = {key: value for key, value in submitted.items() if value is not None}
    try:
        await catalog.update_car(db, storage, car_id, fields, await read_upload(image))
    except (SQLAlchemyError, OSError) as exc:
        logger.exception("Error updating car %s", car_id)
        raise InternalError("Failed to update car") from exc

    return MessageResponse(message="Car updated successfully")


@router.put("/{car_id}/availability", response_model=MessageResponse)
async def update_availability(
    body: AvailabilityUpdate,
    car_id: str = Path(..., description="Car ID"),
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    try:
        await catalog.set_availability(db, car_id, body.available)
    except SQLAlchemyError as exc:
        logger.exception("Error updating availability for %s", car_id)
        raise InternalError("Failed to update availability") from exc

    return MessageResponse(message="Availability updated successfully")


@router.delete("/{car_id}", response_model=MessageResponse)
async def delete_car(
    car_id: str = Path(..., description="Car ID"),
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    storage: ImageStorage = Depends(get_image_storage)
):
    """
    Delete a car and its image (admin only).

    Refused with 400 while any non-cancelled booking references the car.
    """
    try:
        await catalog.delete_car(db, storage, car_id)
    except (SQLAlchemyError, OSError) as exc:
        logger.exception("Error deleting car %s", car_id)
        raise InternalError("Failed to delete car") from exc

    return MessageResponse(message="Car deleted successfully")
