"""
Booking Pydantic schemas.
"""

from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import Optional


class RawBookingSubmission(BaseModel):
    """
    Body of POST /bookings, sent as JSON or as a form.

    Every field is optional: this path stores whatever it receives and leaves
    validation to the database constraints.
    """
    carId: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    startDate: Optional[date] = None
    endDate: Optional[date] = None


class BookingResponse(BaseModel):
    """Schema for a stored booking."""
    id: str
    car_id: Optional[str] = None
    user_id: Optional[str] = None
    start_date: date
    end_date: date
    total_price: int
    status: str
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    pickup_location: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BookingListItem(BookingResponse):
    """Booking joined with the presentation fields of its car."""
    car_name: str
    car_image: Optional[str] = Field(None, description="Public image path of the booked car")
