"""
Booking database model.
"""

import enum
from sqlalchemy import Column, String, Integer, Date, DateTime
from carrental.app.db.session import Base
from carrental.app.models.common import new_id, utcnow


class BookingStatus(str, enum.Enum):
    """
    Booking status values.

    Stored as free text; any status other than CANCELLED counts as active.
    """
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class Booking(Base):
    """
    Reservation of a car for a date range.

    ``car_id`` is not a foreign key. ``user_id`` holds the renter's user id
    when the priced path is used while signed in; the raw submission path
    stores the free-text customer name there instead.
    """
    __tablename__ = "bookings"

    id = Column(String(32), primary_key=True, default=new_id)
    car_id = Column(String, nullable=True)
    user_id = Column(String, nullable=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    total_price = Column(Integer, nullable=False)
    status = Column(String, default=BookingStatus.PENDING.value, nullable=False)

    # Contact details captured by the booking forms
    customer_name = Column(String, nullable=True)
    customer_email = Column(String, nullable=True)
    customer_phone = Column(String, nullable=True)
    pickup_location = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow)

    def __repr__(self):
        return f"<Booking(id='{self.id}', car_id='{self.car_id}', status='{self.status}')>"
