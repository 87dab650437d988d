"""
Car (rental vehicle) database model.
"""

from sqlalchemy import Column, String, Integer, Float, Boolean, DateTime, Text
from carrental.app.db.session import Base
from carrental.app.models.common import new_id, utcnow


class Car(Base):
    """
    Catalog vehicle.

    ``price`` is the daily rate in minor currency units. ``image`` holds the
    public URL path of the uploaded picture (e.g. ``/image/cars/<file>``) and
    ``features`` is stored as opaque text exactly as submitted.
    """
    __tablename__ = "cars"

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    category = Column(String, nullable=True)
    price = Column(Integer, nullable=False)
    rating = Column(Float, nullable=True)
    seats = Column(Integer, nullable=True)
    transmission = Column(String, nullable=True)
    fuel = Column(String, nullable=True)
    image = Column(String, nullable=True)
    badge = Column(String, nullable=True)
    features = Column(Text, nullable=True)
    available = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    def __repr__(self):
        return f"<Car(id='{self.id}', name='{self.name}', available={self.available})>"
