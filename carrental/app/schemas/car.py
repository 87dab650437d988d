"""
Car Pydantic schemas.

Defines validation for catalog create/update payloads and the JSON shape
returned by the catalog API.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class CarCreate(BaseModel):
    """Schema for adding a car to the catalog."""
    name: str = Field(..., min_length=1, max_length=200)
    category: Optional[str] = Field(None, max_length=100)
    price: int = Field(..., gt=0, description="Daily rate in minor currency units")
    rating: Optional[float] = Field(None, ge=0, le=5)
    seats: int = Field(..., gt=0)
    transmission: str = Field(..., min_length=1, max_length=50)
    fuel: str = Field(..., min_length=1, max_length=50)
    badge: Optional[str] = Field(None, max_length=100)
    features: Optional[str] = Field(None, description="Serialized feature list, stored as-is")


class CarUpdate(BaseModel):
    """Schema for partially updating a car."""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    category: Optional[str] = Field(None, max_length=100)
    price: Optional[int] = Field(None, gt=0)
    rating: Optional[float] = Field(None, ge=0, le=5)
    seats: Optional[int] = Field(None, gt=0)
    transmission: Optional[str] = Field(None, min_length=1, max_length=50)
    fuel: Optional[str] = Field(None, min_length=1, max_length=50)
    badge: Optional[str] = Field(None, max_length=100)
    features: Optional[str] = None


class AvailabilityUpdate(BaseModel):
    """Schema for PUT /api/cars/{id}/availability."""
    available: bool


class CarResponse(BaseModel):
    """Schema for car response."""
    id: str
    name: str
    category: Optional[str] = None
    price: int
    rating: Optional[float] = None
    seats: Optional[int] = None
    transmission: Optional[str] = None
    fuel: Optional[str] = None
    image: Optional[str] = None
    badge: Optional[str] = None
    features: Optional[str] = None
    available: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MessageResponse(BaseModel):
    message: str
