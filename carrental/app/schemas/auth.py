"""
Authentication Pydantic schemas.

Defines request and response schemas for the account endpoints.
"""

from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from typing import Optional


class UserRegister(BaseModel):
    """
    Schema for user registration.

    Built from the sign-up form posted to POST /api/register.
    """
    first_name: str = Field(..., min_length=1, description="First name")
    last_name: str = Field(..., min_length=1, description="Last name")
    email: EmailStr = Field(..., description="User email address")
    phone: str = Field(..., min_length=1, description="Contact phone number")
    password: str = Field(..., min_length=1, description="Plaintext password")


class ProfileResponse(BaseModel):
    """
    Schema for user information response.

    Used by GET /api/profile. Never includes the password hash.
    """
    id: str
    email: str
    first_name: str
    last_name: str
    phone: str
    is_admin: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
