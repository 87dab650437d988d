"""
User database model.

This module defines the User SQLAlchemy model for authentication.
"""

from sqlalchemy import Column, String, Boolean, DateTime
from carrental.app.db.session import Base
from carrental.app.models.common import new_id, utcnow


class User(Base):
    """
    Registered customer or administrator.

    ``is_admin`` gates catalog management; there is no route that grants it.
    """
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=new_id)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False)
    phone = Column(String, nullable=False)
    hashed_password = Column("password", String, nullable=False)
    is_admin = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    def __repr__(self):
        return f"<User(id='{self.id}', email='{self.email}', is_admin={self.is_admin})>"
