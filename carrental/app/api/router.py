"""
Application Router.

Aggregates the JSON API and the server-rendered pages.
"""

from fastapi import APIRouter
from carrental.app.api.routes import auth, cars, bookings, pages

router = APIRouter()

# Account endpoints (register, login, logout, profile)
router.include_router(auth.router)

# Catalog API
router.include_router(cars.router)

# Booking submissions and the signed-in booking list
router.include_router(bookings.router)

# Pages
router.include_router(pages.router)
