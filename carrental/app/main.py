"""
FastAPI Application Entry Point.

This is the main application file for the Car Rental Storefront.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from carrental.app.core.config import settings, DEFAULT_SECRET_KEY
from carrental.app.api.router import router
from carrental.app.core.dependencies import SessionIdentityMiddleware
from carrental.app.core.observability import ObservabilityMiddleware, configure_logging
from carrental.app.db.migrations import run_migrations
from carrental.app.db.session import engine
from carrental.app.services.image_storage import get_image_storage
from carrental.app.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)

logger = logging.getLogger("carrental")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup/shutdown.

    1. Configures logging and warns about an unchanged signing secret.
    2. Applies pending schema migrations.
    3. Ensures the image upload directory exists.
    """
    configure_logging()
    if settings.secret_key == DEFAULT_SECRET_KEY:
        logger.warning("SECRET_KEY is not set; session tokens are signed with the insecure default key")

    applied = await run_migrations(engine)
    logger.info("Database ready (%d migration(s) applied)", len(applied))

    get_image_storage().ensure_directory()
    yield
    await engine.dispose()


# Initialize FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    debug=settings.debug,
    description="Car rental storefront: catalog, bookings and admin catalog management",
    lifespan=lifespan,
)

# Register global exception handlers
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)

# Middleware (last added runs first)
app.add_middleware(SessionIdentityMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)
app.add_middleware(ObservabilityMiddleware)

# Uploaded car images
app.mount(
    "/image",
    StaticFiles(directory=str(Path(settings.media_root) / "image"), check_dir=False),
    name="images",
)


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint.

    Returns:
        dict: Status and application information
    """
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": settings.app_version,
    }


app.include_router(router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "carrental.app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
