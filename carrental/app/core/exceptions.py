"""
Custom exceptions and error handlers for consistent error responses.

Provides standardized error codes and global exception handlers. Routes under
``/api/`` answer with a JSON body, page routes with a rendered error page.
"""

import logging
from fastapi import Request, status
from fastapi.responses import JSONResponse, Response
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from typing import Any, Dict

from carrental.app.core.templating import templates

logger = logging.getLogger("carrental.errors")


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, error_code: str, status_code: int = 500, details: Dict[str, Any] = None):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class ValidationError(AppException):
    """Raised for missing or malformed input."""

    def __init__(self, message: str = "Invalid input", details: Dict[str, Any] = None):
        super().__init__(
            message=message,
            error_code="ERR_VALIDATION",
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details
        )


class AuthenticationError(AppException):
    """Raised for authentication failures."""

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(
            message=message,
            error_code="ERR_AUTH_001",
            status_code=status.HTTP_401_UNAUTHORIZED
        )


class InvalidTokenError(AppException):
    """Raised when a session token cannot be verified (bad signature, malformed or expired)."""

    def __init__(self):
        super().__init__(
            message="Invalid token",
            error_code="ERR_AUTH_002",
            status_code=status.HTTP_403_FORBIDDEN
        )


class InsufficientPermissionsError(AppException):
    """Raised when user doesn't have permission to perform an action."""

    def __init__(self, message: str = "Insufficient permissions", details: Dict[str, Any] = None):
        super().__init__(
            message=message,
            error_code="ERR_PERM_001",
            status_code=status.HTTP_403_FORBIDDEN,
            details=details
        )


class ResourceNotFoundError(AppException):
    """Raised when requested resource is not found."""

    def __init__(self, resource: str, resource_id: Any = None):
        super().__init__(
            message=f"{resource} not found",
            error_code="ERR_NOT_FOUND_001",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource": resource, "id": resource_id}
        )


class ConflictError(AppException):
    """Raised when a request collides with existing state (duplicate email, active bookings)."""

    def __init__(self, message: str, details: Dict[str, Any] = None):
        super().__init__(
            message=message,
            error_code="ERR_CONFLICT_001",
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details
        )


class InternalError(AppException):
    """Raised when a store or file-system operation fails unexpectedly."""

    def __init__(self, message: str = "An internal server error occurred"):
        super().__init__(
            message=message,
            error_code="ERR_INTERNAL_SERVER",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


def is_api_request(request: Request) -> bool:
    return request.url.path.startswith("/api/")


def error_response(
    request: Request,
    status_code: int,
    error_code: str,
    message: str,
    details: Dict[str, Any] = None,
    headers: Dict[str, str] = None
) -> Response:
    """Build a JSON error body for API routes or an error page for page routes."""
    if is_api_request(request):
        return JSONResponse(
            status_code=status_code,
            content={
                "error": message,
                "error_code": error_code,
                "message": message,
                "details": details or {}
            },
            headers=headers
        )
    return templates.TemplateResponse(
        request,
        "error.html",
        {"status_code": status_code, "message": message, "user": getattr(request.state, "user", None)},
        status_code=status_code,
        headers=headers
    )


# Global Exception Handlers

async def app_exception_handler(request: Request, exc: AppException) -> Response:
    """Handler for custom application exceptions."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return error_response(request, exc.status_code, exc.error_code, exc.message, exc.details)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
    """Handler for FastAPI HTTPException with standardized format."""
    # Map status code to error code
    error_code_map = {
        400: "ERR_BAD_REQUEST",
        401: "ERR_UNAUTHORIZED",
        403: "ERR_FORBIDDEN",
        404: "ERR_NOT_FOUND",
        405: "ERR_METHOD_NOT_ALLOWED",
        500: "ERR_INTERNAL_SERVER"
    }

    error_code = error_code_map.get(exc.status_code, "ERR_UNKNOWN")

    return error_response(
        request,
        exc.status_code,
        error_code,
        str(exc.detail),
        headers=getattr(exc, "headers", None)
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> Response:
    """Handler for Pydantic validation errors."""
    return error_response(
        request,
        status.HTTP_400_BAD_REQUEST,
        "ERR_VALIDATION",
        "Validation error",
        {"errors": jsonable_errors(exc.errors())}
    )


async def generic_exception_handler(request: Request, exc: Exception) -> Response:
    """Handler for unhandled exceptions."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)

    return error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "ERR_INTERNAL_SERVER",
        "An internal server error occurred"
    )


def jsonable_errors(errors) -> list:
    """Strip non-serialisable context (exception instances) from pydantic error lists."""
    cleaned = []
    for error in errors:
        item = {key: value for key, value in error.items() if key not in ("ctx", "input", "url")}
        if "ctx" in error:
            item["ctx"] = {key: str(value) for key, value in error["ctx"].items()}
        cleaned.append(item)
    return cleaned
