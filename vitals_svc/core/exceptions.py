"""
Shared exception classes and error handling utilities for the Vitals Service API.

This module provides:
- Custom exception hierarchy for domain-specific errors
- Consistent error response formatting ({"error": "..."})
- Exception handlers for FastAPI integration

Usage:
    from core.exceptions import AlertNotFoundError, StorageError

    # In service layer - raise domain exceptions
    raise AlertNotFoundError(alert_id="alert:p1:1700000000000-HeartRate")

    # In FastAPI - register handlers via setup_exception_handlers(app)
"""
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


# =============================================================================
# BASE EXCEPTION CLASS
# =============================================================================

class VitalsServiceError(Exception):
    """
    Base exception for all Vitals Service domain errors.

    Doubles as the UnknownFailure category: anything raised as this base
    class is reported as a 500.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail: str = "An unexpected error occurred"

    def __init__(
        self,
        detail: Optional[str] = None,
        status_code: Optional[int] = None,
        **kwargs: Any
    ):
        """
        Initialize the exception.

        Args:
            detail: Human-readable error message. Uses class default if not provided.
            status_code: HTTP status code. Uses class default if not provided.
            **kwargs: Additional context to include in error response.
        """
        self.detail = detail or self.__class__.detail
        self.status_code = status_code or self.__class__.status_code
        self.context = {k: v for k, v in kwargs.items() if v is not None}
        super().__init__(self.detail)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        result: Dict[str, Any] = {"error": self.detail}
        if self.context:
            result["context"] = self.context
        return result


# =============================================================================
# AUTHENTICATION
# =============================================================================

class UnauthorizedError(VitalsServiceError):
    """Raised when the bearer credential is missing or cannot be resolved."""

    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Unauthorized"


# =============================================================================
# NOT FOUND
# =============================================================================

class NotFoundError(VitalsServiceError):
    """Raised when a requested entity does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    detail = "Not found"


class AlertNotFoundError(NotFoundError):
    """Raised when an alert id does not resolve to a stored alert."""

    detail = "Alert not found"

    def __init__(self, alert_id: Optional[str] = None, **kwargs: Any):
        super().__init__(detail=self.detail, alert_id=alert_id, **kwargs)


# =============================================================================
# VALIDATION
# =============================================================================

class ValidationError(VitalsServiceError):
    """Raised when request data is missing a required field or is malformed."""

    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Invalid request data"


# =============================================================================
# STORAGE
# =============================================================================

class StorageError(VitalsServiceError):
    """Raised when the underlying key/prefix store fails or is unavailable."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    detail = "Storage operation failed"

    def __init__(self, operation: Optional[str] = None, **kwargs: Any):
        detail = f"Storage error during {operation}" if operation else self.detail
        super().__init__(detail=detail, operation=operation, **kwargs)


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

async def vitals_service_exception_handler(
    request: Request,
    exc: VitalsServiceError
) -> JSONResponse:
    """Convert domain errors into their {"error": ...} JSON response."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        f"VitalsServiceError: {exc.detail}",
        extra={
            "status_code": exc.status_code,
            "path": request.url.path,
            "method": request.method,
            "context": exc.context
        }
    )
    headers = None
    if isinstance(exc, UnauthorizedError):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers=headers
    )


async def request_validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Report request schema failures as a ValidationError.

    The first failing field is named in the message; the full list of
    pydantic errors goes into the context for clients that want it.
    """
    errors = exc.errors()
    message = ValidationError.detail
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))

    logger.warning(
        "Request validation failed",
        extra={"path": request.url.path, "method": request.method, "error": message}
    )
    error = ValidationError(detail=message)
    return JSONResponse(
        status_code=error.status_code,
        content={
            "error": error.detail,
            "context": {
                "errors": [
                    {"loc": list(e.get("loc", ())), "msg": e.get("msg")}
                    for e in errors
                ]
            },
        }
    )


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException
) -> JSONResponse:
    """Keep framework-raised HTTP errors (404 route, 405) in the same shape."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None)
    )


async def generic_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle unexpected exceptions with a generic error response.

    Logs the full exception for debugging but returns a safe error message.
    """
    logger.exception(
        f"Unhandled exception: {exc}",
        extra={
            "path": request.url.path,
            "method": request.method
        }
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "An internal server error occurred"}
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI application.

    Call this function during app initialization so that no raw exception
    crosses the HTTP boundary.

    Args:
        app: The FastAPI application instance.
    """
    app.add_exception_handler(VitalsServiceError, vitals_service_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
