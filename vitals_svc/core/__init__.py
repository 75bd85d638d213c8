"""
Core module for application configuration, logging, and shared utilities.

This module provides:
- Settings: Application configuration via pydantic-settings (core.config)
- Dependency injection: FastAPI Depends() providers (core.dependencies)
- Exceptions: Domain-specific exception classes with HTTP status codes
- Datetime utilities: UTC-first datetime handling
- Vital thresholds: Normal/critical bands for each vital sign

Settings and dependencies are not re-exported here so that importing a
helper (e.g. core.datetime_utils) never triggers settings validation.
"""
from core.exceptions import (
    VitalsServiceError,
    UnauthorizedError,
    NotFoundError,
    AlertNotFoundError,
    ValidationError,
    StorageError,
    setup_exception_handlers,
)
from core.datetime_utils import (
    utc_now,
    to_utc,
    format_iso,
    epoch_millis,
)

__all__ = [
    "VitalsServiceError",
    "UnauthorizedError",
    "NotFoundError",
    "AlertNotFoundError",
    "ValidationError",
    "StorageError",
    "setup_exception_handlers",
    "utc_now",
    "to_utc",
    "format_iso",
    "epoch_millis",
]
