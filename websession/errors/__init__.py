"""
Error handling for the session store.

This package provides:
- ErrorCode enum for standardized error codes
- AppException and the session-specific subclasses raised by the store
- Error response models and FastAPI exception handlers
"""

from websession.errors.codes import ErrorCode
from websession.errors.exceptions import (
    AppException,
    FieldNotFoundError,
    SessionNotFoundError,
    StoreError,
)
from websession.errors.handlers import (
    ErrorResponse,
    handle_app_exception,
    handle_unexpected_exception,
    register_exception_handlers,
)

__all__ = [
    "ErrorCode",
    "AppException",
    "FieldNotFoundError",
    "SessionNotFoundError",
    "StoreError",
    "ErrorResponse",
    "handle_app_exception",
    "handle_unexpected_exception",
    "register_exception_handlers",
]
