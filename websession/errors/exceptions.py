"""
Exception classes for session storage.

``AppException`` carries a structured error code; the subclasses give
callers distinct types for the three failure classes of the store:

- ``SessionNotFoundError``: the record expired, was removed, or never existed
- ``FieldNotFoundError``: the record exists but lacks the requested attribute
- ``StoreError``: the underlying Redis call failed
"""

from typing import Any, Optional

from websession.errors.codes import ErrorCode, get_default_status_code


class AppException(Exception):
    """
    Base exception class for all session storage errors.

    This exception provides structured error information including:
    - error_code: A standardized error code from the ErrorCode enum
    - message: A human-readable error message
    - status_code: The HTTP status code to return
    - details: Optional additional context (e.g., the session id)

    Example:
        raise AppException(
            error_code=ErrorCode.SESSION_NOT_FOUND,
            message="Session not found",
            details={"session_id": "abc123"}
        )
    """

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[dict[str, Any]] = None
    ):
        """
        Initialize an AppException.

        Args:
            error_code: The error code from the ErrorCode enum
            message: A human-readable error message
            status_code: The HTTP status code (defaults to the error code's default)
            details: Optional dictionary with additional error context
        """
        self.error_code = error_code
        self.message = message
        self.status_code = status_code or get_default_status_code(error_code)
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert the exception to a dictionary for JSON serialization.

        Returns:
            Dictionary containing error_code, message, and details
        """
        result = {
            "error_code": self.error_code.value,
            "message": self.message,
        }
        if self.details is not None:
            result["details"] = self.details
        return result

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(error_code={self.error_code.value!r}, "
            f"message={self.message!r}, status_code={self.status_code}, "
            f"details={self.details!r})"
        )


class SessionNotFoundError(AppException):
    """Raised when a session record does not exist in the store."""

    def __init__(self, session_id: str, message: str = "Session not found"):
        self.session_id = session_id
        super().__init__(
            error_code=ErrorCode.SESSION_NOT_FOUND,
            message=message,
            details={"session_id": session_id},
        )


class FieldNotFoundError(AppException):
    """Raised when an existing session has no value for the requested field."""

    def __init__(self, session_id: str, field: str, message: str = "Session field not found"):
        self.session_id = session_id
        self.field = field
        super().__init__(
            error_code=ErrorCode.FIELD_NOT_FOUND,
            message=message,
            details={"session_id": session_id, "field": field},
        )


class StoreError(AppException):
    """
    Raised when a call to the session store itself fails.

    The originating Redis exception is chained as ``__cause__`` and its
    type name is recorded in ``details`` so logs stay useful without
    leaking connection strings into responses.
    """

    def __init__(
        self,
        message: str = "Session store unavailable",
        operation: Optional[str] = None,
        session_id: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        self.operation = operation
        self.session_id = session_id
        details: dict[str, Any] = {}
        if operation is not None:
            details["operation"] = operation
        if session_id is not None:
            details["session_id"] = session_id
        if cause is not None:
            details["cause"] = type(cause).__name__
        super().__init__(
            error_code=ErrorCode.SESSION_STORE_UNAVAILABLE,
            message=message,
            details=details or None,
        )

