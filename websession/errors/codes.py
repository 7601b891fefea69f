"""
Error code catalog for session storage.

Every failure surfaced by the session store maps to one of these codes,
so callers can tell a missing session apart from a missing attribute or
an unreachable store without inspecting messages.
"""

from enum import Enum


class ErrorCode(str, Enum):
    """
    Enumeration of all error codes used by the session store.

    Each error code maps to a default HTTP status code so a web framework
    can translate errors into responses without extra configuration.
    """

    # Client errors (4xx)
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    """Session record expired, was removed, or never existed (HTTP 404)"""

    FIELD_NOT_FOUND = "FIELD_NOT_FOUND"
    """Attribute absent on an existing session record (HTTP 404)"""

    # External service errors (5xx)
    SESSION_STORE_UNAVAILABLE = "SESSION_STORE_UNAVAILABLE"
    """Redis call failed: network, protocol, or script error (HTTP 503)"""

    # Internal errors (5xx)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    """Unexpected server error (HTTP 500)"""


# Mapping of error codes to their default HTTP status codes
ERROR_CODE_STATUS_MAP: dict[ErrorCode, int] = {
    ErrorCode.SESSION_NOT_FOUND: 404,
    ErrorCode.FIELD_NOT_FOUND: 404,
    ErrorCode.SESSION_STORE_UNAVAILABLE: 503,
    ErrorCode.INTERNAL_ERROR: 500,
}


def get_default_status_code(error_code: ErrorCode) -> int:
    """
    Get the default HTTP status code for an error code.

    Args:
        error_code: The error code to look up

    Returns:
        The default HTTP status code for the error code
    """
    return ERROR_CODE_STATUS_MAP.get(error_code, 500)
