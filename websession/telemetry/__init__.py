"""
Telemetry module for structured logging.

This module provides:
- JSONFormatter for structured JSON log output
- configure_logging to install it on the root logger
- request id helpers for log correlation
"""

from websession.telemetry.service import (
    JSONFormatter,
    configure_logging,
    get_request_id,
    set_request_id,
)

__all__ = [
    "JSONFormatter",
    "configure_logging",
    "get_request_id",
    "set_request_id",
]
