"""
Redis hash-backed server-side session storage.

The public surface is re-exported here so web frameworks can depend on
``websession`` directly without reaching into subpackages.
"""

from websession.errors import (
    AppException,
    ErrorCode,
    FieldNotFoundError,
    SessionNotFoundError,
    StoreError,
)
from websession.session import (
    DEFAULT_EXPIRATION,
    DEFAULT_PREFIX,
    RedisSession,
    RedisSessionStore,
    Session,
    SessionStore,
    create_redis_client,
    redis_key,
    with_expiration,
    with_prefix,
)

__all__ = [
    "AppException",
    "ErrorCode",
    "FieldNotFoundError",
    "SessionNotFoundError",
    "StoreError",
    "DEFAULT_EXPIRATION",
    "DEFAULT_PREFIX",
    "RedisSession",
    "RedisSessionStore",
    "Session",
    "SessionStore",
    "create_redis_client",
    "redis_key",
    "with_expiration",
    "with_prefix",
]
