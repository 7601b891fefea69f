"""
Session management backed by Redis hashes.

This module provides the session abstractions and their Redis
implementation: one hash per session, one field per attribute, and a
key TTL for expiration.
"""

from websession.session.base import Session, SessionStore
from websession.session.client import create_redis_client
from websession.session.redis_store import (
    DEFAULT_EXPIRATION,
    DEFAULT_PREFIX,
    RedisSession,
    RedisSessionStore,
    redis_key,
    with_expiration,
    with_prefix,
)

__all__ = [
    "Session",
    "SessionStore",
    "create_redis_client",
    "DEFAULT_EXPIRATION",
    "DEFAULT_PREFIX",
    "RedisSession",
    "RedisSessionStore",
    "redis_key",
    "with_expiration",
    "with_prefix",
]
