"""
Redis client construction from settings.

The returned client belongs to the caller: session stores borrow it and
never close it, so the application closes it on shutdown.
"""

from typing import Optional

import redis.asyncio as redis

from websession.config.settings import SessionSettings, get_settings


def create_redis_client(settings: Optional[SessionSettings] = None) -> redis.Redis:
    """
    Create an async Redis client for session storage.

    Responses are decoded to str so stored attribute values come back as
    strings.

    Args:
        settings: Session settings. Defaults to get_settings().

    Raises:
        ValueError: If no redis_url is configured.
    """
    settings = settings or get_settings()
    if not settings.redis_url:
        raise ValueError("redis_url is not configured")

    return redis.from_url(
        settings.redis_url,
        decode_responses=True,
        socket_timeout=settings.redis_socket_timeout,
    )
