"""
Redis-backed session store.

Each session is a Redis hash stored under ``"<prefix>-<session_id>"``.
Hash fields are attribute names, hash values are the stored attribute
values, and a key TTL governs expiration:

    sessid-3f2a...  ->  {"3f2a...": "3f2a...", "user": "42", ...}   TTL 900s

The store never owns the Redis client. It is injected by the caller,
shared across stores and sessions, and closed by whoever created it.
"""

import logging
from datetime import timedelta
from typing import Any, Callable, Union

from redis.asyncio import Redis
from redis.exceptions import RedisError

from websession.config.settings import KEY_DELIMITER, SessionSettings, validate_prefix
from websession.errors.exceptions import (
    FieldNotFoundError,
    SessionNotFoundError,
    StoreError,
)
from websession.session.base import Session, SessionStore

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "sessid"
DEFAULT_EXPIRATION = timedelta(minutes=15)

# Writes ARGV[2] into field ARGV[1] only while KEYS[1] exists. EXISTS returns
# 0 for a missing key and 0 is truthy in Lua, so the comparison is explicit.
SET_IF_EXISTS_SCRIPT = """
if redis.call("exists", KEYS[1]) == 1 then
    return redis.call("hset", KEYS[1], ARGV[1], ARGV[2])
else
    return -1
end
"""

StoreOption = Callable[["RedisSessionStore"], None]


def redis_key(prefix: str, session_id: str) -> str:
    """Derive the Redis key of a session record."""
    return f"{prefix}{KEY_DELIMITER}{session_id}"


def with_prefix(prefix: str) -> StoreOption:
    """
    Override the key prefix of a store.

    Raises:
        ValueError: If the prefix is empty or contains the key delimiter.
    """
    validate_prefix(prefix)

    def option(store: "RedisSessionStore") -> None:
        store.prefix = prefix

    return option


def with_expiration(expiration: Union[timedelta, int]) -> StoreOption:
    """
    Override the session time-to-live of a store.

    Args:
        expiration: A timedelta, or a number of seconds. Redis expirations
            have one-second resolution, so at least one second is required.

    Raises:
        ValueError: If the expiration is shorter than one second.
    """
    if not isinstance(expiration, timedelta):
        expiration = timedelta(seconds=expiration)
    if expiration < timedelta(seconds=1):
        raise ValueError("session expiration must be at least one second")

    def option(store: "RedisSessionStore") -> None:
        store.expiration = expiration

    return option


class RedisSession(Session):
    """
    Handle to one session hash in Redis.

    Attribute values are never cached; every ``get`` is a round trip.
    Reading or writing attributes does not extend the session's TTL.
    """

    def __init__(self, session_id: str, key: str, client: Redis, set_script: Any):
        self._id = session_id
        self._key = key
        self._client = client
        self._set_script = set_script

    @property
    def id(self) -> str:
        return self._id

    @property
    def key(self) -> str:
        """The Redis key holding this session's hash."""
        return self._key

    async def get(self, name: str) -> Any:
        """
        Read one attribute from the session hash.

        HGET cannot tell a missing field from a missing hash, so a miss is
        followed by EXISTS to report the right error.

        Raises:
            SessionNotFoundError: If the session record no longer exists.
            FieldNotFoundError: If the record exists without this attribute.
            StoreError: If a Redis call fails.
        """
        try:
            value = await self._client.hget(self._key, name)
            if value is not None:
                return value
            exists = await self._client.exists(self._key)
        except RedisError as e:
            raise _store_error("get_field", self._id, e) from e

        if not exists:
            raise SessionNotFoundError(self._id)
        raise FieldNotFoundError(self._id, name)

    async def set(self, name: str, value: Any) -> None:
        """
        Write one attribute while the session record exists.

        The existence check and the write run as one Lua script, so a
        session that expires or is removed concurrently is never
        recreated with a partial hash.

        Raises:
            SessionNotFoundError: If the session record no longer exists.
            StoreError: If the script or the Redis call fails.
        """
        try:
            result = await self._set_script(keys=[self._key], args=[name, value])
        except RedisError as e:
            raise _store_error("set_field", self._id, e) from e

        if int(result) < 0:
            raise SessionNotFoundError(self._id)

    def __repr__(self) -> str:
        return f"RedisSession(id={self._id!r}, key={self._key!r})"


class RedisSessionStore(SessionStore):
    """
    Session store keeping each session in a Redis hash.

    Attributes:
        prefix: Key prefix, "sessid" by default.
        expiration: TTL applied on generate and refresh, 15 minutes by default.

    Example:
        client = redis.asyncio.from_url("redis://localhost:6379/0", decode_responses=True)
        store = RedisSessionStore(client, with_prefix("app"))
        session = await store.generate(session_id)
        await session.set("user", "42")
    """

    def __init__(self, client: Redis, *options: StoreOption):
        """
        Initialize the store and apply options in order.

        Args:
            client: Async Redis client. Shared and not owned by the store.
            *options: Options built with ``with_prefix`` or ``with_expiration``.
        """
        self.client = client
        self.prefix = DEFAULT_PREFIX
        self.expiration = DEFAULT_EXPIRATION
        for option in options:
            option(self)
        # Local only: the script is loaded into Redis on first use
        self._set_script = client.register_script(SET_IF_EXISTS_SCRIPT)

    @classmethod
    def from_settings(cls, client: Redis, settings: SessionSettings) -> "RedisSessionStore":
        """Build a store from the configured prefix and expiration."""
        return cls(
            client,
            with_prefix(settings.session_prefix),
            with_expiration(settings.session_expiration),
        )

    def key(self, session_id: str) -> str:
        """The Redis key of the session with this id."""
        return redis_key(self.prefix, session_id)

    def _session(self, session_id: str, key: str) -> RedisSession:
        return RedisSession(session_id, key, self.client, self._set_script)

    async def generate(self, session_id: str) -> RedisSession:
        """
        Create a session hash and set its TTL.

        The hash is seeded with a field mirroring the session id, since an
        empty hash does not exist in Redis. HSET and EXPIRE run in one
        MULTI/EXEC transaction so the record never lives without a TTL.

        Raises:
            StoreError: If the transaction fails.
        """
        key = self.key(session_id)
        try:
            async with self.client.pipeline(transaction=True) as pipe:
                pipe.hset(key, session_id, session_id)
                pipe.expire(key, self.expiration)
                await pipe.execute()
        except RedisError as e:
            raise _store_error("generate", session_id, e) from e

        logger.debug("Session generated", extra={
            "extra_data": {
                "session_id": session_id,
                "key": key,
                "expiration_seconds": int(self.expiration.total_seconds()),
            }
        })
        return self._session(session_id, key)

    async def refresh(self, session_id: str) -> None:
        """
        Reset the session's TTL to the configured expiration.

        Stored attributes are left untouched.

        Raises:
            SessionNotFoundError: If EXPIRE reports the key absent.
            StoreError: If the Redis call fails.
        """
        key = self.key(session_id)
        try:
            refreshed = await self.client.expire(key, self.expiration)
        except RedisError as e:
            raise _store_error("refresh", session_id, e) from e

        if not refreshed:
            raise SessionNotFoundError(session_id)

    async def get(self, session_id: str) -> RedisSession:
        """
        Return a handle to an existing session.

        Only existence is checked; callers fetch the attributes they need
        through the handle afterwards.

        Raises:
            SessionNotFoundError: If the key does not exist.
            StoreError: If the Redis call fails.
        """
        key = self.key(session_id)
        try:
            count = await self.client.exists(key)
        except RedisError as e:
            raise _store_error("get", session_id, e) from e

        if count != 1:
            raise SessionNotFoundError(session_id)
        return self._session(session_id, key)

    async def remove(self, session_id: str) -> None:
        """
        Delete the session hash.

        Removing an absent session is not an error.

        Raises:
            StoreError: If the Redis call fails.
        """
        key = self.key(session_id)
        try:
            deleted = await self.client.delete(key)
        except RedisError as e:
            raise _store_error("remove", session_id, e) from e

        logger.debug("Session removed", extra={
            "extra_data": {"session_id": session_id, "key": key, "deleted": deleted}
        })

    async def health_check(self) -> bool:
        """
        Check connectivity to Redis with PING.

        Returns:
            True if Redis answered, False otherwise.
        """
        try:
            return bool(await self.client.ping())
        except (RedisError, OSError) as e:
            logger.warning("Session store health check failed", extra={
                "extra_data": {"error": str(e), "error_type": type(e).__name__}
            })
            return False

    def __repr__(self) -> str:
        return (
            f"RedisSessionStore(prefix={self.prefix!r}, "
            f"expiration={self.expiration!r})"
        )


def _store_error(operation: str, session_id: str, cause: RedisError) -> StoreError:
    logger.warning("Session store call failed", extra={
        "extra_data": {
            "operation": operation,
            "session_id": session_id,
            "error": str(cause),
            "error_type": type(cause).__name__,
        }
    })
    return StoreError(
        f"Session store call failed during {operation}",
        operation=operation,
        session_id=session_id,
        cause=cause,
    )
