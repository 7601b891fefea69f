"""
Session abstractions for server-side session storage.

A web framework depends on these interfaces only; the Redis-backed
implementation in ``websession.session.redis_store`` is one backend.
"""

from abc import ABC, abstractmethod
from typing import Any


class Session(ABC):
    """
    Handle bound to one session identifier.

    A handle holds no attribute data. Every read and write goes to the
    backing store, so a handle becomes unusable as soon as its record
    expires or is removed.
    """

    @property
    @abstractmethod
    def id(self) -> str:
        """The session identifier this handle is bound to."""

    @abstractmethod
    async def get(self, name: str) -> Any:
        """
        Read one attribute of the session.

        Args:
            name: Attribute name.

        Returns:
            The raw stored value; callers deserialize it.

        Raises:
            SessionNotFoundError: If the session record no longer exists.
            FieldNotFoundError: If the record exists but has no such attribute.
            StoreError: If the underlying store call fails.
        """

    @abstractmethod
    async def set(self, name: str, value: Any) -> None:
        """
        Write one attribute, only if the session record still exists.

        Args:
            name: Attribute name.
            value: Value to store.

        Raises:
            SessionNotFoundError: If the session record no longer exists.
            StoreError: If the underlying store call fails.
        """


class SessionStore(ABC):
    """
    Factory and registry of sessions.

    All methods are async to support non-blocking I/O with external
    storage systems. Cancellation of the awaiting task aborts the call;
    implementations do not retry.
    """

    @abstractmethod
    async def generate(self, session_id: str) -> Session:
        """
        Create a session record and return a handle to it.

        Raises:
            StoreError: If the underlying store call fails.
        """

    @abstractmethod
    async def refresh(self, session_id: str) -> None:
        """
        Reset the session's time-to-live to the configured expiration.

        Raises:
            SessionNotFoundError: If the session record does not exist.
            StoreError: If the underlying store call fails.
        """

    @abstractmethod
    async def get(self, session_id: str) -> Session:
        """
        Return a handle to an existing session without loading attributes.

        Raises:
            SessionNotFoundError: If the session record does not exist.
            StoreError: If the underlying store call fails.
        """

    @abstractmethod
    async def remove(self, session_id: str) -> None:
        """
        Delete a session record.

        This operation is idempotent: removing a session that does not
        exist is not an error.

        Raises:
            StoreError: If the underlying store call fails.
        """

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Check connectivity to the backing store.

        Returns:
            True if the store is reachable, False otherwise. Connectivity
            problems never raise.
        """
