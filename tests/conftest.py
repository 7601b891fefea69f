"""
Shared pytest fixtures and configuration for all tests.
"""
import os
from datetime import timedelta
from typing import Any, Dict, List, Tuple
from unittest.mock import AsyncMock, MagicMock

import pytest
from hypothesis import Phase, Verbosity, settings
from redis.exceptions import DataError

# Hypothesis profiles for property-based tests
settings.register_profile(
    "default",
    max_examples=100,
    verbosity=Verbosity.normal,
    deadline=None,  # Disable deadline for async tests
    print_blob=True,
)

settings.register_profile(
    "ci",
    max_examples=200,
    verbosity=Verbosity.verbose,
    deadline=None,
    print_blob=True,
    derandomize=True,
)

settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    deadline=None,
    print_blob=True,
    phases=[Phase.explicit, Phase.reuse, Phase.generate],  # Skip shrinking for speed
)

settings.register_profile(
    "fast",
    max_examples=20,
    verbosity=Verbosity.normal,
    deadline=None,
)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "default"))


# =============================================================================
# In-memory Redis double
# =============================================================================

def _encode(value: Any) -> str:
    """Mirror redis-py's argument encoding with decode_responses=True."""
    if isinstance(value, bytes):
        return value.decode("utf-8")
    if isinstance(value, str):
        return value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DataError(
            f"Invalid input of type: '{type(value).__name__}'. "
            "Convert to a bytes, string, int or float first."
        )
    return repr(value)


class InMemoryScript:
    """
    Stand-in for redis-py's AsyncScript running the set-if-exists script.

    Lua cannot run in-process, so the script's behavior is emulated; the
    integration tests run the real script against Redis.
    """

    def __init__(self, redis: "InMemoryRedis", script: str):
        self.redis = redis
        self.script = script
        self.calls: List[Tuple[list, list]] = []

    async def __call__(self, keys=None, args=None, client=None):
        keys = list(keys or [])
        args = list(args or [])
        self.calls.append((keys, args))
        if keys[0] not in self.redis.hashes:
            return -1
        return await self.redis.hset(keys[0], args[0], args[1])


class InMemoryPipeline:
    """Queues commands and applies them together on execute()."""

    def __init__(self, redis: "InMemoryRedis", transaction: bool = True):
        self.redis = redis
        self.transaction = transaction
        self.commands: List[Tuple[str, tuple]] = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        self.commands = []

    def hset(self, key, field, value):
        self.commands.append(("hset", (key, field, value)))
        return self

    def expire(self, key, ttl):
        self.commands.append(("expire", (key, ttl)))
        return self

    async def execute(self):
        self.redis.executed_pipelines.append(list(self.commands))
        results = []
        for name, args in self.commands:
            results.append(await getattr(self.redis, name)(*args))
        self.commands = []
        return results


class InMemoryRedis:
    """
    Async Redis double covering the hash, key and scripting commands used
    by the session store. TTLs are recorded but never elapse on their own;
    call expire_now() to simulate expiry.
    """

    def __init__(self):
        self.hashes: Dict[str, Dict[str, str]] = {}
        self.ttls: Dict[str, int] = {}
        self.scripts: List[InMemoryScript] = []
        self.executed_pipelines: List[list] = []
        self.closed = False

    async def hset(self, key, field, value):
        fields = self.hashes.setdefault(key, {})
        added = 0 if field in fields else 1
        fields[_encode(field)] = _encode(value)
        return added

    async def hget(self, key, field):
        return self.hashes.get(key, {}).get(field)

    async def exists(self, *keys):
        return sum(1 for key in keys if key in self.hashes)

    async def expire(self, key, ttl):
        if key not in self.hashes:
            return False
        if isinstance(ttl, timedelta):
            ttl = int(ttl.total_seconds())
        self.ttls[key] = ttl
        return True

    async def ttl(self, key):
        if key not in self.hashes:
            return -2
        return self.ttls.get(key, -1)

    async def delete(self, *keys):
        count = 0
        for key in keys:
            if self.hashes.pop(key, None) is not None:
                count += 1
            self.ttls.pop(key, None)
        return count

    async def ping(self):
        return True

    async def aclose(self):
        self.closed = True

    def register_script(self, script):
        registered = InMemoryScript(self, script)
        self.scripts.append(registered)
        return registered

    def pipeline(self, transaction=True):
        return InMemoryPipeline(self, transaction=transaction)

    def expire_now(self, key):
        """Simulate Redis expiring a key."""
        self.hashes.pop(key, None)
        self.ttls.pop(key, None)


@pytest.fixture
def fake_redis() -> InMemoryRedis:
    """In-memory Redis double that reads back what it writes."""
    return InMemoryRedis()


@pytest.fixture
def mock_redis() -> MagicMock:
    """
    Create a mock Redis client for unit tests.

    Configure side effects on individual commands to exercise failure
    paths; the registered script is exposed as ``mock.set_script``.
    """
    mock = MagicMock()
    mock.hget = AsyncMock(return_value=None)
    mock.exists = AsyncMock(return_value=0)
    mock.expire = AsyncMock(return_value=True)
    mock.delete = AsyncMock(return_value=1)
    mock.ping = AsyncMock(return_value=True)

    script = AsyncMock(return_value=1)
    mock.register_script = MagicMock(return_value=script)
    mock.set_script = script

    pipeline = MagicMock()
    pipeline.__aenter__ = AsyncMock(return_value=pipeline)
    pipeline.__aexit__ = AsyncMock(return_value=False)
    pipeline.execute = AsyncMock(return_value=[1, True])
    mock.pipeline = MagicMock(return_value=pipeline)
    mock.pipe = pipeline

    return mock
