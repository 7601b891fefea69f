"""
Integration test configuration and fixtures.

These tests run against a real Redis server so the Lua script, key TTLs
and transaction pipeline are exercised end to end.

Environment Variables:
- TEST_REDIS_URL: Redis URL to test against, e.g. redis://localhost:6379/15.
  Integration tests are skipped when it is not set.
"""
import os
import uuid

import pytest
import pytest_asyncio
import redis.asyncio as redis

TEST_REDIS_URL = os.getenv("TEST_REDIS_URL", "")


def pytest_collection_modifyitems(config, items):
    """Skip integration tests when no test Redis is configured."""
    if TEST_REDIS_URL:
        return
    skip = pytest.mark.skip(reason="TEST_REDIS_URL not set")
    for item in items:
        if "integration" in item.nodeid.split("/"):
            item.add_marker(skip)


@pytest_asyncio.fixture
async def redis_client():
    """Real Redis client, closed after the test."""
    client = redis.from_url(TEST_REDIS_URL, decode_responses=True)
    try:
        yield client
    finally:
        await client.aclose()


@pytest.fixture
def test_prefix() -> str:
    """A prefix unique to one test so runs never see each other's keys."""
    return "test" + uuid.uuid4().hex[:12]


@pytest_asyncio.fixture
async def cleanup_keys(redis_client, test_prefix):
    """Delete every key written under the test prefix."""
    yield
    keys = [key async for key in redis_client.scan_iter(match=f"{test_prefix}-*")]
    if keys:
        await redis_client.delete(*keys)
