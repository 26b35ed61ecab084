"""Shared fixtures and mocks for unit tests."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from trustkit.storage.base import CacheStore, InMemoryStore
from trustkit.utils.config import TokenConfig

SIGN_SECRET = "unit-test-signing-secret-0123456789abcdef"
AES_KEY = "0123456789abcdef"  # 16 bytes


class FakeClock:
    """Controllable replacement for time.time."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def token_config():
    """Token settings without encryption."""
    return TokenConfig(sign=SIGN_SECRET, time="60 * 60")


@pytest.fixture
def encrypted_token_config():
    """Token settings with payload encryption enabled."""
    return TokenConfig(sign=SIGN_SECRET, time="60 * 60", key_str=AES_KEY)


@pytest.fixture
def memory_store():
    return InMemoryStore()


@pytest.fixture
def mock_store():
    """Mock cache store."""
    store = AsyncMock(spec=CacheStore)
    store.get = AsyncMock(return_value=None)
    store.set = AsyncMock(return_value=None)
    store.delete = AsyncMock(return_value=None)
    store.exists = AsyncMock(return_value=False)
    store.range_get = AsyncMock(return_value=[])
    store.range_push_all = AsyncMock(return_value=None)
    store.flush_all = AsyncMock(return_value=None)
    store.is_healthy = AsyncMock(return_value=True)
    return store


@pytest.fixture
def mock_redis_pipeline():
    """Mock Redis transaction pipeline; commands are buffered until execute()."""
    pipe = MagicMock()
    pipe.__aenter__.return_value = pipe
    pipe.__aexit__.return_value = False
    pipe.execute = AsyncMock(return_value=[1, True])
    return pipe


@pytest.fixture
def mock_redis_client(mock_redis_pipeline):
    """Mock Redis client."""
    client = AsyncMock()
    client.ping = AsyncMock(return_value=True)
    client.get = AsyncMock(return_value=None)
    client.set = AsyncMock(return_value=True)
    client.delete = AsyncMock(return_value=1)
    client.exists = AsyncMock(return_value=0)
    client.lrange = AsyncMock(return_value=[])
    client.aclose = AsyncMock(return_value=None)
    client.pipeline = MagicMock(return_value=mock_redis_pipeline)
    return client
