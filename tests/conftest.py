"""Shared fixtures for Encore cache tests.

Copyright (c) 2024-2026 Encore Choir Web Team. All rights reserved.
"""

import fakeredis
import pytest

from encore_core.cache.cache import CacheConfig, CacheService
from encore_core.metrics.collector import CacheStatistics
from encore_core.store.backend import StorageConfig
from encore_core.store.memory import MemoryStore

FAKE_REDIS_URL = "redis://fake-redis:6379/0"


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fake_server():
    return fakeredis.FakeServer()


@pytest.fixture
def fake_client(fake_server):
    return fakeredis.FakeAsyncRedis(server=fake_server, decode_responses=True)


@pytest.fixture
def redis_cache(fake_client):
    """Cache service whose Redis is an in-process fake."""
    return CacheService(
        CacheConfig(redis_url=FAKE_REDIS_URL),
        client_factory=lambda config: fake_client,
    )


@pytest.fixture
def memory_cache(clock):
    """Cache service without Redis, running on the fallback store."""
    return CacheService(
        CacheConfig(redis_url=None),
        fallback=MemoryStore(StorageConfig(name="memory"), clock=clock),
        stats=CacheStatistics(),
    )


@pytest.fixture(params=["redis", "memory"])
def any_cache(request, redis_cache, memory_cache):
    """Run a test once against each active store."""
    return redis_cache if request.param == "redis" else memory_cache
