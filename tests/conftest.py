"""Pytest configuration for shopcache tests."""

import pytest

from shopcache import (
    CacheConfig,
    CacheService,
    DefaultKeyBuilder,
    GzipSerializer,
    InMemoryCacheBackend,
)


class FakeClock:
    """Manually advanced clock for expiry tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def memory_backend(clock: FakeClock) -> InMemoryCacheBackend:
    return InMemoryCacheBackend(maxsize=100, default_ttl=300.0, timer=clock)


@pytest.fixture
def cache_service(memory_backend: InMemoryCacheBackend) -> CacheService:
    """Create a cache service over the in-memory backend."""
    return CacheService(
        backend=memory_backend,
        key_builder=DefaultKeyBuilder(),
        serializer=GzipSerializer(threshold=2048),
        config=CacheConfig(default_ttl=300),
    )


@pytest.fixture
def fake_redis():
    """Provide a fake Redis client for tests that need it."""
    fakeredis = pytest.importorskip("fakeredis")
    from fakeredis import aioredis as fakeredis_aioredis

    return fakeredis_aioredis.FakeRedis(server=fakeredis.FakeServer())
