"""Infrastructure layer implementations for shopcache."""

from shopcache.infrastructure.backends import (
    ConnectionState,
    InMemoryCacheBackend,
    RedisCacheBackend,
)
from shopcache.infrastructure.key_builders import DefaultKeyBuilder
from shopcache.infrastructure.serializers import GzipSerializer, JsonSerializer

__all__ = [
    "ConnectionState",
    "InMemoryCacheBackend",
    "RedisCacheBackend",
    "DefaultKeyBuilder",
    "GzipSerializer",
    "JsonSerializer",
]
