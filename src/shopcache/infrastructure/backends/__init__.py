"""Cache backend implementations."""

from shopcache.infrastructure.backends.memory import InMemoryCacheBackend
from shopcache.infrastructure.backends.redis import ConnectionState, RedisCacheBackend

__all__ = ["ConnectionState", "InMemoryCacheBackend", "RedisCacheBackend"]
