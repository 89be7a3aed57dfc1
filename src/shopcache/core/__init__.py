"""Core domain layer for shopcache."""

from shopcache.core.entities import (
    CacheConfig,
    CacheEntry,
    CacheKey,
    CacheLookup,
    CacheStatus,
    CacheTTL,
)
from shopcache.core.exceptions import (
    ConfigurationError,
    SerializationError,
    ShopCacheError,
)
from shopcache.core.interfaces import ICacheBackend, IKeyBuilder, ISerializer
from shopcache.core.services import (
    CacheInvalidator,
    CacheService,
    CacheWarmer,
    WarmupTask,
    warm_cache,
)

__all__ = [
    # Entities
    "CacheConfig",
    "CacheEntry",
    "CacheKey",
    "CacheLookup",
    "CacheStatus",
    "CacheTTL",
    # Errors
    "ShopCacheError",
    "ConfigurationError",
    "SerializationError",
    # Interfaces
    "ICacheBackend",
    "IKeyBuilder",
    "ISerializer",
    # Services
    "CacheService",
    "CacheInvalidator",
    "CacheWarmer",
    "WarmupTask",
    "warm_cache",
]
