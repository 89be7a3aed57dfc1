"""Domain entities for shopcache."""

from shopcache.core.entities.cache_config import CacheConfig, CacheTTL
from shopcache.core.entities.cache_control import (
    CacheLookup,
    CacheScope,
    CacheStatus,
    ResponseCachePolicy,
)
from shopcache.core.entities.cache_entry import CacheEntry
from shopcache.core.entities.cache_key import CacheKey

__all__ = [
    "CacheEntry",
    "CacheKey",
    "CacheConfig",
    "CacheTTL",
    "CacheLookup",
    "CacheScope",
    "CacheStatus",
    "ResponseCachePolicy",
]
