"""Domain services for shopcache."""

from shopcache.core.services.cache_service import CacheService
from shopcache.core.services.invalidation import CacheInvalidator
from shopcache.core.services.warming import CacheWarmer, WarmupTask, warm_cache

__all__ = [
    "CacheService",
    "CacheInvalidator",
    # Startup warming
    "CacheWarmer",
    "WarmupTask",
    "warm_cache",
]
