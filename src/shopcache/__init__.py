"""shopcache - Cache-aside layer for e-commerce REST backends.

A Python library that puts a read-through cache in front of catalog,
category, portfolio and order endpoints, with Redis as the shared
store, an in-memory fallback for outages, transparent compression of
large payloads, an ASGI response cache middleware and domain-aware
invalidation helpers.

Example with FastAPI:
    from fastapi import FastAPI
    from shopcache import CacheConfig, CacheTTL, create_cache_service
    from shopcache.adapters.starlette import ResponseCacheMiddleware

    cache = create_cache_service(CacheConfig(redis_url="redis://localhost:6379"))

    app = FastAPI()
    app.add_middleware(
        ResponseCacheMiddleware,
        cache=cache,
        ttl=CacheTTL.LISTING,
        include_paths=["/api/user/*"],
    )

Cache-aside in a handler:
    @app.get("/api/user/category")
    async def all_categories():
        return await cache.get_or_set(
            cache.key("categories", "all"),
            lambda: db.categories.find({"status": "Active"}).to_list(None),
            CacheTTL.LISTING,
        )

Invalidation after a write:
    invalidator = CacheInvalidator(cache)
    await invalidator.product_changed(product_id)
"""

from shopcache.core.entities import (
    CacheConfig,
    CacheEntry,
    CacheKey,
    CacheLookup,
    CacheScope,
    CacheStatus,
    CacheTTL,
    ResponseCachePolicy,
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
from shopcache.decorators import cached, invalidates
from shopcache.factory import create_backend, create_cache_service
from shopcache.infrastructure import (
    ConnectionState,
    DefaultKeyBuilder,
    GzipSerializer,
    InMemoryCacheBackend,
    JsonSerializer,
    RedisCacheBackend,
)
from shopcache.infrastructure.key_builders import make_key

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Core entities
    "CacheConfig",
    "CacheEntry",
    "CacheKey",
    "CacheLookup",
    "CacheScope",
    "CacheStatus",
    "CacheTTL",
    "ResponseCachePolicy",
    # Errors
    "ShopCacheError",
    "ConfigurationError",
    "SerializationError",
    # Core interfaces
    "ICacheBackend",
    "IKeyBuilder",
    "ISerializer",
    # Core services
    "CacheService",
    "CacheInvalidator",
    "CacheWarmer",
    "WarmupTask",
    "warm_cache",
    # Infrastructure implementations
    "ConnectionState",
    "InMemoryCacheBackend",
    "RedisCacheBackend",
    "DefaultKeyBuilder",
    "GzipSerializer",
    "JsonSerializer",
    "make_key",
    # Wiring
    "create_backend",
    "create_cache_service",
    # Decorators
    "cached",
    "invalidates",
]
