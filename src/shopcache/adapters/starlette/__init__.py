"""Starlette / FastAPI adapter for shopcache."""

from shopcache.adapters.starlette.health import health_endpoint
from shopcache.adapters.starlette.middleware import (
    CACHE_STATUS_HEADER,
    ResponseCacheMiddleware,
    cache_middleware,
)

__all__ = [
    "CACHE_STATUS_HEADER",
    "ResponseCacheMiddleware",
    "cache_middleware",
    "health_endpoint",
]
