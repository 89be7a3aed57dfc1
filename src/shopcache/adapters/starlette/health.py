"""Operational health endpoint for the cache."""

from collections.abc import Awaitable, Callable

from starlette.requests import Request
from starlette.responses import JSONResponse

from shopcache.core.services.cache_service import CacheService


def health_endpoint(cache: CacheService) -> Callable[[Request], Awaitable[JSONResponse]]:
    """Build an endpoint reporting ``cache.check_health()``.

    The endpoint always answers 200: a cache outage degrades
    performance only, so it must not fail the service's health check.

    Example::

        Route("/health/cache", health_endpoint(cache))
    """

    async def endpoint(request: Request) -> JSONResponse:
        return JSONResponse(await cache.check_health())

    return endpoint
