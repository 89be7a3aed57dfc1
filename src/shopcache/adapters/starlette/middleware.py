"""Response caching middleware for Starlette and FastAPI."""

import fnmatch
import logging
from collections.abc import Iterable
from typing import Any

from starlette.datastructures import MutableHeaders
from starlette.middleware import Middleware
from starlette.requests import HTTPConnection
from starlette.responses import Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from shopcache.core.entities.cache_control import CacheStatus, ResponseCachePolicy
from shopcache.core.services.cache_service import CacheService

logger = logging.getLogger(__name__)

CACHE_STATUS_HEADER = "X-Cache"
CACHEABLE_METHOD = "GET"


class ResponseCacheMiddleware:
    """ASGI middleware that serves read endpoints from the cache.

    Only unauthenticated ``GET`` requests are considered. Requests
    carrying an ``Authorization`` header or the auth cookie pass
    through untouched and are never stored, so per-user responses
    cannot leak between users.

    On a hit the wrapped app is not called and the stored status,
    content type and body are replayed. On a miss the app runs with a
    capturing ``send``; a 2xx response is stored under the request key
    and then sent to the client unchanged. Both paths add ``X-Cache``
    and ``Cache-Control`` headers.
    """

    def __init__(
        self,
        app: ASGIApp,
        cache: CacheService,
        ttl: int = 300,
        auth_cookie: str | None = "token",
        include_paths: Iterable[str] | None = None,
        debug: bool = False,
    ) -> None:
        """Initialize the middleware.

        Args:
            app: The ASGI app to wrap.
            cache: Cache service used for lookups and writes.
            ttl: Lifetime in seconds of stored responses.
            auth_cookie: Cookie whose presence marks a request as
                authenticated. None to check only the header.
            include_paths: Optional glob patterns; when given, only
                matching paths are cached.
            debug: Log hit/miss decisions at INFO level.
        """
        self.app = app
        self._cache = cache
        self._ttl = int(ttl)
        self._auth_cookie = auth_cookie
        self._include_paths = tuple(include_paths) if include_paths else None
        self._debug = debug
        self._policy = ResponseCachePolicy(max_age=int(ttl))

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope["method"] != CACHEABLE_METHOD:
            await self.app(scope, receive, send)
            return

        connection = HTTPConnection(scope)
        if not self._is_cacheable(connection):
            await self.app(scope, receive, send)
            return

        key = self._cache.key_builder.build_request_key(
            CACHEABLE_METHOD,
            connection.url.path,
            scope.get("query_string", b"").decode("latin-1"),
        )

        lookup = await self._cache.lookup(key)
        if lookup.is_hit and _is_stored_response(lookup.value):
            self._log(f"HIT {key}")
            response = self._replay(lookup.value)
            await response(scope, receive, send)
            return

        self._log(f"MISS {key}")
        await self._call_and_store(key, scope, receive, send)

    def _is_cacheable(self, connection: HTTPConnection) -> bool:
        if "authorization" in connection.headers:
            return False
        if self._auth_cookie and connection.cookies.get(self._auth_cookie):
            return False
        if self._include_paths is not None:
            path = connection.url.path
            return any(fnmatch.fnmatchcase(path, p) for p in self._include_paths)
        return True

    async def _call_and_store(
        self,
        key: str,
        scope: Scope,
        receive: Receive,
        send: Send,
    ) -> None:
        start_message: Message | None = None
        body_parts: list[bytes] = []

        async def capture(message: Message) -> None:
            nonlocal start_message
            if message["type"] == "http.response.start":
                start_message = message
                start_message.setdefault("headers", [])
            elif message["type"] == "http.response.body":
                body_parts.append(message.get("body", b""))
            else:
                await send(message)

        await self.app(scope, receive, capture)

        if start_message is None:
            return

        body = b"".join(body_parts)
        status = start_message["status"]
        if 200 <= status < 300:
            await self._store(key, start_message, body)

        headers = MutableHeaders(scope=start_message)
        self._apply_cache_headers(headers, CacheStatus.MISS)

        await send(start_message)
        await send({"type": "http.response.body", "body": body, "more_body": False})

    async def _store(self, key: str, start_message: Message, body: bytes) -> None:
        try:
            text = body.decode("utf-8")
        except UnicodeDecodeError:
            logger.debug("Not caching non-UTF-8 response for %s", key)
            return

        headers = MutableHeaders(scope=start_message)
        await self._cache.set(
            key,
            {
                "status": start_message["status"],
                "media_type": headers.get("content-type"),
                "body": text,
            },
            self._ttl,
        )

    def _replay(self, stored: dict[str, Any]) -> Response:
        response = Response(
            content=stored["body"].encode("utf-8"),
            status_code=stored["status"],
        )
        if stored.get("media_type"):
            response.headers["content-type"] = stored["media_type"]
        self._apply_cache_headers(response.headers, CacheStatus.HIT)
        return response

    def _apply_cache_headers(self, headers: MutableHeaders, status: CacheStatus) -> None:
        headers[CACHE_STATUS_HEADER] = status.value
        headers["Cache-Control"] = self._policy.to_http_header()

    def _log(self, message: str) -> None:
        if self._debug:
            logger.info("[CACHE] %s", message)


def _is_stored_response(value: Any) -> bool:
    return (
        isinstance(value, dict)
        and isinstance(value.get("status"), int)
        and isinstance(value.get("body"), str)
    )


def cache_middleware(cache: CacheService, ttl: int = 300, **options: Any) -> Middleware:
    """Build a ``Middleware`` entry for a route or application.

    Example::

        Route("/products", list_products, middleware=[cache_middleware(cache, 300)])
    """
    return Middleware(ResponseCacheMiddleware, cache=cache, ttl=ttl, **options)
