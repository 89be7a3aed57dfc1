"""Cache status and HTTP cache-control entities."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class CacheStatus(Enum):
    """Classification of a cache lookup.

    HIT: Value was served from the cache.
    MISS: Value was absent, expired or unreadable.
    BYPASS: The cache was deliberately skipped (e.g. authenticated request).
    """

    HIT = "HIT"
    MISS = "MISS"
    BYPASS = "BYPASS"


class CacheScope(Enum):
    """Cache scope for the Cache-Control header.

    PUBLIC: Response can be cached globally (CDN, shared cache).
    PRIVATE: Response contains user-specific data.
    """

    PUBLIC = "public"
    PRIVATE = "private"


@dataclass(frozen=True)
class CacheLookup:
    """Result of a cache read, with its hit/miss classification."""

    value: Any
    status: CacheStatus

    @property
    def is_hit(self) -> bool:
        return self.status == CacheStatus.HIT

    @classmethod
    def hit(cls, value: Any) -> "CacheLookup":
        return cls(value=value, status=CacheStatus.HIT)

    @classmethod
    def miss(cls) -> "CacheLookup":
        return cls(value=None, status=CacheStatus.MISS)


@dataclass(frozen=True)
class ResponseCachePolicy:
    """HTTP caching policy attached to a cached route."""

    max_age: int
    scope: CacheScope = CacheScope.PUBLIC

    @property
    def is_cacheable(self) -> bool:
        """Check if the response is cacheable."""
        return self.max_age > 0

    def to_http_header(self) -> str:
        """Generate HTTP Cache-Control header value."""
        if not self.is_cacheable:
            return "no-store"
        return f"{self.scope.value}, max-age={self.max_age}"
