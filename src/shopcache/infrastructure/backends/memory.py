"""In-memory cache backend implementation."""

import fnmatch
import time
from collections.abc import Callable, Iterable
from datetime import timedelta
from typing import Any

from cachetools import FIFOCache  # type: ignore[import-untyped]

from shopcache.core.entities.cache_entry import CacheEntry

MIN_TTL_SECONDS = 1.0


class InMemoryCacheBackend:
    """In-memory cache backend with FIFO eviction and per-entry TTL.

    Suitable for single-process deployments and as the outage fallback
    of the Redis backend. Uses cachetools' FIFOCache so the map never
    grows beyond ``maxsize``; when full, expired entries are dropped
    first and then the oldest inserted entries are evicted. Overwriting
    a key counts as a new insertion.

    Entry lifetime is capped at ``default_ttl`` seconds even when a
    longer TTL is requested, and never drops below one second.
    """

    def __init__(
        self,
        maxsize: int = 100,
        default_ttl: float = 300.0,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the in-memory cache backend.

        Args:
            maxsize: Maximum number of items in the cache.
            default_ttl: Default and maximum TTL in seconds for items.
            timer: Clock used for expiry, injectable for tests.
        """
        self._maxsize = maxsize
        self._default_ttl = default_ttl
        self._timer = timer
        self._cache: FIFOCache[str, CacheEntry] = FIFOCache(maxsize=maxsize)

    async def get(self, key: str) -> bytes | None:
        """Retrieve cached value by key.

        Args:
            key: The cache key to retrieve.

        Returns:
            The cached value as bytes, or None if not found or expired.
        """
        return self._get_live(key)

    async def set(
        self,
        key: str,
        value: bytes,
        ttl: timedelta | None = None,
    ) -> None:
        """Store value with optional TTL.

        Args:
            key: The cache key.
            value: The value to store as bytes.
            ttl: Optional time-to-live, capped at the backend default.
        """
        self._store(key, value, ttl)

    async def delete(self, key: str) -> bool:
        """Delete cached value.

        Args:
            key: The cache key to delete.

        Returns:
            True if the key existed and was deleted, False otherwise.
        """
        return self._cache.pop(key, None) is not None

    async def delete_pattern(self, pattern: str) -> int:
        """Delete keys matching pattern.

        Args:
            pattern: Glob-style pattern to match keys.

        Returns:
            Number of keys deleted.
        """
        keys_to_delete = [
            key for key in list(self._cache.keys())
            if fnmatch.fnmatchcase(key, pattern)
        ]

        count = 0
        for key in keys_to_delete:
            if self._cache.pop(key, None) is not None:
                count += 1

        return count

    async def get_many(self, keys: Iterable[str]) -> dict[str, bytes]:
        """Retrieve the live values among ``keys``."""
        found: dict[str, bytes] = {}
        for key in keys:
            value = self._get_live(key)
            if value is not None:
                found[key] = value
        return found

    async def set_many(
        self,
        items: Iterable[tuple[str, bytes]],
        ttl: timedelta | None = None,
    ) -> None:
        """Store several values with a shared TTL."""
        for key, value in items:
            self._store(key, value, ttl)

    async def exists(self, key: str) -> bool:
        """Check if a live entry exists for key."""
        return self._get_live(key) is not None

    async def clear(self) -> None:
        """Clear all cached values."""
        self._cache.clear()

    async def ping(self) -> bool:
        return True

    def describe(self) -> dict[str, Any]:
        return {
            "backend": "memory",
            "size": len(self._cache),
            "maxsize": self._maxsize,
        }

    async def close(self) -> None:
        self._cache.clear()

    def purge_expired(self) -> int:
        """Remove every expired entry.

        Returns:
            Number of entries removed.
        """
        now = self._timer()
        expired = [key for key, entry in list(self._cache.items()) if entry.is_expired(now)]
        for key in expired:
            self._cache.pop(key, None)
        return len(expired)

    def keys(self) -> list[str]:
        """Return stored keys, oldest insertion first."""
        return list(self._cache.keys())

    def _get_live(self, key: str) -> bytes | None:
        entry = self._cache.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._timer()):
            self._cache.pop(key, None)
            return None
        return entry.value

    def _store(self, key: str, value: bytes, ttl: timedelta | None) -> None:
        seconds = self._default_ttl
        if ttl is not None:
            seconds = min(ttl.total_seconds(), self._default_ttl)
        # Same one second floor Redis SETEX gets
        seconds = max(MIN_TTL_SECONDS, seconds)

        if key not in self._cache and len(self._cache) >= self._maxsize:
            self.purge_expired()

        self._cache[key] = CacheEntry.create(
            key=key,
            value=value,
            now=self._timer(),
            ttl=seconds,
        )

    def __len__(self) -> int:
        """Return the number of items in the cache."""
        return len(self._cache)

    @property
    def maxsize(self) -> int:
        """Return the maximum size of the cache."""
        return self._maxsize
