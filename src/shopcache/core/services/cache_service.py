"""Cache service - main orchestrator for caching operations."""

import inspect
import logging
from collections.abc import Awaitable, Callable, Iterable
from datetime import timedelta
from typing import Any

from shopcache.core.entities.cache_config import CacheConfig
from shopcache.core.entities.cache_control import CacheLookup
from shopcache.core.exceptions import SerializationError
from shopcache.core.interfaces.cache_backend import ICacheBackend
from shopcache.core.interfaces.key_builder import IKeyBuilder
from shopcache.core.interfaces.serializer import ISerializer

logger = logging.getLogger(__name__)

TTL = int | float | timedelta | None


class CacheService:
    """Domain service that orchestrates caching operations.

    This is the main entry point for cache operations, composing
    backend, key builder, and serializer. It implements the cache-aside
    protocol and never lets a cache failure reach the caller: backend
    and serialization errors are logged and read as a miss.
    """

    def __init__(
        self,
        backend: ICacheBackend,
        key_builder: IKeyBuilder,
        serializer: ISerializer,
        config: CacheConfig | None = None,
    ) -> None:
        """Initialize the cache service.

        Args:
            backend: The cache backend to use for storage.
            key_builder: The key builder for generating cache keys.
            serializer: The serializer for encoding/decoding values.
            config: Optional cache configuration. Uses defaults if not provided.
        """
        self._backend = backend
        self._key_builder = key_builder
        self._serializer = serializer
        self._config = config or CacheConfig()

        # Statistics
        self._hits = 0
        self._misses = 0
        self._errors = 0

    @property
    def config(self) -> CacheConfig:
        """Get the cache configuration."""
        return self._config

    @property
    def backend(self) -> ICacheBackend:
        return self._backend

    @property
    def key_builder(self) -> IKeyBuilder:
        return self._key_builder

    @property
    def stats(self) -> dict[str, int]:
        """Get cache statistics.

        Returns:
            Dictionary with hits, misses, errors and total lookups.
        """
        return {
            "hits": self._hits,
            "misses": self._misses,
            "errors": self._errors,
            "total": self._hits + self._misses,
        }

    def key(self, prefix: str, *qualifiers: Any, **params: Any) -> str:
        """Build a domain cache key with the configured key builder."""
        return self._key_builder.build(prefix, *qualifiers, **params)

    async def lookup(self, key: str) -> CacheLookup:
        """Read a key and classify the result as hit or miss.

        Args:
            key: The cache key.

        Returns:
            A CacheLookup carrying the value and its status.
        """
        if not self._config.enabled:
            self._misses += 1
            return CacheLookup.miss()

        try:
            data = await self._backend.get(key)
        except Exception as e:
            self._record_error("get", key, e)
            self._misses += 1
            return CacheLookup.miss()

        if data is None:
            self._misses += 1
            logger.debug("Cache miss: %s", key)
            return CacheLookup.miss()

        try:
            value = self._serializer.deserialize(data)
        except SerializationError as e:
            self._record_error("decode", key, e)
            self._misses += 1
            return CacheLookup.miss()

        self._hits += 1
        logger.debug("Cache hit: %s", key)
        return CacheLookup.hit(value)

    async def get(self, key: str) -> Any | None:
        """Get a cached value.

        Args:
            key: The cache key.

        Returns:
            The cached value, or None on miss or cache failure.
        """
        return (await self.lookup(key)).value

    async def set(self, key: str, value: Any, ttl: TTL = None) -> bool:
        """Store a value.

        Args:
            key: The cache key.
            value: JSON-serializable value to cache.
            ttl: Seconds or timedelta. Uses config default if not provided.

        Returns:
            True if the value was stored, False if caching failed.
        """
        if not self._config.enabled:
            return False

        try:
            data = self._serializer.serialize(value)
            await self._backend.set(key, data, self._resolve_ttl(ttl))
        except Exception as e:
            self._record_error("set", key, e)
            return False
        return True

    async def delete(self, key: str) -> bool:
        """Delete a single key.

        Returns:
            True if the key existed and was removed, False if it was
            absent or the delete failed.
        """
        try:
            return await self._backend.delete(key)
        except Exception as e:
            self._record_error("delete", key, e)
            return False

    async def delete_pattern(self, pattern: str) -> int:
        """Delete every key matching a glob pattern.

        Args:
            pattern: Glob-style pattern, ``*`` as wildcard.

        Returns:
            Number of keys deleted; 0 on failure.
        """
        try:
            return await self._backend.delete_pattern(pattern)
        except Exception as e:
            self._record_error("delete_pattern", pattern, e)
            return 0

    async def get_or_set(
        self,
        key: str,
        compute: Callable[[], Awaitable[Any] | Any],
        ttl: TTL = None,
    ) -> Any:
        """Return the cached value, computing and storing it on a miss.

        Errors raised by ``compute`` propagate unchanged; a ``None``
        result is returned but not cached.

        Args:
            key: The cache key.
            compute: Sync or async callable producing the value.
            ttl: Seconds or timedelta for the stored value.

        Returns:
            The cached or freshly computed value.
        """
        cached = await self.lookup(key)
        if cached.is_hit:
            return cached.value

        value = compute()
        if inspect.isawaitable(value):
            value = await value

        if value is not None:
            await self.set(key, value, ttl)
        return value

    async def get_many(self, keys: Iterable[str]) -> dict[str, Any]:
        """Get several keys in one round trip.

        Args:
            keys: Keys to read.

        Returns:
            Mapping of the keys that are cached; absent or unreadable
            keys are omitted.
        """
        keys = list(keys)
        if not keys or not self._config.enabled:
            return {}

        try:
            found = await self._backend.get_many(keys)
        except Exception as e:
            self._record_error("get_many", ",".join(keys), e)
            return {}

        result: dict[str, Any] = {}
        for key, data in found.items():
            try:
                result[key] = self._serializer.deserialize(data)
            except SerializationError as e:
                self._record_error("decode", key, e)

        self._hits += len(result)
        self._misses += len(keys) - len(result)
        return result

    async def set_many(
        self,
        items: Iterable[tuple[str, Any]] | dict[str, Any],
        ttl: TTL = None,
    ) -> bool:
        """Store several values with a shared TTL in one round trip.

        Returns:
            True if every value was stored.
        """
        if isinstance(items, dict):
            items = items.items()
        items = list(items)
        if not items:
            return True
        if not self._config.enabled:
            return False

        try:
            encoded = [(key, self._serializer.serialize(value)) for key, value in items]
            await self._backend.set_many(encoded, self._resolve_ttl(ttl))
        except Exception as e:
            self._record_error("set_many", ",".join(key for key, _ in items), e)
            return False
        return True

    async def check_health(self) -> dict[str, Any]:
        """Report whether the backing store answers.

        Returns:
            ``{"status": "up" | "down", "details": {...}}``.
        """
        try:
            healthy = await self._backend.ping()
        except Exception as e:
            healthy = False
            logger.warning("Cache health check failed: %s", e)

        details = dict(self._backend.describe())
        details["enabled"] = self._config.enabled
        details["stats"] = self.stats
        return {"status": "up" if healthy else "down", "details": details}

    async def clear(self) -> None:
        """Clear all cached entries."""
        try:
            await self._backend.clear()
        except Exception as e:
            self._record_error("clear", "*", e)
        self._hits = 0
        self._misses = 0
        self._errors = 0

    async def close(self) -> None:
        await self._backend.close()

    def _resolve_ttl(self, ttl: TTL) -> timedelta:
        if ttl is None:
            return self._config.default_ttl  # type: ignore[return-value]
        if isinstance(ttl, timedelta):
            return ttl
        return timedelta(seconds=ttl)

    def _record_error(self, operation: str, key: str, error: Exception) -> None:
        self._errors += 1
        logger.warning("Cache %s error for %s: %s", operation, key, error)
