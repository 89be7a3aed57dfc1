"""Redis cache backend implementation."""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Iterable
from datetime import timedelta
from typing import Any, TypeVar

import redis.asyncio as redis
from redis.exceptions import RedisError

from shopcache.infrastructure.backends.memory import InMemoryCacheBackend

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Failures that mean the networked store cannot be used right now.
STORE_ERRORS = (RedisError, OSError, asyncio.TimeoutError)


class ConnectionState:
    """Availability flag for the networked store.

    Flipped down by failed operations and back up by successful
    ones. While down, ``should_recheck`` lets one call through every
    ``retry_interval`` seconds to re-check the connection, so an
    outage is never remembered forever.
    """

    def __init__(
        self,
        retry_interval: float = 5.0,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self._retry_interval = retry_interval
        self._timer = timer
        self._available = True
        self._last_failure: float | None = None
        self._last_error: str | None = None

    def is_available(self) -> bool:
        return self._available

    def should_recheck(self) -> bool:
        """Return True when a down store is due for a health re-check."""
        if self._available:
            return False
        if self._last_failure is None:
            return True
        return self._timer() - self._last_failure >= self._retry_interval

    def mark_up(self) -> None:
        if not self._available:
            logger.info("Redis connection restored")
        self._available = True
        self._last_error = None

    def mark_down(self, error: BaseException) -> None:
        if self._available:
            logger.warning("Redis unavailable, using in-memory fallback: %s", error)
        self._available = False
        self._last_failure = self._timer()
        self._last_error = str(error) or type(error).__name__

    @property
    def last_error(self) -> str | None:
        return self._last_error


class RedisCacheBackend:
    """Redis cache backend for distributed deployments.

    Supports TTL, pipelined batch operations and incremental pattern
    deletion. Every call is bounded by ``operation_timeout``. When
    Redis errors or times out the backend degrades instead of raising:
    the failing read is a miss, and subsequent operations use an
    in-memory fallback until the connection recovers.
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379",
        key_prefix: str = "shopcache",
        default_ttl: int | None = 300,
        operation_timeout: float = 1.0,
        retry_interval: float = 5.0,
        scan_count: int = 100,
        fallback: InMemoryCacheBackend | None = None,
        client: redis.Redis | None = None,
    ) -> None:
        """Initialize the Redis cache backend.

        Args:
            redis_url: Redis connection URL.
            key_prefix: Prefix for all cache keys. With an empty prefix the
                backend shares the keyspace and ``clear`` leaves Redis alone.
            default_ttl: Default TTL in seconds.
            operation_timeout: Upper bound in seconds for each Redis call.
            retry_interval: Seconds between reconnection checks while down.
            scan_count: COUNT hint for SCAN during pattern deletion.
            fallback: In-memory store used while Redis is unavailable.
            client: Pre-built Redis client (used instead of ``redis_url``).
        """
        if client is None:
            client = redis.from_url(  # type: ignore[no-untyped-call]
                redis_url,
                socket_timeout=operation_timeout,
                socket_connect_timeout=operation_timeout,
            )
        self._redis: redis.Redis = client
        self._key_prefix = key_prefix
        self._default_ttl = default_ttl
        self._operation_timeout = operation_timeout
        self._scan_count = scan_count
        self._fallback = fallback if fallback is not None else InMemoryCacheBackend()
        self._state = ConnectionState(retry_interval=retry_interval)

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def fallback(self) -> InMemoryCacheBackend:
        return self._fallback

    async def get(self, key: str) -> bytes | None:
        """Retrieve cached value by key.

        Args:
            key: The cache key to retrieve.

        Returns:
            The cached value as bytes, or None if not found, expired or
            the store failed.
        """
        if not await self._use_redis():
            return await self._fallback.get(key)

        try:
            return await self._call(self._redis.get(self._prefixed_key(key)))
        except STORE_ERRORS as e:
            self._state.mark_down(e)
            logger.warning("Cache get failed for %s: %s", key, e)
            return None

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
            ttl: Optional time-to-live. If None, uses default.
        """
        if await self._use_redis():
            try:
                await self._call(self._write(key, value, ttl))
                return
            except STORE_ERRORS as e:
                self._state.mark_down(e)
                logger.warning("Cache set failed for %s: %s", key, e)

        await self._fallback.set(key, value, ttl)

    async def delete(self, key: str) -> bool:
        """Delete cached value from Redis and from the fallback.

        Args:
            key: The cache key to delete.

        Returns:
            True if the key existed in either store.
        """
        deleted = False
        if await self._use_redis():
            try:
                result = await self._call(self._redis.delete(self._prefixed_key(key)))
                deleted = result > 0
            except STORE_ERRORS as e:
                self._state.mark_down(e)
                logger.warning("Cache delete failed for %s: %s", key, e)

        return await self._fallback.delete(key) or deleted

    async def delete_pattern(self, pattern: str) -> int:
        """Delete keys matching pattern from Redis and the fallback.

        Uses SCAN instead of KEYS so Redis is never blocked. A failure
        midway keeps the deletions already issued and returns the
        partial count.

        Args:
            pattern: Glob-style pattern to match keys.

        Returns:
            Number of keys deleted.
        """
        count = 0
        if await self._use_redis():
            count = await self._delete_by_pattern(self._prefixed_key(pattern))

        count += await self._fallback.delete_pattern(pattern)
        logger.debug("Deleted %d keys matching %s", count, pattern)
        return count

    async def get_many(self, keys: Iterable[str]) -> dict[str, bytes]:
        """Retrieve several values with a single MGET."""
        keys = list(keys)
        if not keys:
            return {}
        if not await self._use_redis():
            return await self._fallback.get_many(keys)

        try:
            values = await self._call(
                self._redis.mget([self._prefixed_key(key) for key in keys])
            )
        except STORE_ERRORS as e:
            self._state.mark_down(e)
            logger.warning("Cache batch get failed: %s", e)
            return {}

        return {key: value for key, value in zip(keys, values) if value is not None}

    async def set_many(
        self,
        items: Iterable[tuple[str, bytes]],
        ttl: timedelta | None = None,
    ) -> None:
        """Store several values in one pipelined round trip."""
        items = list(items)
        if not items:
            return

        if await self._use_redis():
            try:
                await self._call(self._write_many(items, ttl))
                return
            except STORE_ERRORS as e:
                self._state.mark_down(e)
                logger.warning("Cache batch set failed: %s", e)

        await self._fallback.set_many(items, ttl)

    async def exists(self, key: str) -> bool:
        """Check if key exists in cache."""
        if not await self._use_redis():
            return await self._fallback.exists(key)

        try:
            result = await self._call(self._redis.exists(self._prefixed_key(key)))
        except STORE_ERRORS as e:
            self._state.mark_down(e)
            return False
        return result > 0

    async def clear(self) -> None:
        """Clear all cached values with our prefix.

        Note: This only clears keys with our prefix, not the entire Redis DB.
        Without a prefix every key in the database would match, so only the
        fallback is cleared.
        """
        if not self._key_prefix:
            logger.warning("Refusing to clear Redis without a key prefix")
        elif await self._use_redis():
            await self._delete_by_pattern(self._prefixed_key("*"))
        await self._fallback.clear()

    async def ping(self) -> bool:
        """Ping Redis and update the connection state accordingly."""
        try:
            await self._call(self._redis.ping())
        except STORE_ERRORS as e:
            self._state.mark_down(e)
            return False
        self._state.mark_up()
        return True

    def describe(self) -> dict[str, Any]:
        details: dict[str, Any] = {
            "backend": "redis",
            "connected": self._state.is_available(),
            "fallback_size": len(self._fallback),
        }
        if self._state.last_error:
            details["error"] = self._state.last_error
        return details

    async def close(self) -> None:
        """Close the Redis connection."""
        await self._redis.aclose()
        await self._fallback.close()

    async def _use_redis(self) -> bool:
        """Decide whether this call goes to Redis or to the fallback."""
        if self._state.is_available():
            return True
        if self._state.should_recheck():
            return await self.ping()
        return False

    async def _call(self, awaitable: Awaitable[T]) -> T:
        result = await asyncio.wait_for(awaitable, timeout=self._operation_timeout)
        self._state.mark_up()
        return result

    async def _write(
        self,
        key: str,
        value: bytes,
        ttl: timedelta | None,
    ) -> Any:
        prefixed_key = self._prefixed_key(key)
        seconds = self._ttl_seconds(ttl)
        if seconds is not None:
            return await self._redis.setex(prefixed_key, seconds, value)
        return await self._redis.set(prefixed_key, value)

    async def _write_many(
        self,
        items: list[tuple[str, bytes]],
        ttl: timedelta | None,
    ) -> None:
        seconds = self._ttl_seconds(ttl)
        async with self._redis.pipeline(transaction=False) as pipe:
            for key, value in items:
                if seconds is not None:
                    pipe.setex(self._prefixed_key(key), seconds, value)
                else:
                    pipe.set(self._prefixed_key(key), value)
            await pipe.execute()

    async def _delete_by_pattern(self, pattern: str) -> int:
        """Delete keys matching a pattern using SCAN.

        Args:
            pattern: Redis glob pattern, already prefixed.

        Returns:
            Number of keys deleted before completion or failure.
        """
        count = 0
        cursor = 0

        try:
            while True:
                cursor, keys = await self._call(
                    self._redis.scan(cursor, match=pattern, count=self._scan_count)
                )

                if keys:
                    count += await self._call(self._redis.delete(*keys))

                if cursor == 0:
                    break
        except STORE_ERRORS as e:
            self._state.mark_down(e)
            logger.warning(
                "Pattern delete for %s stopped after %d keys: %s", pattern, count, e
            )

        return count

    def _ttl_seconds(self, ttl: timedelta | None) -> int | None:
        if ttl is not None:
            return max(1, int(ttl.total_seconds()))
        return self._default_ttl

    def _prefixed_key(self, key: str) -> str:
        """Add prefix to key if configured and not already present.

        Args:
            key: The cache key.

        Returns:
            The key with prefix.
        """
        if not self._key_prefix or key.startswith(f"{self._key_prefix}:"):
            return key
        return f"{self._key_prefix}:{key}"

    async def __aenter__(self) -> "RedisCacheBackend":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: type, exc_val: Exception, exc_tb: object) -> None:
        """Async context manager exit."""
        await self.close()
