"""Cache backend interface."""

from collections.abc import Iterable
from datetime import timedelta
from typing import Any, Protocol


class ICacheBackend(Protocol):
    """Contract for cache storage backends.

    All cache backends must implement this protocol to be used
    with CacheService. Methods are async so that in-memory and
    networked stores are interchangeable; values are opaque bytes
    produced by the service's serializer.
    """

    async def get(self, key: str) -> bytes | None:
        """Retrieve cached value by key.

        Args:
            key: The cache key to retrieve.

        Returns:
            The cached value as bytes, or None if not found or expired.
        """
        ...

    async def set(
        self,
        key: str,
        value: bytes,
        ttl: timedelta | None = None,
    ) -> None:
        """Store value with optional TTL, replacing any previous value.

        Args:
            key: The cache key.
            value: The value to store as bytes.
            ttl: Optional time-to-live. If None, uses backend default.
        """
        ...

    async def delete(self, key: str) -> bool:
        """Delete cached value.

        Args:
            key: The cache key to delete.

        Returns:
            True if the key existed and was deleted, False otherwise.
        """
        ...

    async def delete_pattern(self, pattern: str) -> int:
        """Delete keys matching pattern.

        Args:
            pattern: Glob-style pattern to match keys.

        Returns:
            Number of keys deleted.
        """
        ...

    async def get_many(self, keys: Iterable[str]) -> dict[str, bytes]:
        """Retrieve several values at once.

        Args:
            keys: The cache keys to retrieve.

        Returns:
            Mapping of the keys that are currently cached. Absent keys
            are omitted.
        """
        ...

    async def set_many(
        self,
        items: Iterable[tuple[str, bytes]],
        ttl: timedelta | None = None,
    ) -> None:
        """Store several values with a shared TTL.

        Args:
            items: ``(key, value)`` pairs.
            ttl: Optional time-to-live applied to every item.
        """
        ...

    async def exists(self, key: str) -> bool:
        """Check if key exists in cache."""
        ...

    async def clear(self) -> None:
        """Clear all cached values."""
        ...

    async def ping(self) -> bool:
        """Check that the store answers.

        Returns:
            True if the store is reachable.
        """
        ...

    def describe(self) -> dict[str, Any]:
        """Return backend details for health reporting."""
        ...

    async def close(self) -> None:
        """Release connections held by the backend."""
        ...
