"""Cache entry entity."""

from dataclasses import dataclass
from datetime import timedelta


@dataclass(frozen=True)
class CacheEntry:
    """Immutable cache entry value object.

    Represents a stored value with its insertion time and TTL.
    Times are seconds on the clock of the store that created the
    entry (monotonic for the in-memory backend).
    """

    key: str
    value: bytes
    inserted_at: float
    ttl: float | None = None

    @property
    def expires_at(self) -> float | None:
        """Calculate expiration time.

        Returns:
            The time when this entry expires, or None if no TTL.
        """
        if self.ttl is None:
            return None
        return self.inserted_at + self.ttl

    def is_expired(self, now: float) -> bool:
        """Check if entry has expired at ``now``.

        Args:
            now: Current time on the store's clock.

        Returns:
            True if the entry has expired, False otherwise.
        """
        if self.expires_at is None:
            return False
        return now >= self.expires_at

    @classmethod
    def create(
        cls,
        key: str,
        value: bytes,
        now: float,
        ttl: timedelta | float | None = None,
    ) -> "CacheEntry":
        """Factory method to create a new cache entry.

        Args:
            key: The cache key.
            value: The stored bytes.
            now: Insertion time on the store's clock.
            ttl: Optional time-to-live.

        Returns:
            A new CacheEntry instance.
        """
        if isinstance(ttl, timedelta):
            ttl = ttl.total_seconds()
        return cls(key=key, value=value, inserted_at=now, ttl=ttl)
