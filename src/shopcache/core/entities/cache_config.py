"""Cache configuration entity."""

import os
from dataclasses import dataclass
from datetime import timedelta
from enum import IntEnum

from shopcache.core.exceptions import ConfigurationError


class CacheTTL(IntEnum):
    """Canonical TTL table in seconds, by data volatility."""

    SEARCH = 180
    LISTING = 300
    DETAIL = 600
    WARM = 600
    STATIC = 3600


@dataclass
class CacheConfig:
    """Cache configuration.

    Provides configuration options for the caching system, including
    TTL defaults, compression, fallback store sizing and Redis
    connection settings.

    Backend selection:
        When ``redis_url`` is set, a Redis backend is created with an
        in-memory fallback for outages. Otherwise the in-memory backend
        is used on its own.
    """

    enabled: bool = True
    default_ttl: timedelta | float | None = None
    key_prefix: str = "shopcache"

    # Networked store
    redis_url: str | None = None
    operation_timeout: float = 1.0
    retry_interval: float = 5.0
    scan_count: int = 100

    # Compression codec
    compression_threshold: int = 2048

    # In-memory fallback
    fallback_maxsize: int = 100
    fallback_ttl: float = 300.0

    def __post_init__(self) -> None:
        """Normalize the default TTL and validate numeric settings."""
        if self.default_ttl is None:
            self.default_ttl = timedelta(seconds=int(CacheTTL.LISTING))
        elif isinstance(self.default_ttl, (int, float)):
            self.default_ttl = timedelta(seconds=self.default_ttl)
        elif not isinstance(self.default_ttl, timedelta):
            raise ConfigurationError(
                f"default_ttl must be seconds or a timedelta, got {type(self.default_ttl).__name__}"
            )

        if self.default_ttl.total_seconds() <= 0:
            raise ConfigurationError("default_ttl must be positive")
        if self.compression_threshold < 0:
            raise ConfigurationError("compression_threshold must be >= 0")
        if self.fallback_maxsize < 1:
            raise ConfigurationError("fallback_maxsize must be >= 1")
        if self.fallback_ttl <= 0:
            raise ConfigurationError("fallback_ttl must be positive")
        if self.operation_timeout <= 0:
            raise ConfigurationError("operation_timeout must be positive")
        if self.scan_count < 1:
            raise ConfigurationError("scan_count must be >= 1")

    @classmethod
    def from_env(cls) -> "CacheConfig":
        """Build a configuration from ``CACHE_*`` and ``REDIS_URL`` variables."""
        try:
            return cls(
                enabled=os.getenv("CACHE_ENABLED", "true").lower() == "true",
                default_ttl=int(os.getenv("CACHE_DEFAULT_TTL", str(int(CacheTTL.LISTING)))),
                key_prefix=os.getenv("CACHE_KEY_PREFIX", "shopcache"),
                redis_url=os.getenv("REDIS_URL") or None,
                operation_timeout=float(os.getenv("CACHE_OPERATION_TIMEOUT", "1.0")),
                compression_threshold=int(os.getenv("CACHE_COMPRESSION_THRESHOLD", "2048")),
                fallback_maxsize=int(os.getenv("CACHE_FALLBACK_MAXSIZE", "100")),
                fallback_ttl=float(os.getenv("CACHE_FALLBACK_TTL", "300")),
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid cache environment setting: {e}") from e
