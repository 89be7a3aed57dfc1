"""Startup wiring for the cache service."""

import logging

from shopcache.core.entities.cache_config import CacheConfig
from shopcache.core.interfaces.cache_backend import ICacheBackend
from shopcache.core.services.cache_service import CacheService
from shopcache.infrastructure.backends.memory import InMemoryCacheBackend
from shopcache.infrastructure.backends.redis import RedisCacheBackend
from shopcache.infrastructure.key_builders.default import DefaultKeyBuilder
from shopcache.infrastructure.serializers.gzip import GzipSerializer

logger = logging.getLogger(__name__)


def create_backend(config: CacheConfig) -> ICacheBackend:
    """Select the cache backend once, at startup.

    Uses Redis with an in-memory fallback when ``config.redis_url`` is
    set, and the in-memory backend alone otherwise.
    """
    fallback = InMemoryCacheBackend(
        maxsize=config.fallback_maxsize,
        default_ttl=config.fallback_ttl,
    )
    if not config.redis_url:
        logger.warning("REDIS_URL not set, using in-memory cache")
        return fallback

    logger.info("Using Redis cache backend")
    return RedisCacheBackend(
        redis_url=config.redis_url,
        key_prefix=config.key_prefix,
        default_ttl=max(1, int(config.default_ttl.total_seconds())),  # type: ignore[union-attr]
        operation_timeout=config.operation_timeout,
        retry_interval=config.retry_interval,
        scan_count=config.scan_count,
        fallback=fallback,
    )


def create_cache_service(
    config: CacheConfig | None = None,
    backend: ICacheBackend | None = None,
) -> CacheService:
    """Build a CacheService from configuration.

    Args:
        config: Cache configuration. Read from the environment if None.
        backend: Explicit backend, e.g. for tests. Selected from config if None.

    Returns:
        A ready CacheService; pass it to every consumer.
    """
    config = config or CacheConfig.from_env()
    return CacheService(
        backend=backend if backend is not None else create_backend(config),
        key_builder=DefaultKeyBuilder(),
        serializer=GzipSerializer(threshold=config.compression_threshold),
        config=config,
    )
