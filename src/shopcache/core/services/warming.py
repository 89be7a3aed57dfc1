"""Startup cache warming."""

import asyncio
import inspect
import logging
import time
from collections import defaultdict
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from typing import Any

from shopcache.core.entities.cache_config import CacheTTL
from shopcache.core.services.cache_service import TTL, CacheService

logger = logging.getLogger(__name__)

WARMED_MARKER_KEY = "cache:warmed"


@dataclass(frozen=True)
class WarmupTask:
    """A well-known key and the loader that produces its value."""

    key: str
    loader: Callable[[], Awaitable[Any] | Any]
    ttl: TTL = int(CacheTTL.WARM)


class CacheWarmer:
    """Populates high-traffic keys before the first real request.

    Warming is best-effort: loader and cache failures are logged and
    never raised, so startup is not blocked by a slow database or a
    missing cache.
    """

    def __init__(self, cache: CacheService, tasks: Iterable[WarmupTask]) -> None:
        self._cache = cache
        self._tasks = list(tasks)

    @property
    def tasks(self) -> list[WarmupTask]:
        return list(self._tasks)

    async def warm(self) -> list[str]:
        """Run every loader and store the results.

        Returns:
            Keys that were written successfully.
        """
        logger.info("Warming %d cache keys", len(self._tasks))
        results = await asyncio.gather(
            *(self._load(task) for task in self._tasks),
            return_exceptions=True,
        )

        by_ttl: dict[Any, list[tuple[str, Any]]] = defaultdict(list)
        for task, result in zip(self._tasks, results):
            if isinstance(result, BaseException):
                logger.warning("Cache warming failed for %s: %s", task.key, result)
                continue
            by_ttl[task.ttl].append((task.key, result if result is not None else []))

        warmed: list[str] = []
        for ttl, items in by_ttl.items():
            if await self._cache.set_many(items, ttl):
                warmed.extend(key for key, _ in items)

        await self._cache.set(
            WARMED_MARKER_KEY,
            {"timestamp": int(time.time() * 1000), "keys": warmed},
            int(CacheTTL.WARM),
        )
        logger.info("Cache warmed: %d of %d keys", len(warmed), len(self._tasks))
        return warmed

    async def _load(self, task: WarmupTask) -> Any:
        value = task.loader()
        if inspect.isawaitable(value):
            value = await value
        return value


async def warm_cache(cache: CacheService, tasks: Iterable[WarmupTask]) -> list[str]:
    """Warm ``cache`` with ``tasks``; never raises."""
    try:
        return await CacheWarmer(cache, tasks).warm()
    except Exception as e:
        logger.error("Error warming cache: %s", e)
        return []
