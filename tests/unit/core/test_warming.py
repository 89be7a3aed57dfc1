"""Tests for startup cache warming."""

from unittest.mock import AsyncMock

import pytest

from shopcache import CacheService, CacheTTL, CacheWarmer, WarmupTask, warm_cache
from shopcache.core.services.warming import WARMED_MARKER_KEY


class TestCacheWarmer:
    """Tests for CacheWarmer."""

    @pytest.mark.asyncio
    async def test_warm_stores_every_result(self, cache_service: CacheService) -> None:
        """Test each loader result lands under its key."""
        tasks = [
            WarmupTask("categories:all", AsyncMock(return_value=[{"_id": "c1"}])),
            WarmupTask("home:featured", lambda: [{"_id": "p1"}]),
        ]

        warmed = await CacheWarmer(cache_service, tasks).warm()

        assert warmed == ["categories:all", "home:featured"]
        assert await cache_service.get("categories:all") == [{"_id": "c1"}]
        assert await cache_service.get("home:featured") == [{"_id": "p1"}]

    @pytest.mark.asyncio
    async def test_warm_writes_marker(self, cache_service: CacheService) -> None:
        await CacheWarmer(cache_service, [WarmupTask("a", lambda: 1)]).warm()

        marker = await cache_service.get(WARMED_MARKER_KEY)

        assert marker["keys"] == ["a"]
        assert isinstance(marker["timestamp"], int)

    @pytest.mark.asyncio
    async def test_none_result_is_stored_as_empty_list(self, cache_service: CacheService) -> None:
        await CacheWarmer(cache_service, [WarmupTask("a", AsyncMock(return_value=None))]).warm()

        assert await cache_service.get("a") == []

    @pytest.mark.asyncio
    async def test_failed_loader_is_skipped(
        self, cache_service: CacheService, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test one failing loader does not stop the others."""
        tasks = [
            WarmupTask("a", AsyncMock(side_effect=RuntimeError("db timeout"))),
            WarmupTask("b", lambda: [2]),
        ]

        with caplog.at_level("WARNING"):
            warmed = await CacheWarmer(cache_service, tasks).warm()

        assert warmed == ["b"]
        assert await cache_service.get("a") is None
        assert "db timeout" in caplog.text

    @pytest.mark.asyncio
    async def test_task_ttl_is_honored(self, cache_service: CacheService, clock) -> None:
        tasks = [
            WarmupTask("short", lambda: 1, ttl=CacheTTL.SEARCH),
            WarmupTask("long", lambda: 2),
        ]
        await CacheWarmer(cache_service, tasks).warm()

        clock.advance(int(CacheTTL.SEARCH))

        assert await cache_service.get("short") is None
        assert await cache_service.get("long") == 2

    def test_default_ttl(self) -> None:
        assert WarmupTask("a", lambda: 1).ttl == CacheTTL.WARM


class TestWarmCache:
    """Tests for the warm_cache helper."""

    @pytest.mark.asyncio
    async def test_never_raises(self) -> None:
        """Test a cache failure during warming is swallowed and logged."""
        broken = AsyncMock(spec=CacheService)
        broken.set_many.side_effect = RuntimeError("no cache")

        assert await warm_cache(broken, [WarmupTask("a", lambda: 1)]) == []

    @pytest.mark.asyncio
    async def test_returns_warmed_keys(self, cache_service: CacheService) -> None:
        assert await warm_cache(cache_service, [WarmupTask("a", lambda: 1)]) == ["a"]
