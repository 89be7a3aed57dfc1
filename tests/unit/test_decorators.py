"""Tests for cache decorators."""

import pytest

from shopcache import CacheService, CacheTTL
from shopcache.decorators import cached, invalidates


class TestCachedDecorator:
    """Tests for @cached decorator."""

    @pytest.mark.asyncio
    async def test_cached_function(self, cache_service: CacheService) -> None:
        """Test that function results are cached."""
        call_count = 0

        @cached(cache_service, key="product:id={product_id}", ttl=CacheTTL.DETAIL)
        async def get_product(product_id: str) -> dict:
            nonlocal call_count
            call_count += 1
            return {"_id": product_id, "name": "Tank"}

        result1 = await get_product("p1")
        result2 = await get_product("p1")

        assert result1 == result2 == {"_id": "p1", "name": "Tank"}
        assert call_count == 1
        assert await cache_service.get("product:id=p1") == result1

    @pytest.mark.asyncio
    async def test_different_args_different_keys(self, cache_service: CacheService) -> None:
        """Test each argument combination gets its own entry."""
        call_count = 0

        @cached(cache_service, key="products:page={page}:subCategoryId={sub_category_id}")
        async def list_products(sub_category_id: str, page: int = 1) -> list:
            nonlocal call_count
            call_count += 1
            return [sub_category_id, page]

        await list_products("s1")
        await list_products("s1", page=2)
        await list_products(sub_category_id="s1", page=1)

        assert call_count == 2
        assert await cache_service.get("products:page=1:subCategoryId=s1") == ["s1", 1]

    @pytest.mark.asyncio
    async def test_callable_key(self, cache_service: CacheService) -> None:
        """Test a key function receives the call arguments."""

        @cached(
            cache_service,
            key=lambda q, limit=10: cache_service.key("products", "search", q=q, limit=limit),
        )
        async def search(q: str, limit: int = 10) -> list:
            return [q] * limit

        await search("tank", limit=2)

        assert await cache_service.get("products:search:limit=2:q=tank") == ["tank", "tank"]

    @pytest.mark.asyncio
    async def test_errors_are_not_cached(self, cache_service: CacheService) -> None:
        """Test a failing function propagates and leaves no entry."""

        @cached(cache_service, key="product:id={product_id}")
        async def get_product(product_id: str) -> dict:
            raise ValueError("not found")

        with pytest.raises(ValueError):
            await get_product("p1")

        assert await cache_service.get("product:id=p1") is None

    def test_preserves_metadata(self, cache_service: CacheService) -> None:
        @cached(cache_service, key="a")
        async def get_categories() -> list:
            """Load active categories."""
            return []

        assert get_categories.__name__ == "get_categories"
        assert get_categories.__doc__ == "Load active categories."


class TestInvalidatesDecorator:
    """Tests for @invalidates decorator."""

    @pytest.mark.asyncio
    async def test_invalidates_keys_and_patterns(self, cache_service: CacheService) -> None:
        """Test keys and patterns are cleared after the write."""
        await cache_service.set("product:id=p1", {"name": "old"})
        await cache_service.set("products:page=1", [1])
        await cache_service.set("product:id=p2", {"name": "other"})

        @invalidates(cache_service, "product:id={product_id}", "products:*")
        async def update_product(product_id: str, data: dict) -> dict:
            return {"_id": product_id, **data}

        result = await update_product("p1", {"name": "new"})

        assert result == {"_id": "p1", "name": "new"}
        assert await cache_service.get("product:id=p1") is None
        assert await cache_service.get("products:page=1") is None
        assert await cache_service.get("product:id=p2") == {"name": "other"}

    @pytest.mark.asyncio
    async def test_failed_write_keeps_cache(self, cache_service: CacheService) -> None:
        """Test nothing is invalidated when the write raises."""
        await cache_service.set("product:id=p1", {"name": "old"})

        @invalidates(cache_service, "product:id={product_id}")
        async def update_product(product_id: str) -> None:
            raise RuntimeError("write failed")

        with pytest.raises(RuntimeError):
            await update_product("p1")

        assert await cache_service.get("product:id=p1") == {"name": "old"}

    @pytest.mark.asyncio
    async def test_unknown_placeholder_is_kept(self, cache_service: CacheService) -> None:
        await cache_service.set("orders:userId={user_id}", 1)

        @invalidates(cache_service, "orders:userId={user_id}")
        async def place_order(order_id: str) -> str:
            return order_id

        await place_order("o1")

        assert await cache_service.get("orders:userId={user_id}") is None
