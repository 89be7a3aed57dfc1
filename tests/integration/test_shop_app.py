"""End-to-end tests for a catalog app using shopcache."""

from typing import Any

import pytest
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from shopcache import (
    CacheConfig,
    CacheInvalidator,
    CacheService,
    CacheTTL,
    InMemoryCacheBackend,
    RedisCacheBackend,
    WarmupTask,
    cached,
    create_cache_service,
    warm_cache,
)
from shopcache.adapters.starlette import (
    CACHE_STATUS_HEADER,
    ResponseCacheMiddleware,
    health_endpoint,
)


class Catalog:
    """In-memory product store that counts reads."""

    def __init__(self) -> None:
        self.products: dict[str, dict[str, Any]] = {
            "p1": {"_id": "p1", "name": "Tank", "price": 100},
            "p2": {"_id": "p2", "name": "Filter", "price": 20},
        }
        self.reads = 0

    async def product(self, product_id: str) -> dict[str, Any] | None:
        self.reads += 1
        return self.products.get(product_id)

    async def all_products(self) -> list[dict[str, Any]]:
        self.reads += 1
        return list(self.products.values())


def build_app(cache: CacheService, catalog: Catalog) -> Starlette:
    invalidator = CacheInvalidator(
        cache,
        route_patterns={"product": ["http:GET:/api/user/product*"]},
    )

    @cached(cache, key="product:id={product_id}", ttl=CacheTTL.DETAIL)
    async def load_product(product_id: str) -> dict[str, Any] | None:
        return await catalog.product(product_id)

    async def product_detail(request: Request) -> JSONResponse:
        product = await load_product(request.path_params["product_id"])
        if product is None:
            return JSONResponse({"success": False}, status_code=404)
        return JSONResponse({"success": True, "data": product})

    async def product_list(request: Request) -> JSONResponse:
        products = await cache.get_or_set(
            cache.key("products", "all"),
            catalog.all_products,
            CacheTTL.LISTING,
        )
        return JSONResponse({"success": True, "products": products})

    async def update_product(request: Request) -> JSONResponse:
        product_id = request.path_params["product_id"]
        catalog.products[product_id].update(await request.json())
        await invalidator.product_changed(product_id)
        return JSONResponse({"success": True})

    app = Starlette(
        routes=[
            Route("/api/user/product/{product_id}", product_detail),
            Route("/api/user/products", product_list),
            Route("/api/admin/product/{product_id}", update_product, methods=["PUT"]),
            Route("/health/cache", health_endpoint(cache)),
        ]
    )
    app.add_middleware(
        ResponseCacheMiddleware,
        cache=cache,
        ttl=CacheTTL.LISTING,
        include_paths=["/api/user/*"],
    )
    return app


@pytest.fixture
def catalog() -> Catalog:
    return Catalog()


@pytest.fixture
def client(cache_service: CacheService, catalog: Catalog) -> TestClient:
    return TestClient(build_app(cache_service, catalog))


class TestShopApp:
    """Tests for reads, writes and invalidation through HTTP."""

    def test_repeated_reads_hit_cache(self, client: TestClient, catalog: Catalog) -> None:
        for _ in range(3):
            response = client.get("/api/user/product/p1")

        assert response.headers[CACHE_STATUS_HEADER] == "HIT"
        assert response.json()["data"]["name"] == "Tank"
        assert catalog.reads == 1

    def test_update_invalidates_detail_and_listing(
        self, client: TestClient, catalog: Catalog
    ) -> None:
        """Test a write is visible on the next read of every affected endpoint."""
        client.get("/api/user/product/p1")
        client.get("/api/user/products")

        client.put("/api/admin/product/p1", json={"name": "Big Tank"})

        detail = client.get("/api/user/product/p1")
        listing = client.get("/api/user/products")

        assert detail.headers[CACHE_STATUS_HEADER] == "MISS"
        assert detail.json()["data"]["name"] == "Big Tank"
        assert listing.headers[CACHE_STATUS_HEADER] == "MISS"
        assert {p["name"] for p in listing.json()["products"]} == {"Big Tank", "Filter"}

    def test_update_keeps_unrelated_entries(self, client: TestClient, catalog: Catalog) -> None:
        client.get("/api/user/product/p2")
        client.put("/api/admin/product/p1", json={"price": 90})

        # Response entry cleared by the route pattern, domain entry survives
        response = client.get("/api/user/product/p2")

        assert response.headers[CACHE_STATUS_HEADER] == "MISS"
        assert catalog.reads == 1

    def test_missing_product_is_not_cached(self, client: TestClient, catalog: Catalog) -> None:
        client.get("/api/user/product/nope")
        response = client.get("/api/user/product/nope")

        assert response.status_code == 404
        assert catalog.reads == 2

    def test_logged_in_user_gets_fresh_response(
        self, client: TestClient, memory_backend: InMemoryCacheBackend
    ) -> None:
        response = client.get("/api/user/products", headers={"Authorization": "Bearer jwt"})

        assert response.status_code == 200
        assert not any(key.startswith("http:") for key in memory_backend.keys())

    def test_health(self, client: TestClient) -> None:
        response = client.get("/health/cache")

        assert response.status_code == 200
        assert response.json()["status"] == "up"


class TestRedisBackedCache:
    """Tests for the service over a fake Redis store."""

    @pytest.fixture
    def cache(self, fake_redis) -> CacheService:
        config = CacheConfig(key_prefix="shop")
        backend = RedisCacheBackend(key_prefix="shop", client=fake_redis)
        return create_cache_service(config, backend=backend)

    @pytest.mark.asyncio
    async def test_large_listing_round_trip(self, cache: CacheService, fake_redis) -> None:
        """Test a large listing is stored compressed and read back whole."""
        products = [{"_id": f"p{i}", "description": "Glass aquarium " * 10} for i in range(50)]

        await cache.set("products:page=1", products, CacheTTL.LISTING)

        raw = await fake_redis.get("shop:products:page=1")
        assert raw.startswith(b"GZIP:")
        assert await cache.get("products:page=1") == products

    @pytest.mark.asyncio
    async def test_invalidation_fan_out(self, cache: CacheService, fake_redis) -> None:
        await cache.set_many(
            {
                "product:id=p1": {"_id": "p1"},
                "products:page=1": [],
                "products:page=2": [],
                "home:featured": [],
                "categories:all": [],
            }
        )

        deleted = await CacheInvalidator(cache).product_changed("p1")

        assert deleted == 4
        assert await fake_redis.keys("shop:*") == [b"shop:categories:all"]

    @pytest.mark.asyncio
    async def test_warm_then_read(self, cache: CacheService) -> None:
        warmed = await warm_cache(
            cache,
            [
                WarmupTask(cache.key("categories", "all"), lambda: [{"_id": "c1"}]),
                WarmupTask(cache.key("products", "featured", limit=8), lambda: []),
            ],
        )

        assert warmed == ["categories:all", "products:featured:limit=8"]
        assert await cache.get_many(warmed) == {
            "categories:all": [{"_id": "c1"}],
            "products:featured:limit=8": [],
        }

    @pytest.mark.asyncio
    async def test_default_config_clear_keeps_other_apps_keys(self, fake_redis) -> None:
        """Test clearing a default-configured cache leaves foreign keys in place."""
        cache = create_cache_service(CacheConfig(), backend=RedisCacheBackend(client=fake_redis))
        await cache.set("products:page=1", [])
        await fake_redis.set("session:abc", b"x")

        await cache.clear()

        assert await cache.get("products:page=1") is None
        assert await fake_redis.get("session:abc") == b"x"

    @pytest.mark.asyncio
    async def test_health_reports_redis(self, cache: CacheService) -> None:
        health = await cache.check_health()

        assert health["status"] == "up"
        assert health["details"]["backend"] == "redis"
        assert health["details"]["connected"] is True
