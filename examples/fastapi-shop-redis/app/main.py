"""FastAPI + Redis + shopcache example."""

import logging
import os
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException

from app import catalog

from shopcache import (
    CacheConfig,
    CacheInvalidator,
    CacheTTL,
    WarmupTask,
    cached,
    create_cache_service,
    warm_cache,
)
from shopcache.adapters.starlette import ResponseCacheMiddleware, health_endpoint

REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379")
DEBUG = os.getenv("DEBUG", "false").lower() == "true"

logging.basicConfig(level=logging.DEBUG if DEBUG else logging.INFO)
logger = logging.getLogger("shop")

# Cache setup
cache_config = CacheConfig(redis_url=REDIS_URL, key_prefix="shop")
cache = create_cache_service(cache_config)

invalidator = CacheInvalidator(
    cache,
    route_patterns={
        "product": ["http:GET:/api/user/product*"],
        "category": ["http:GET:/api/user/categor*"],
    },
)


@cached(cache, key="product:id={product_id}", ttl=CacheTTL.DETAIL)
async def load_product(product_id: str) -> dict[str, Any] | None:
    return await catalog.product_by_id(product_id)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Warming cache")
    await warm_cache(
        cache,
        [
            WarmupTask(cache.key("categories", "all"), catalog.active_categories),
            WarmupTask(
                cache.key("products", "featured", limit=8),
                lambda: catalog.featured_products(8),
            ),
        ],
    )
    yield
    logger.info("Closing cache connections")
    await cache.close()


app = FastAPI(
    title="shopcache Example API",
    description="Catalog API with cache-aside reads",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    ResponseCacheMiddleware,
    cache=cache,
    ttl=CacheTTL.LISTING,
    include_paths=["/api/user/*"],
    debug=DEBUG,
)

app.add_route("/health/cache", health_endpoint(cache))


@app.get("/api/user/category")
async def all_categories():
    categories = await cache.get_or_set(
        cache.key("categories", "all"),
        catalog.active_categories,
        CacheTTL.LISTING,
    )
    return {"success": True, "categories": categories}


@app.get("/api/user/products/featured")
async def featured_products(limit: int = 8):
    products = await cache.get_or_set(
        cache.key("products", "featured", limit=limit),
        lambda: catalog.featured_products(limit),
        CacheTTL.LISTING,
    )
    return {"success": True, "products": products}


@app.get("/api/user/products/{sub_category_id}")
async def products_by_subcategory(sub_category_id: str, page: int = 1):
    products = await cache.get_or_set(
        cache.key("products", subCategoryId=sub_category_id, page=page),
        lambda: catalog.products_by_subcategory(sub_category_id, page),
        CacheTTL.LISTING,
    )
    return {"success": True, "products": products}


@app.get("/api/user/product/{product_id}")
async def product_detail(product_id: str):
    product = await load_product(product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return {"success": True, "data": product}


@app.put("/api/admin/product/{product_id}")
async def update_product(product_id: str, data: dict[str, Any]):
    product = await catalog.update_product(product_id, data)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    await invalidator.product_changed(product_id)
    return {"success": True, "data": product}


@app.get("/cache/stats")
async def cache_stats():
    return {"stats": cache.stats, "calls": catalog.call_count}


@app.post("/cache/clear")
async def clear_cache():
    await cache.clear()
    return {"status": "cleared"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
