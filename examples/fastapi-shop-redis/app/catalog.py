"""In-memory catalog standing in for the document database."""

import asyncio
from datetime import datetime, timezone
from typing import Any

call_count: dict[str, int] = {
    "categories": 0,
    "products": 0,
    "product": 0,
}

CATEGORIES: list[dict[str, Any]] = [
    {"_id": "c1", "name": "Aquariums", "status": "Active"},
    {"_id": "c2", "name": "Filters", "status": "Active"},
    {"_id": "c3", "name": "Archived", "status": "Inactive"},
]

PRODUCTS: dict[str, dict[str, Any]] = {
    f"p{i}": {
        "_id": f"p{i}",
        "name": f"Product {i}",
        "price": 10 * i,
        "subCategoryId": "s1" if i % 2 else "s2",
        "featured": i <= 3,
        "status": "Active",
        "updatedAt": datetime(2024, 1, i, tzinfo=timezone.utc),
    }
    for i in range(1, 11)
}


def reset_call_count() -> None:
    """Reset the call counter."""
    for key in call_count:
        call_count[key] = 0


async def active_categories() -> list[dict[str, Any]]:
    call_count["categories"] += 1
    await asyncio.sleep(0.01)
    return [c for c in CATEGORIES if c["status"] == "Active"]


async def featured_products(limit: int = 8) -> list[dict[str, Any]]:
    call_count["products"] += 1
    await asyncio.sleep(0.01)
    return [p for p in PRODUCTS.values() if p["featured"]][:limit]


async def products_by_subcategory(sub_category_id: str, page: int = 1) -> list[dict[str, Any]]:
    call_count["products"] += 1
    await asyncio.sleep(0.01)
    matches = [p for p in PRODUCTS.values() if p["subCategoryId"] == sub_category_id]
    return matches[(page - 1) * 4 : page * 4]


async def product_by_id(product_id: str) -> dict[str, Any] | None:
    call_count["product"] += 1
    await asyncio.sleep(0.01)
    return PRODUCTS.get(product_id)


async def update_product(product_id: str, data: dict[str, Any]) -> dict[str, Any] | None:
    product = PRODUCTS.get(product_id)
    if product is None:
        return None
    product.update(data)
    product["updatedAt"] = datetime.now(timezone.utc)
    return product
