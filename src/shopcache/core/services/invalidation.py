"""Domain-aware cache invalidation fan-out."""

import logging
from collections.abc import Iterable, Mapping
from urllib.parse import quote

from shopcache.core.services.cache_service import CacheService

logger = logging.getLogger(__name__)


class CacheInvalidator:
    """Deletes every cache key that a write to a domain entity may stale.

    Holds no state of its own; each method is a best-effort, unordered
    series of ``delete``/``delete_pattern`` calls. A stale listing may
    survive briefly between deletions, bounded by its TTL.

    ``route_patterns`` maps a domain name (``product``, ``category``,
    ``subcategory``, ``portfolio``, ``gallery``, ``order``,
    ``contact``) to extra patterns, usually response cache keys such
    as ``http:GET:/api/user/product*``.
    """

    def __init__(
        self,
        cache: CacheService,
        route_patterns: Mapping[str, Iterable[str]] | None = None,
    ) -> None:
        self._cache = cache
        self._route_patterns = {
            domain: tuple(patterns) for domain, patterns in (route_patterns or {}).items()
        }

    async def product_changed(self, product_id: str | None = None) -> int:
        """Invalidate after a product create, update, delete or status toggle."""
        keys = []
        patterns = []
        if product_id is not None:
            keys.append(self._cache.key("product", id=product_id))
            # Matches the quoting CacheKey applies to param values
            related_id = quote(str(product_id), safe="")
            patterns.append(f"products:related:*productId={related_id}*")
        patterns += ["products:*", "batch:*", "home:*"]
        return await self._fan_out("product", keys, patterns)

    async def category_changed(self, category_id: str | None = None) -> int:
        """Invalidate after a category write."""
        keys = []
        if category_id is not None:
            keys.append(self._cache.key("category", "details", id=category_id))
        patterns = ["categories:*", "subcategories:*", "home:*", "batch:*"]
        return await self._fan_out("category", keys, patterns)

    async def subcategory_changed(self, category_id: str | None = None) -> int:
        """Invalidate after a subcategory write under ``category_id``."""
        keys = []
        if category_id is not None:
            keys.append(self._cache.key("subcategories", categoryId=category_id))
        patterns = ["subcategories:*", "categories:*", "batch:*"]
        return await self._fan_out("subcategory", keys, patterns)

    async def portfolio_changed(self, portfolio_id: str | None = None) -> int:
        keys = []
        if portfolio_id is not None:
            keys.append(self._cache.key("portfolio", id=portfolio_id))
        return await self._fan_out("portfolio", keys, ["portfolios:*", "home:*"])

    async def gallery_changed(self, gallery_id: str | None = None) -> int:
        keys = []
        if gallery_id is not None:
            keys.append(self._cache.key("gallery", id=gallery_id))
        return await self._fan_out("gallery", keys, ["galleries:*"])

    async def order_changed(self, user_id: str | None = None) -> int:
        """Invalidate a user's order history and the derived sales reports."""
        if user_id is not None:
            patterns = [f"{self._cache.key('orders', userId=user_id)}*"]
        else:
            patterns = ["orders:*"]
        patterns.append("reports:*")
        return await self._fan_out("order", [], patterns)

    async def contact_changed(self) -> int:
        return await self._fan_out("contact", [self._cache.key("admin", "contact")], [])

    async def _fan_out(
        self,
        domain: str,
        keys: Iterable[str],
        patterns: Iterable[str],
    ) -> int:
        count = 0
        for key in keys:
            if await self._cache.delete(key):
                count += 1
        for pattern in (*patterns, *self._route_patterns.get(domain, ())):
            count += await self._cache.delete_pattern(pattern)

        logger.debug("Invalidated %d cache keys for %s", count, domain)
        return count
