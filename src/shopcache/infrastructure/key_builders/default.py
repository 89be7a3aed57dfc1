"""Default key builder implementation."""

from typing import Any

from shopcache.core.entities.cache_key import CacheKey

REQUEST_KEY_PREFIX = "http"


class DefaultKeyBuilder:
    """Default key builder producing readable, deterministic keys.

    Domain keys look like ``products:page=1:subCategoryId=42``: the
    prefix, optional qualifiers, then the non-empty parameters sorted
    by name. Request keys look like ``http:GET:/api/products?page=1``.
    Store-level prefixes are applied by the backend, not here.
    """

    def build(self, prefix: str, *qualifiers: Any, **params: Any) -> str:
        """Build a domain cache key.

        Args:
            prefix: Domain prefix, e.g. ``products``.
            *qualifiers: Fixed segments following the prefix.
            **params: Query parameters; ``None`` and ``""`` are ignored.

        Returns:
            A deterministic string key.
        """
        return str(CacheKey.from_components(prefix, *qualifiers, params=params))

    def build_request_key(self, method: str, path: str, query_string: str = "") -> str:
        """Build cache key for an HTTP request.

        The query string is kept verbatim so that distinct parameter
        combinations never share a key.

        Args:
            method: HTTP method.
            path: Request path.
            query_string: Raw query string, without the leading ``?``.

        Returns:
            The request cache key.
        """
        target = f"{path}?{query_string}" if query_string else path
        return f"{REQUEST_KEY_PREFIX}:{method.upper()}:{target}"


default_key_builder = DefaultKeyBuilder()


def make_key(prefix: str, *qualifiers: Any, **params: Any) -> str:
    """Build a domain key with the default builder."""
    return default_key_builder.build(prefix, *qualifiers, **params)
