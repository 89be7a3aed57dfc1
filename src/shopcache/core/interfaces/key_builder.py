"""Key builder interface."""

from typing import Any, Protocol


class IKeyBuilder(Protocol):
    """Contract for building cache keys.

    Key builders create deterministic keys for domain reads and for
    HTTP requests handled by the response cache middleware.
    """

    def build(self, prefix: str, *qualifiers: Any, **params: Any) -> str:
        """Build a domain cache key.

        Args:
            prefix: Domain prefix, e.g. ``products``.
            *qualifiers: Fixed segments following the prefix.
            **params: Query parameters; empty values are ignored.

        Returns:
            A deterministic string key.
        """
        ...

    def build_request_key(self, method: str, path: str, query_string: str = "") -> str:
        """Build a cache key for an HTTP request.

        Args:
            method: HTTP method.
            path: Request path.
            query_string: Raw query string, without the leading ``?``.

        Returns:
            A string key unique to the method, path and query.
        """
        ...
