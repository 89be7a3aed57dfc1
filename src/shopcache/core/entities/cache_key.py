"""Cache key value object."""

from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote


@dataclass(frozen=True)
class CacheKey:
    """Immutable cache key value object.

    Encapsulates the components of a domain cache key:
    a prefix (``products``), optional qualifiers (``related``) and
    query parameters, rendered in sorted order so that the same
    parameters always produce the same key.
    """

    prefix: str
    qualifiers: tuple[str, ...] = ()
    params: tuple[tuple[str, str], ...] = field(default_factory=tuple)

    def __str__(self) -> str:
        """Return the full cache key string.

        Returns:
            The complete cache key as a string.
        """
        parts = [self.prefix, *self.qualifiers]
        parts.extend(f"{name}={value}" for name, value in self.params)
        return ":".join(parts)

    @classmethod
    def from_components(
        cls,
        prefix: str,
        *qualifiers: Any,
        params: dict[str, Any] | None = None,
    ) -> "CacheKey":
        """Create a CacheKey from raw components.

        Parameters whose value is ``None`` or an empty string are dropped;
        the rest are sorted by name and URL-quoted.

        Args:
            prefix: Domain prefix, e.g. ``products``.
            *qualifiers: Extra fixed segments, e.g. ``related``.
            params: Query parameters.

        Returns:
            A new CacheKey instance.
        """
        normalized: list[tuple[str, str]] = []
        for name in sorted(params or {}):
            value = (params or {})[name]
            if value is None or value == "":
                continue
            normalized.append((name, quote(str(value), safe="")))

        return cls(
            prefix=prefix,
            qualifiers=tuple(str(q) for q in qualifiers),
            params=tuple(normalized),
        )
