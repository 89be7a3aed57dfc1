"""Key builder implementations."""

from shopcache.infrastructure.key_builders.default import DefaultKeyBuilder, make_key

__all__ = ["DefaultKeyBuilder", "make_key"]
