"""Exceptions raised by shopcache."""


class ShopCacheError(Exception):
    """Base class for shopcache errors."""


class ConfigurationError(ShopCacheError):
    """Raised at startup when the cache configuration is invalid."""


class SerializationError(ShopCacheError):
    """Raised when serialization or deserialization fails."""
