"""Core interfaces (Protocol classes) for shopcache."""

from shopcache.core.interfaces.cache_backend import ICacheBackend
from shopcache.core.interfaces.key_builder import IKeyBuilder
from shopcache.core.interfaces.serializer import ISerializer

__all__ = [
    "ICacheBackend",
    "IKeyBuilder",
    "ISerializer",
]
