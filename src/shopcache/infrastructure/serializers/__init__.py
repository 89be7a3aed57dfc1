"""Serializer implementations."""

from shopcache.infrastructure.serializers.gzip import GZIP_TAG, GzipSerializer
from shopcache.infrastructure.serializers.json import JsonSerializer

__all__ = ["GZIP_TAG", "GzipSerializer", "JsonSerializer"]
