"""Compressing serializer implementation."""

import base64
import binascii
import gzip
import zlib
from typing import Any

from shopcache.core.exceptions import SerializationError
from shopcache.infrastructure.serializers.json import JsonSerializer

GZIP_TAG = b"GZIP:"


class GzipSerializer:
    """JSON serializer that compresses large payloads.

    Values whose JSON form is larger than ``threshold`` bytes are
    stored as ``GZIP:`` followed by the base64 of the gzipped JSON.
    Smaller values are stored as plain JSON. Deserialization accepts
    both forms, so entries written before compression was enabled
    remain readable.
    """

    def __init__(
        self,
        threshold: int = 2048,
        compresslevel: int = 6,
        json_serializer: JsonSerializer | None = None,
    ) -> None:
        """Initialize the serializer.

        Args:
            threshold: Size in bytes above which values are compressed.
            compresslevel: gzip compression level (1-9).
            json_serializer: Serializer for the inner JSON encoding.
        """
        self._threshold = threshold
        self._compresslevel = compresslevel
        self._json = json_serializer or JsonSerializer()

    @property
    def threshold(self) -> int:
        return self._threshold

    def serialize(self, value: Any) -> bytes:
        """Serialize value to plain or tagged-compressed bytes.

        Raises:
            SerializationError: If the value cannot be serialized.
        """
        raw = self._json.serialize(value)
        if len(raw) <= self._threshold:
            return raw
        compressed = gzip.compress(raw, compresslevel=self._compresslevel)
        return GZIP_TAG + base64.b64encode(compressed)

    def deserialize(self, data: bytes) -> Any:
        """Deserialize bytes, decompressing tagged values first.

        Raises:
            SerializationError: If the data is corrupted or truncated.
        """
        if isinstance(data, str):
            data = data.encode()
        if not is_compressed(data):
            return self._json.deserialize(data)

        try:
            compressed = base64.b64decode(data[len(GZIP_TAG):], validate=True)
            raw = gzip.decompress(compressed)
        except (binascii.Error, OSError, EOFError, zlib.error) as e:
            raise SerializationError(f"Failed to decompress data: {e}") from e
        return self._json.deserialize(raw)


def is_compressed(data: bytes) -> bool:
    """Return True if ``data`` carries the compression tag."""
    return data.startswith(GZIP_TAG)
