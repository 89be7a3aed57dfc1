"""JSON serializer implementation."""

import json
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from shopcache.core.exceptions import SerializationError


class JsonSerializer:
    """JSON serializer for cache values.

    Handles serialization of Python objects to compact JSON bytes
    and deserialization back to Python objects. Dates are stored as
    ISO-8601 strings, so they come back as strings.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        """Initialize the JSON serializer.

        Args:
            encoding: Character encoding to use.
        """
        self._encoding = encoding

    def serialize(self, value: Any) -> bytes:
        """Serialize value to bytes.

        Args:
            value: The Python object to serialize.

        Returns:
            The serialized value as bytes.

        Raises:
            SerializationError: If the value cannot be serialized.
        """
        try:
            json_str = json.dumps(
                value,
                default=self._default_encoder,
                separators=(",", ":"),
                ensure_ascii=False,
            )
            return json_str.encode(self._encoding)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Failed to serialize value: {e}") from e

    def deserialize(self, data: bytes) -> Any:
        """Deserialize bytes to value.

        Args:
            data: The bytes to deserialize.

        Returns:
            The deserialized Python object.

        Raises:
            SerializationError: If the data cannot be deserialized.
        """
        try:
            json_str = data.decode(self._encoding)
            return json.loads(json_str)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise SerializationError(f"Failed to deserialize data: {e}") from e

    def _default_encoder(self, obj: Any) -> Any:
        """Custom encoder for non-JSON-serializable types.

        Args:
            obj: The object to encode.

        Returns:
            A JSON-serializable representation of the object.

        Raises:
            TypeError: If the object cannot be encoded.
        """
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        if isinstance(obj, Decimal):
            return float(obj)
        if isinstance(obj, UUID):
            return str(obj)
        if isinstance(obj, Enum):
            return obj.value
        if isinstance(obj, (set, frozenset)):
            return list(obj)
        if hasattr(obj, "__dict__"):
            return obj.__dict__
        raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")
