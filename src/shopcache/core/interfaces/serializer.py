"""Value codec interface."""

from typing import Any, Protocol


class ISerializer(Protocol):
    """Contract for the codec between cached values and stored bytes.

    ``CacheService`` calls ``serialize`` before every backend write and
    ``deserialize`` after every backend read. A codec may change its
    stored format over time (for example, start compressing large
    values), so ``deserialize`` must keep accepting every format it has
    ever written.
    """

    def serialize(self, value: Any) -> bytes:
        """Encode a JSON-compatible value for storage.

        Raises:
            SerializationError: If the value has no JSON form.
        """
        ...

    def deserialize(self, data: bytes) -> Any:
        """Decode stored bytes back to the original value.

        Raises:
            SerializationError: If the data is corrupted or truncated.
                The cache service reads this as a miss.
        """
        ...
