"""Key-value cache protocol."""

from typing import Protocol


class ICacheStore(Protocol):
    """Byte-oriented cache with per-key expiry.

    Implementations raise ``CacheUnavailableError`` when the backend cannot
    be reached.
    """

    async def get(self, key: str) -> bytes | None:
        """Get an unexpired value, or None on a miss."""
        ...

    async def set(self, key: str, value: bytes, ttl_seconds: int) -> None:
        """Store a value that expires ``ttl_seconds`` from now."""
        ...

    async def delete(self, key: str) -> None:
        """Remove a key; removing a missing key is not an error."""
        ...

    async def ping(self) -> bool:
        """Check backend connectivity."""
        ...
