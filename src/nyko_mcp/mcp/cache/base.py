"""Abstract cache backend interface."""

from typing import Protocol


class CacheBackend(Protocol):
    """Protocol for key-value cache backends."""

    async def get(self, key: str) -> str | None:
        """Get a cached value.

        Args:
            key: Cache key

        Returns:
            The stored string, or None on a miss
        """
        ...

    async def set(self, key: str, value: str, ttl: int) -> None:
        """Store a value with an expiry.

        Args:
            key: Cache key
            value: Serialized value
            ttl: Time to live in seconds
        """
        ...

    async def close(self) -> None:
        """Release any connections held by the backend."""
        ...
