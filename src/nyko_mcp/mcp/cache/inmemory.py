"""In-memory cache backend for development and tests."""

import time


class InMemoryCache:
    """Process-local cache using a dict with per-key expiry."""

    def __init__(self) -> None:
        """Initialize in-memory storage."""
        self.entries: dict[str, tuple[str, float]] = {}

    async def get(self, key: str) -> str | None:
        """Get a value, evicting it if it has expired."""
        entry = self.entries.get(key)
        if entry is None:
            return None

        value, expires_at = entry
        if time.monotonic() >= expires_at:
            del self.entries[key]
            return None
        return value

    async def set(self, key: str, value: str, ttl: int) -> None:
        """Store a value for ``ttl`` seconds."""
        self.entries[key] = (value, time.monotonic() + ttl)

    async def close(self) -> None:
        """Drop all entries."""
        self.entries.clear()
