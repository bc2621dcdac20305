"""Redis cache backend."""

from typing import Any

import structlog
from redis.asyncio import Redis

logger = structlog.get_logger(__name__)


class RedisCache:
    """Cache backend over ``redis.asyncio``.

    Errors are not handled here; ``PatternCache`` treats any backend failure
    as a miss.
    """

    def __init__(self, redis_url: str, client: Any | None = None) -> None:
        """Initialize the backend.

        Args:
            redis_url: Connection URL (``redis://`` or ``rediss://``)
            client: Pre-built client, mainly for tests
        """
        self.redis_url = redis_url
        self._client = client or Redis.from_url(
            redis_url,
            encoding="utf-8",
            decode_responses=True,
        )

    async def get(self, key: str) -> str | None:
        return await self._client.get(key)

    async def set(self, key: str, value: str, ttl: int) -> None:
        await self._client.set(key, value, ex=ttl)

    async def close(self) -> None:
        await self._client.aclose()
        logger.debug("Redis cache connection closed")
