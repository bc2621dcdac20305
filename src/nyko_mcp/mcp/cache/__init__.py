"""Cache layer for catalog reads.

Backends:
- inmemory: process-local dict (development and tests)
- redis: shared Redis instance

The cache is an accelerator only. A missing backend, or one that fails,
behaves exactly like an empty cache.
"""

from collections.abc import Awaitable, Callable
from typing import TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from nyko_mcp.mcp.cache.base import CacheBackend
from nyko_mcp.mcp.cache.inmemory import InMemoryCache
from nyko_mcp.mcp.config import MCPConfig
from nyko_mcp.mcp.models import Pattern, PatternIndex

__all__ = [
    "CacheBackend",
    "InMemoryCache",
    "PatternCache",
    "create_cache_backend",
    "INDEX_CACHE_KEY",
    "PATTERN_CACHE_PREFIX",
    "DEFAULT_TTL",
]

logger = structlog.get_logger(__name__)

INDEX_CACHE_KEY = "nyko:index"
PATTERN_CACHE_PREFIX = "nyko:pattern:"
DEFAULT_TTL = 3600

M = TypeVar("M", bound=BaseModel)


def create_cache_backend(config: MCPConfig) -> CacheBackend | None:
    """Create the configured cache backend.

    Args:
        config: Server configuration

    Returns:
        A backend, or None when caching is disabled or not configured

    Raises:
        ValueError: If ``cache_backend`` names an unknown backend
    """
    if config.cache_backend == "none":
        logger.info("Pattern cache disabled")
        return None

    if config.cache_backend == "inmemory":
        logger.info("Using in-memory pattern cache")
        return InMemoryCache()

    if config.cache_backend == "redis":
        if not config.redis_url:
            logger.warning("Redis cache selected but no URL configured - caching disabled")
            return None

        from nyko_mcp.mcp.cache.redis_backend import RedisCache

        logger.info("Using Redis pattern cache")
        return RedisCache(config.redis_url)

    raise ValueError(f"Unsupported cache backend: {config.cache_backend}")


class PatternCache:
    """Read-through cache for the pattern index and pattern documents."""

    def __init__(self, backend: CacheBackend | None, ttl: int = DEFAULT_TTL) -> None:
        """Initialize the cache.

        Args:
            backend: Storage backend, or None to disable caching
            ttl: Default time to live in seconds
        """
        self.backend = backend
        self.ttl = ttl

    @property
    def enabled(self) -> bool:
        return self.backend is not None

    async def get_index(self) -> PatternIndex | None:
        return await self._get(INDEX_CACHE_KEY, PatternIndex)

    async def set_index(self, index: PatternIndex) -> None:
        await self._set(INDEX_CACHE_KEY, index, self.ttl)

    async def get_pattern(self, pattern_id: str) -> Pattern | None:
        return await self._get(f"{PATTERN_CACHE_PREFIX}{pattern_id}", Pattern)

    async def set_pattern(self, pattern: Pattern) -> None:
        await self._set(f"{PATTERN_CACHE_PREFIX}{pattern.id}", pattern, self.ttl)

    async def get_or_fetch(
        self,
        key: str,
        fetcher: Callable[[], Awaitable[M]],
        model: type[M],
        ttl: int | None = None,
    ) -> M:
        """Return the cached value for ``key``, fetching it on a miss.

        The fresh value is written back on a best-effort basis and returned
        whether or not the write succeeded. Errors from ``fetcher`` propagate.

        Args:
            key: Cache key
            fetcher: Coroutine factory producing the fresh value
            model: Pydantic model used to decode the cached JSON
            ttl: Override for the default TTL

        Returns:
            The cached or freshly fetched value
        """
        cached = await self._get(key, model)
        if cached is not None:
            return cached

        fresh = await fetcher()
        await self._set(key, fresh, ttl if ttl is not None else self.ttl)
        return fresh

    async def close(self) -> None:
        if self.backend is None:
            return
        try:
            await self.backend.close()
        except Exception as e:
            logger.warning("Error closing cache backend", error=str(e))

    async def _get(self, key: str, model: type[M]) -> M | None:
        if self.backend is None:
            return None

        try:
            raw = await self.backend.get(key)
        except Exception as e:
            logger.warning("Cache get failed", key=key, error=str(e))
            return None

        if not raw:
            logger.debug("Cache MISS", key=key)
            return None

        try:
            value = model.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("Discarding undecodable cache entry", key=key, error=str(e))
            return None

        logger.debug("Cache HIT", key=key)
        return value

    async def _set(self, key: str, value: BaseModel, ttl: int) -> None:
        if self.backend is None:
            return

        try:
            await self.backend.set(key, value.model_dump_json(), ttl)
        except Exception as e:
            logger.warning("Cache set failed", key=key, error=str(e))
