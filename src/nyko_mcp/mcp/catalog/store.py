"""Cached access to the pattern catalog."""

import structlog

from nyko_mcp.mcp.cache import INDEX_CACHE_KEY, PatternCache
from nyko_mcp.mcp.catalog.client import CatalogClient
from nyko_mcp.mcp.errors import PatternNotFoundError
from nyko_mcp.mcp.models import Pattern, PatternIndex

logger = structlog.get_logger(__name__)


class PatternStore:
    """Serves the index and patterns, preferring the cache over the catalog."""

    def __init__(self, catalog: CatalogClient, cache: PatternCache) -> None:
        self.catalog = catalog
        self.cache = cache

    async def get_index(self) -> PatternIndex:
        """Return the pattern index, fetching it on a cache miss."""
        return await self.cache.get_or_fetch(
            INDEX_CACHE_KEY, self.catalog.fetch_index, PatternIndex
        )

    async def get_pattern(self, pattern_id: str) -> Pattern:
        """Return a full pattern, fetching it on a cache miss.

        Raises:
            PatternNotFoundError: If the pattern is not in the index
        """
        pattern = await self.cache.get_pattern(pattern_id)
        if pattern is not None:
            return pattern

        index = await self.get_index()
        category = index.find_category(pattern_id)
        if category is None:
            raise PatternNotFoundError(pattern_id)

        pattern = await self.catalog.fetch_pattern(pattern_id, category)
        await self.cache.set_pattern(pattern)
        return pattern

    async def close(self) -> None:
        await self.catalog.aclose()
        await self.cache.close()
