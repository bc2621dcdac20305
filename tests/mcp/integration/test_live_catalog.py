"""Integration tests against the real pattern catalog.

Skipped unless NYKO_LIVE_CATALOG=1, since they need network access.
"""

import os

import pytest

from nyko_mcp.mcp.catalog import CatalogClient
from nyko_mcp.mcp.config import MCPConfig

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(
        os.getenv("NYKO_LIVE_CATALOG") != "1",
        reason="set NYKO_LIVE_CATALOG=1 to run against the live catalog",
    ),
]


class TestLiveCatalog:
    """Integration tests that require the published catalog."""

    @pytest.mark.asyncio
    async def test_every_indexed_pattern_is_fetchable(self) -> None:
        """Each index entry resolves to a document under its category."""
        async with CatalogClient(MCPConfig.from_env()) as catalog:
            index = await catalog.fetch_index()
            assert index.patterns

            for entry in index.patterns:
                pattern = await catalog.fetch_pattern(entry.id, entry.category)
                assert pattern.id == entry.id
