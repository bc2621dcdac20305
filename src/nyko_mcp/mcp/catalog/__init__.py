"""Pattern catalog access: remote client and cached store."""

from nyko_mcp.mcp.catalog.client import CatalogClient
from nyko_mcp.mcp.catalog.store import PatternStore

__all__ = ["CatalogClient", "PatternStore"]
