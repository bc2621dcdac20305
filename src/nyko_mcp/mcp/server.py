"""Nyko MCP Server (stdio).

FastMCP server exposing the pattern tools to local AI coding assistants.
The HTTP transport in ``nyko_mcp.api`` serves the same tools over JSON-RPC.

Usage:
    python -m nyko_mcp.mcp.server
"""

from typing import Any

import structlog
from fastmcp import FastMCP

from nyko_mcp.mcp.config import config
from nyko_mcp.mcp.tools import ToolContext, create_tool_context
from nyko_mcp.mcp.tools.check import check_pattern
from nyko_mcp.mcp.tools.external_setup import setup_pattern
from nyko_mcp.mcp.tools.get import get_pattern
from nyko_mcp.mcp.tools.search import search_patterns
from nyko_mcp.mcp.tools.sequence import sequence_patterns

# Initialize structured logging
structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.JSONRenderer(),
    ]
)

logger = structlog.get_logger(__name__)

# Initialize FastMCP server
mcp = FastMCP(config.server_name)

_context: ToolContext | None = None


def get_context() -> ToolContext:
    """Get or create the shared tool context."""
    global _context
    if _context is None:
        _context = create_tool_context(config)
    return _context


# =============================================================================
# MCP Tools
# =============================================================================


@mcp.tool()
async def nyko_search(query: str, category: str | None = None) -> dict[str, Any]:
    """Search for implementation patterns by keyword.

    Use when the user wants to implement a feature like 'google auth' or
    'stripe payments'.

    Args:
        query: What to search for (e.g. 'google oauth', 'stripe checkout')
        category: Optional category filter (auth, payments, database, ...)

    Returns:
        Ranked patterns and their total count
    """
    result = await search_patterns(get_context(), query, category)
    return result.model_dump(mode="json", exclude_none=True)


@mcp.tool()
async def nyko_get(pattern_id: str, has_src_dir: bool = False) -> dict[str, Any]:
    """Get complete implementation details for a pattern.

    Includes all code, files, env vars and setup steps.

    Args:
        pattern_id: Pattern ID from search results (e.g. 'supabase-google-oauth')
        has_src_dir: Whether the project uses a src/ directory
    """
    result = await get_pattern(get_context(), pattern_id, has_src_dir)
    return result.model_dump(mode="json", exclude_none=True)


@mcp.tool()
async def nyko_sequence(
    goal: str,
    already_implemented: list[str] | None = None,
) -> dict[str, Any]:
    """Get the ordered sequence of patterns needed for a complete feature.

    Args:
        goal: What the user wants to achieve (e.g. 'complete auth system')
        already_implemented: Pattern IDs already in the project
    """
    result = await sequence_patterns(get_context(), goal, already_implemented)
    return result.model_dump(mode="json", exclude_none=True)


@mcp.tool()
async def nyko_check(pattern_id: str, dependencies: dict[str, str]) -> dict[str, Any]:
    """Check if a pattern is compatible with current project dependencies.

    Args:
        pattern_id: Pattern ID to check
        dependencies: The package.json dependencies object
    """
    result = await check_pattern(get_context(), pattern_id, dependencies)
    return result.model_dump(mode="json", exclude_none=True)


@mcp.tool()
async def nyko_setup(pattern_id: str) -> dict[str, Any]:
    """Get the external dashboard steps and env vars a pattern needs.

    Args:
        pattern_id: Pattern ID to prepare
    """
    result = await setup_pattern(get_context(), pattern_id)
    return result.model_dump(mode="json", exclude_none=True)


# =============================================================================
# Server Entry Point
# =============================================================================


def main() -> None:
    """Start the MCP server."""
    logger.info("Starting Nyko MCP Server...")
    logger.info(
        "Configuration",
        catalog=config.catalog_base_url,
        cache_backend=config.cache_backend,
        cache_ttl=config.cache_ttl,
    )
    mcp.run()


if __name__ == "__main__":
    main()
