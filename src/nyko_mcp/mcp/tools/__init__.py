"""MCP tools for Nyko.

This module defines the closed set of tools and their public descriptors:
- search: Keyword search over the pattern index
- get: Full pattern retrieval
- sequence: Ordered installation plan for a goal
- check: Dependency compatibility check
- external_setup: External setup steps and env vars (callable, not advertised)

Handlers live in the submodules of the same name and receive their
dependencies through ``ToolContext``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from nyko_mcp.mcp.catalog import CatalogClient, PatternStore
from nyko_mcp.mcp.cache import PatternCache, create_cache_backend
from nyko_mcp.mcp.config import MCPConfig
from nyko_mcp.mcp.knowledge import PatternKnowledge, load_knowledge
from nyko_mcp.mcp.models import Category

__all__ = [
    "ToolName",
    "ToolContext",
    "create_tool_context",
    "TOOLS",
    "list_tools",
    "SearchArgs",
    "GetArgs",
    "SequenceArgs",
    "CheckArgs",
    "SetupArgs",
]


class ToolName(str, Enum):
    """Every tool the server can execute."""

    SEARCH = "nyko_search"
    GET = "nyko_get"
    SEQUENCE = "nyko_sequence"
    CHECK = "nyko_check"
    SETUP = "nyko_setup"


@dataclass(frozen=True)
class ToolContext:
    """Dependencies shared by all tool handlers."""

    store: PatternStore
    knowledge: PatternKnowledge


def create_tool_context(config: MCPConfig) -> ToolContext:
    """Wire up catalog, cache and knowledge tables from configuration."""
    cache = PatternCache(create_cache_backend(config), ttl=config.cache_ttl)
    store = PatternStore(CatalogClient(config), cache)
    return ToolContext(store=store, knowledge=load_knowledge(config.knowledge_path))


# =============================================================================
# Arguments
# =============================================================================


class _ToolArgs(BaseModel):
    model_config = ConfigDict(extra="ignore")


class SearchArgs(_ToolArgs):
    query: str
    category: Category | None = None


class GetArgs(_ToolArgs):
    pattern_id: str
    has_src_dir: bool = False


class SequenceArgs(_ToolArgs):
    goal: str
    already_implemented: list[str] = Field(default_factory=list)


class CheckArgs(_ToolArgs):
    pattern_id: str
    dependencies: dict[str, str]


class SetupArgs(_ToolArgs):
    pattern_id: str


# =============================================================================
# Descriptors (tools/list)
# =============================================================================


TOOLS: dict[ToolName, dict[str, Any]] = {
    ToolName.SEARCH: {
        "name": ToolName.SEARCH.value,
        "description": (
            "Search for implementation patterns by keyword. Use when user wants to "
            "implement a feature like 'google auth', 'stripe payments', etc."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "What to search for (e.g., 'google oauth', 'stripe checkout')",
                },
                "category": {
                    "type": "string",
                    "enum": [c.value for c in Category],
                    "description": "Optional category filter",
                },
            },
            "required": ["query"],
        },
    },
    ToolName.GET: {
        "name": ToolName.GET.value,
        "description": (
            "Get complete implementation details for a pattern including all code, "
            "files, env vars, and setup steps."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "pattern_id": {
                    "type": "string",
                    "description": "Pattern ID from search results (e.g., 'supabase-google-oauth')",
                },
                "has_src_dir": {
                    "type": "boolean",
                    "description": "Whether the project uses a src/ directory",
                    "default": False,
                },
            },
            "required": ["pattern_id"],
        },
    },
    ToolName.SEQUENCE: {
        "name": ToolName.SEQUENCE.value,
        "description": (
            "Get ordered sequence of patterns to implement a complete feature. "
            "Use when user wants something that needs multiple patterns."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "goal": {
                    "type": "string",
                    "description": (
                        "What the user wants to achieve (e.g., 'complete auth system "
                        "with google and protected routes')"
                    ),
                },
                "already_implemented": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Pattern IDs already in the project",
                    "default": [],
                },
            },
            "required": ["goal"],
        },
    },
    ToolName.CHECK: {
        "name": ToolName.CHECK.value,
        "description": "Check if a pattern is compatible with current project dependencies.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "pattern_id": {"type": "string", "description": "Pattern ID to check"},
                "dependencies": {
                    "type": "object",
                    "description": "Current package.json dependencies object",
                },
            },
            "required": ["pattern_id", "dependencies"],
        },
    },
    ToolName.SETUP: {
        "name": ToolName.SETUP.value,
        "description": (
            "Get the external dashboard setup steps and environment variables a "
            "pattern needs before its code will run."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "pattern_id": {"type": "string", "description": "Pattern ID to prepare"},
            },
            "required": ["pattern_id"],
        },
    },
}

# Tools returned by tools/list. nyko_setup stays callable but unlisted.
ADVERTISED_TOOLS: tuple[ToolName, ...] = (
    ToolName.SEARCH,
    ToolName.GET,
    ToolName.SEQUENCE,
    ToolName.CHECK,
)


def list_tools() -> list[dict[str, Any]]:
    """Descriptors for the advertised tools, in a stable order."""
    return [TOOLS[name] for name in ADVERTISED_TOOLS]
