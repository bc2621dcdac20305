"""Nyko MCP core: pattern catalog, cache, tool handlers and dispatch."""
