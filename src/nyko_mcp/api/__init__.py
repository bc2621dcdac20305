"""HTTP transport for the Nyko MCP server."""
