"""JSON-RPC method dispatch for the Nyko MCP server.

Handles one request at a time:

    initialize   -> server capabilities
    initialized  -> empty acknowledgement
    tools/list   -> advertised tool descriptors
    tools/call   -> one of the tool handlers

Tool failures are reported inside a successful response as ``isError``
content, because MCP clients expect a tool result even when the tool fails.
"""

import json
from collections.abc import Awaitable, Callable
from typing import Any

import structlog
from pydantic import BaseModel, ValidationError

from nyko_mcp.mcp.config import MCPConfig
from nyko_mcp.mcp.errors import NykoError
from nyko_mcp.mcp.protocol import (
    ErrorCode,
    JsonRpcRequest,
    JsonRpcResponse,
    error_response,
    success_response,
)
from nyko_mcp.mcp.tools import (
    CheckArgs,
    GetArgs,
    SearchArgs,
    SequenceArgs,
    SetupArgs,
    ToolContext,
    ToolName,
    list_tools,
)
from nyko_mcp.mcp.tools.check import check_pattern
from nyko_mcp.mcp.tools.external_setup import setup_pattern
from nyko_mcp.mcp.tools.get import get_pattern
from nyko_mcp.mcp.tools.search import search_patterns
from nyko_mcp.mcp.tools.sequence import sequence_patterns

logger = structlog.get_logger(__name__)

ToolHandler = Callable[[ToolContext, dict[str, Any]], Awaitable[BaseModel]]


async def _run_search(ctx: ToolContext, arguments: dict[str, Any]) -> BaseModel:
    args = SearchArgs.model_validate(arguments)
    category = args.category.value if args.category else None
    return await search_patterns(ctx, args.query, category)


async def _run_get(ctx: ToolContext, arguments: dict[str, Any]) -> BaseModel:
    args = GetArgs.model_validate(arguments)
    return await get_pattern(ctx, args.pattern_id, args.has_src_dir)


async def _run_sequence(ctx: ToolContext, arguments: dict[str, Any]) -> BaseModel:
    args = SequenceArgs.model_validate(arguments)
    return await sequence_patterns(ctx, args.goal, args.already_implemented)


async def _run_check(ctx: ToolContext, arguments: dict[str, Any]) -> BaseModel:
    args = CheckArgs.model_validate(arguments)
    return await check_pattern(ctx, args.pattern_id, args.dependencies)


async def _run_setup(ctx: ToolContext, arguments: dict[str, Any]) -> BaseModel:
    args = SetupArgs.model_validate(arguments)
    return await setup_pattern(ctx, args.pattern_id)


HANDLERS: dict[ToolName, ToolHandler] = {
    ToolName.SEARCH: _run_search,
    ToolName.GET: _run_get,
    ToolName.SEQUENCE: _run_sequence,
    ToolName.CHECK: _run_check,
    ToolName.SETUP: _run_setup,
}

_unhandled = set(ToolName) - set(HANDLERS)
if _unhandled:
    raise RuntimeError(f"Tools without a handler: {sorted(t.value for t in _unhandled)}")


def tool_result(payload: Any) -> dict[str, Any]:
    """Wrap a JSON-serializable payload as MCP tool output."""
    return {"content": [{"type": "text", "text": json.dumps(payload, indent=2)}]}


def tool_error(message: str, code: int | None = None) -> dict[str, Any]:
    """Wrap a failure as MCP tool output flagged with ``isError``."""
    payload: dict[str, Any] = {"error": message}
    if code is not None:
        payload["code"] = code
    return {
        "content": [{"type": "text", "text": json.dumps(payload)}],
        "isError": True,
    }


class ToolDispatcher:
    """Routes JSON-RPC requests to protocol and tool handlers."""

    def __init__(self, ctx: ToolContext, config: MCPConfig) -> None:
        self.ctx = ctx
        self.config = config

    async def handle(self, request: JsonRpcRequest) -> JsonRpcResponse:
        """Handle one JSON-RPC request.

        Args:
            request: A validated JSON-RPC envelope

        Returns:
            The response envelope; never raises
        """
        request_id = request.id
        method = request.method
        params = request.params or {}

        try:
            if method == "initialize":
                return success_response(request_id, self.initialize_result())

            if method == "initialized":
                return success_response(request_id, {})

            if method == "tools/list":
                return success_response(request_id, {"tools": list_tools()})

            if method == "tools/call":
                name = params.get("name")
                arguments = params.get("arguments") or {}
                return success_response(request_id, await self.call_tool(name, arguments))

            return error_response(
                request_id, ErrorCode.METHOD_NOT_FOUND, f"Method not found: {method}"
            )

        except Exception as e:
            logger.error("Request failed", method=method, error=str(e), exc_info=True)
            return error_response(request_id, ErrorCode.INTERNAL_ERROR, str(e) or "Unknown error")

    def initialize_result(self) -> dict[str, Any]:
        return {
            "protocolVersion": self.config.protocol_version,
            "capabilities": {"tools": {}},
            "serverInfo": {
                "name": self.config.server_name,
                "version": self.config.server_version,
            },
        }

    async def call_tool(self, name: Any, arguments: Any) -> dict[str, Any]:
        """Execute a tool and wrap its outcome as MCP tool output.

        Domain errors and invalid arguments come back as ``isError`` content.
        Anything else propagates to ``handle``.
        """
        try:
            tool = ToolName(name)
        except ValueError:
            logger.warning("Unknown tool", tool=name)
            return tool_error(f"Unknown tool: {name}", ErrorCode.INVALID_PARAMS)

        if not isinstance(arguments, dict):
            return tool_error("Tool arguments must be an object", ErrorCode.INVALID_PARAMS)

        logger.info("Tool called", tool=tool.value)
        try:
            result = await HANDLERS[tool](self.ctx, arguments)
        except ValidationError as e:
            logger.info("Invalid tool arguments", tool=tool.value, error=str(e))
            return tool_error(
                f"Invalid arguments for {tool.value}: {_describe(e)}",
                ErrorCode.INVALID_PARAMS,
            )
        except NykoError as e:
            logger.info("Tool failed", tool=tool.value, error=str(e))
            return tool_error(str(e))

        return tool_result(result.model_dump(mode="json", exclude_none=True))


def _describe(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(loc) for loc in item["loc"]) or "arguments"
        parts.append(f"{location}: {item['msg']}")
    return "; ".join(parts)
