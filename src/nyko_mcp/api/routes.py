"""API route definitions for the MCP HTTP transport."""

import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import ValidationError

from nyko_mcp.mcp.config import config
from nyko_mcp.mcp.dispatcher import ToolDispatcher
from nyko_mcp.mcp.protocol import ErrorCode, JsonRpcRequest, error_response
from nyko_mcp.mcp.tools import create_tool_context

logger = logging.getLogger(__name__)
router = APIRouter()

# Singleton dispatcher
_dispatcher: ToolDispatcher | None = None


def get_dispatcher() -> ToolDispatcher:
    """Get or create the dispatcher singleton.

    Lazy loads the catalog client and cache to keep startup fast.
    """
    global _dispatcher

    if _dispatcher is None:
        _dispatcher = ToolDispatcher(create_tool_context(config), config)
        logger.info("MCP dispatcher initialized")

    return _dispatcher


async def close_dispatcher() -> None:
    """Release the catalog client and cache connections."""
    global _dispatcher

    if _dispatcher is not None:
        await _dispatcher.ctx.store.close()
        _dispatcher = None


def _rpc_error(request_id: Any, code: ErrorCode, message: str, status_code: int) -> JSONResponse:
    response = error_response(request_id, code, message)
    return JSONResponse(response.to_dict(), status_code=status_code)


@router.post("/mcp")
async def mcp_endpoint(
    request: Request,
    dispatcher: ToolDispatcher = Depends(get_dispatcher),
) -> JSONResponse:
    """Handle one JSON-RPC 2.0 request."""
    try:
        body = await request.body()
        if not body.strip():
            return _rpc_error(0, ErrorCode.INVALID_REQUEST, "Empty request body", 400)

        try:
            payload = json.loads(body)
        except ValueError:
            return _rpc_error(0, ErrorCode.PARSE_ERROR, "Invalid JSON", 400)

        try:
            rpc_request = JsonRpcRequest.model_validate(payload)
        except ValidationError:
            request_id = payload.get("id") if isinstance(payload, dict) else None
            if not isinstance(request_id, (int, str)):
                request_id = 0
            return _rpc_error(
                request_id, ErrorCode.INVALID_REQUEST, "Invalid JSON-RPC request", 400
            )

        response = await dispatcher.handle(rpc_request)
        return JSONResponse(response.to_dict())

    except Exception as e:
        logger.error(f"MCP request failed: {e}")
        return _rpc_error(0, ErrorCode.INTERNAL_ERROR, str(e) or "Internal error", 500)


@router.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok", "version": config.server_version}


@router.get("/")
async def info() -> dict[str, Any]:
    """Static service description."""
    return {
        "name": "Nyko MCP Server",
        "version": config.server_version,
        "description": "Battle-tested patterns for AI coding assistants",
        "endpoints": {
            "mcp": "/mcp (POST)",
            "health": "/health (GET)",
            "sse": "/sse (GET)",
        },
        "usage": {
            "claude_code": {
                "config": "~/.claude/settings.json",
                "example": {
                    "mcpServers": {
                        "nyko": {"url": "https://nyko-mcp.nyko-ai.workers.dev/mcp"},
                    },
                },
            },
        },
    }


@router.get("/sse")
async def sse() -> PlainTextResponse:
    """Reserved for streaming transport."""
    return PlainTextResponse("SSE not yet implemented", status_code=501)
