"""Nyko API Server.

FastAPI server exposing the MCP JSON-RPC endpoint over HTTP.

Usage:
    python -m nyko_mcp.api.server

    # Or with uvicorn directly:
    uvicorn nyko_mcp.api.server:app --host 0.0.0.0 --port 8787
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from nyko_mcp.api.routes import close_dispatcher, router
from nyko_mcp.mcp.config import config

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    logger.info("Starting Nyko API Server...")
    logger.info(f"Catalog: {config.catalog_base_url}")
    logger.info(f"Cache: {config.cache_backend} (ttl {config.cache_ttl}s)")

    yield

    logger.info("Shutting down Nyko API Server...")
    await close_dispatcher()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Nyko MCP Server",
        description="Battle-tested implementation patterns for AI coding assistants",
        version=config.server_version,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    app.include_router(router)

    return app


# Create the app instance
app = create_app()


def run(
    host: str = config.host,
    port: int = config.port,
    reload: bool = False,
) -> None:
    """Run the Nyko API server.

    Args:
        host: Host to bind to
        port: Port to listen on
        reload: Enable auto-reload for development
    """
    logger.info(f"Starting server on http://{host}:{port}")
    uvicorn.run(
        "nyko_mcp.api.server:app",
        host=host,
        port=port,
        reload=reload,
        log_level="info",
    )


if __name__ == "__main__":
    run()
