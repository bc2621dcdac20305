"""Configuration management for the Nyko MCP server.

Patterns are read from a remote catalog (GitHub raw content by default) and
optionally cached in Redis.
"""

import os
from dataclasses import dataclass
from pathlib import Path


def _get_default_cache_backend() -> str:
    """Use Redis when a URL is configured, otherwise run without a cache."""
    if os.getenv("NYKO_REDIS_URL") or os.getenv("REDIS_URL"):
        return "redis"
    return "none"


@dataclass
class MCPConfig:
    """MCP server configuration."""

    # Pattern catalog
    catalog_base_url: str = "https://raw.githubusercontent.com/nyko-ai/patterns/main"
    index_path: str = "patterns/_index.json"
    patterns_root: str = "patterns"
    user_agent: str = "nyko-mcp/1.0.0"
    request_timeout: float = 10.0

    # Cache backend
    cache_backend: str = "none"  # "none" | "inmemory" | "redis"
    redis_url: str | None = None
    cache_ttl: int = 3600

    # Optional override for the static knowledge tables
    knowledge_path: Path | None = None

    # Server identity
    server_name: str = "nyko"
    server_version: str = "1.0.0"
    protocol_version: str = "2024-11-05"

    # HTTP transport
    host: str = "0.0.0.0"
    port: int = 8787
    environment: str = "development"

    @property
    def index_url(self) -> str:
        """Full URL of the pattern index document."""
        return f"{self.catalog_base_url.rstrip('/')}/{self.index_path}"

    def pattern_url(self, pattern_id: str, category: str) -> str:
        """Full URL of a single pattern document."""
        base = self.catalog_base_url.rstrip("/")
        return f"{base}/{self.patterns_root}/{category}/{pattern_id}.yaml"

    @classmethod
    def from_env(cls) -> "MCPConfig":
        """Create configuration from environment variables."""
        knowledge_path = os.getenv("NYKO_KNOWLEDGE_PATH")

        return cls(
            catalog_base_url=os.getenv(
                "NYKO_CATALOG_URL",
                "https://raw.githubusercontent.com/nyko-ai/patterns/main",
            ),
            index_path=os.getenv("NYKO_INDEX_PATH", "patterns/_index.json"),
            patterns_root=os.getenv("NYKO_PATTERNS_ROOT", "patterns"),
            user_agent=os.getenv("NYKO_USER_AGENT", "nyko-mcp/1.0.0"),
            request_timeout=float(os.getenv("NYKO_REQUEST_TIMEOUT", "10.0")),
            cache_backend=os.getenv("NYKO_CACHE_BACKEND", _get_default_cache_backend()),
            redis_url=os.getenv("NYKO_REDIS_URL") or os.getenv("REDIS_URL"),
            cache_ttl=int(os.getenv("NYKO_CACHE_TTL", "3600")),
            knowledge_path=Path(knowledge_path) if knowledge_path else None,
            host=os.getenv("NYKO_HOST", "0.0.0.0"),
            port=int(os.getenv("NYKO_PORT", "8787")),
            environment=os.getenv("NYKO_ENVIRONMENT", "development"),
        )


# Global configuration instance
config = MCPConfig.from_env()
