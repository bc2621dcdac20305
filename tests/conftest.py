"""Pytest configuration and fixtures for Nyko tests."""

import json
from collections.abc import Callable

import httpx
import pytest

from nyko_mcp.mcp.cache import InMemoryCache, PatternCache
from nyko_mcp.mcp.catalog import CatalogClient, PatternStore
from nyko_mcp.mcp.config import MCPConfig
from nyko_mcp.mcp.knowledge import DEFAULT_KNOWLEDGE
from nyko_mcp.mcp.models import PatternIndex
from nyko_mcp.mcp.tools import ToolContext

BASE_URL = "https://catalog.test/main"


def index_entry(pattern_id: str, category: str, name: str, description: str, tags: list[str]) -> dict:
    return {
        "id": pattern_id,
        "category": category,
        "name": name,
        "description": description,
        "tags": tags,
        "difficulty": "beginner",
        "status": "stable",
    }


SAMPLE_INDEX = {
    "version": "1.2.0",
    "updated_at": "2025-01-15T00:00:00Z",
    "patterns": [
        index_entry(
            "supabase-client-nextjs", "auth", "Supabase Client for Next.js",
            "Server and browser Supabase clients for the App Router", ["supabase", "nextjs"],
        ),
        index_entry(
            "supabase-google-oauth", "auth", "Supabase Google OAuth",
            "Sign in with Google using Supabase Auth", ["google", "oauth", "supabase"],
        ),
        index_entry(
            "supabase-protected-routes", "auth", "Protected Routes",
            "Middleware that redirects anonymous users", ["middleware", "auth"],
        ),
        index_entry(
            "stripe-checkout-session", "payments", "Stripe Checkout Session",
            "One-off and subscription checkout", ["stripe", "checkout"],
        ),
        index_entry(
            "stripe-customer-portal", "payments", "Stripe Customer Portal",
            "Let customers manage their subscription", ["stripe", "billing"],
        ),
        index_entry(
            "workspace-smtp-email", "email", "Workspace SMTP",
            "Send transactional email through a google workspace relay", ["smtp", "email"],
        ),
    ],
}

GOOGLE_OAUTH_YAML = """\
id: some-other-id
category: payments
name: Supabase Google OAuth
description: Sign in with Google using Supabase Auth
tags: [google, oauth, supabase]
difficulty: intermediate
status: stable
time_estimate: 20
files:
  - path: app/auth/callback/route.ts
    code: "export async function GET() {}"
  - path: lib/supabase/server.ts
    code: "export function createClient() {}"
  - path: middleware.ts
    code: "export function middleware() {}"
env_vars:
  required:
    - key: NEXT_PUBLIC_SUPABASE_URL
      description: Project URL
      where_to_find: Supabase Dashboard > Settings > API
  optional:
    - key: NEXT_PUBLIC_SITE_URL
      description: Public site URL
env:
  - key: NEXT_PUBLIC_SUPABASE_URL
    description: Legacy duplicate
  - key: GOOGLE_CLIENT_ID
    required: true
    description: OAuth client id
external_setup:
  - service: Google Cloud Console
    url: https://console.cloud.google.com/apis/credentials
    steps:
      - Create an OAuth client ID
      - Add the Supabase callback URL
  - provider: Supabase
    steps:
      - Enable the Google provider
edge_cases:
  - symptom: redirect_uri_mismatch
    solution: Add the exact callback URL in Google Cloud
validation:
  - Sign in with a Google account
"""


@pytest.fixture
def config() -> MCPConfig:
    """Configuration pointing at the fake catalog."""
    return MCPConfig(catalog_base_url=BASE_URL, cache_backend="none")


@pytest.fixture
def sample_index() -> PatternIndex:
    """Parsed sample index."""
    return PatternIndex.model_validate(SAMPLE_INDEX)


@pytest.fixture
def catalog_routes() -> dict[str, tuple[int, str]]:
    """URL -> (status, body) served by the fake catalog. Tests may add routes."""
    return {
        f"{BASE_URL}/patterns/_index.json": (200, json.dumps(SAMPLE_INDEX)),
        f"{BASE_URL}/patterns/auth/supabase-google-oauth.yaml": (200, GOOGLE_OAUTH_YAML),
    }


@pytest.fixture
def request_log() -> list[str]:
    """URLs requested from the fake catalog, in order."""
    return []


@pytest.fixture
def make_catalog(
    config: MCPConfig,
    catalog_routes: dict[str, tuple[int, str]],
    request_log: list[str],
) -> Callable[[], CatalogClient]:
    """Factory for catalog clients backed by ``httpx.MockTransport``."""

    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        request_log.append(url)
        status, body = catalog_routes.get(url, (404, "Not Found"))
        return httpx.Response(status, text=body)

    def factory() -> CatalogClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return CatalogClient(config, http_client=http_client)

    return factory


@pytest.fixture
def cache() -> PatternCache:
    """Pattern cache over an in-memory backend."""
    return PatternCache(InMemoryCache(), ttl=3600)


@pytest.fixture
def tool_context(make_catalog: Callable[[], CatalogClient], cache: PatternCache) -> ToolContext:
    """Tool context wired to the fake catalog and an in-memory cache."""
    return ToolContext(store=PatternStore(make_catalog(), cache), knowledge=DEFAULT_KNOWLEDGE)
