"""External setup extraction."""

import re

import structlog

from nyko_mcp.mcp.models import EnvVar, EnvVarInfo, Pattern, SetupResult, SetupStep
from nyko_mcp.mcp.tools import ToolContext

logger = structlog.get_logger(__name__)

FALLBACK_WHERE_TO_FIND = "Check pattern documentation"

PROVIDER_IDS: dict[str, str] = {
    "Google Cloud Console": "google_cloud",
    "Google Cloud": "google_cloud",
    "Supabase": "supabase",
    "Stripe": "stripe",
    "GitHub": "github",
    "Vercel": "vercel",
    "AWS": "aws",
    "Cloudflare": "cloudflare",
}

PROVIDER_TITLES: dict[str, str] = {
    "Google Cloud Console": "Create OAuth Credentials",
    "Google Cloud": "Create OAuth Credentials",
    "Supabase": "Configure Supabase Dashboard",
    "Stripe": "Configure Stripe Dashboard",
    "GitHub": "Configure GitHub Settings",
    "Vercel": "Configure Vercel Project",
}


def normalize_provider_name(name: str) -> str:
    """Map a display name like "Google Cloud Console" to "google_cloud"."""
    return PROVIDER_IDS.get(name) or re.sub(r"\s+", "_", name.lower())


def generate_title(provider: str) -> str:
    return PROVIDER_TITLES.get(provider, f"Configure {provider}")


def _env_var_info(var: EnvVar) -> EnvVarInfo | None:
    if var.source == "env_vars":
        if not var.required:
            return None
        where_to_find = var.where_to_find or var.description
    else:
        # Legacy entries are listed whatever their required flag says
        where_to_find = var.description
    return EnvVarInfo(key=var.key, where_to_find=where_to_find or FALLBACK_WHERE_TO_FIND)


def extract_setup(pattern: Pattern) -> SetupResult:
    """Collect the dashboard steps and env vars for a pattern.

    Structured ``env_vars`` contribute their required entries only. Every
    legacy ``env`` entry is listed unless a structured entry already covers
    its key.
    """
    setup_steps = [
        SetupStep(
            provider=normalize_provider_name(setup.provider),
            title=generate_title(setup.provider),
            url=setup.url or "",
            steps=list(setup.steps),
        )
        for setup in pattern.external_setup
    ]

    env_vars_needed = [info for info in map(_env_var_info, pattern.env) if info is not None]

    return SetupResult(
        pattern_id=pattern.id,
        pattern_name=pattern.name,
        setup_steps=setup_steps,
        env_vars_needed=env_vars_needed,
    )


async def setup_pattern(ctx: ToolContext, pattern_id: str) -> SetupResult:
    """Get the external setup steps and env vars a pattern needs.

    Raises:
        PatternNotFoundError: If the pattern does not exist
    """
    logger.debug("Extracting setup", pattern_id=pattern_id)

    pattern = await ctx.store.get_pattern(pattern_id)
    return extract_setup(pattern)
