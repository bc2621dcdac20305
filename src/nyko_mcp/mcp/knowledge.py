"""Static knowledge about the pattern catalog.

Requirements, dependency edges, time estimates and goal keywords are not part
of the catalog documents. They ship with the server as read-only tables and are
handed to the tool handlers through ``ToolContext``.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

import structlog
import yaml

logger = structlog.get_logger(__name__)

DEFAULT_TIME_MINUTES = 10
DEFAULT_REASON = "Feature implementation"

_SUPABASE_NEXTJS = {
    "next": ">=14.0.0",
    "@supabase/supabase-js": ">=2.49.0",
    "@supabase/ssr": ">=0.5.0",
}
_STRIPE_NEXTJS = {
    "next": ">=14.0.0",
    "stripe": ">=14.0.0",
}

# package -> minimum version, per pattern
REQUIREMENTS: dict[str, dict[str, str]] = {
    "supabase-client-nextjs": _SUPABASE_NEXTJS,
    "supabase-google-oauth": _SUPABASE_NEXTJS,
    "supabase-github-oauth": _SUPABASE_NEXTJS,
    "supabase-magic-link": _SUPABASE_NEXTJS,
    "supabase-protected-routes": _SUPABASE_NEXTJS,
    "supabase-signout": _SUPABASE_NEXTJS,
    "stripe-checkout-session": _STRIPE_NEXTJS,
    "stripe-webhook-handler": _STRIPE_NEXTJS,
    "stripe-customer-portal": _STRIPE_NEXTJS,
    "supabase-rls-policies": {},
    "docker-compose-dev": {},
    "github-actions-vercel": {},
    "rate-limiting-upstash": {
        "next": ">=14.0.0",
        "@upstash/ratelimit": ">=2.0.0",
        "@upstash/redis": ">=1.34.0",
    },
}

# pattern -> prerequisite patterns
DEPENDENCIES: dict[str, list[str]] = {
    "supabase-google-oauth": ["supabase-client-nextjs"],
    "supabase-github-oauth": ["supabase-client-nextjs"],
    "supabase-magic-link": ["supabase-client-nextjs"],
    "supabase-protected-routes": ["supabase-client-nextjs"],
    "supabase-signout": ["supabase-client-nextjs"],
    "stripe-checkout-session": [],
    "stripe-webhook-handler": [],
    "stripe-customer-portal": ["stripe-checkout-session"],
    "supabase-rls-policies": ["supabase-client-nextjs"],
}

# pattern -> minutes
TIME_ESTIMATES: dict[str, int] = {
    "supabase-client-nextjs": 10,
    "supabase-google-oauth": 20,
    "supabase-github-oauth": 15,
    "supabase-magic-link": 15,
    "supabase-protected-routes": 10,
    "supabase-signout": 5,
    "stripe-checkout-session": 20,
    "stripe-webhook-handler": 15,
    "stripe-customer-portal": 10,
    "supabase-rls-policies": 15,
    "docker-compose-dev": 10,
    "github-actions-vercel": 10,
    "rate-limiting-upstash": 15,
}

REASONS: dict[str, str] = {
    "supabase-client-nextjs": "Base Supabase setup",
    "supabase-google-oauth": "Google authentication",
    "supabase-github-oauth": "GitHub authentication",
    "supabase-magic-link": "Passwordless email login",
    "supabase-protected-routes": "Route protection",
    "supabase-signout": "Sign out functionality",
    "stripe-checkout-session": "Payment checkout",
    "stripe-webhook-handler": "Payment event handling",
    "stripe-customer-portal": "Subscription management",
    "supabase-rls-policies": "Database security",
    "docker-compose-dev": "Local development environment",
    "github-actions-vercel": "CI/CD deployment",
    "rate-limiting-upstash": "API rate limiting",
}

# (trigger keywords, patterns to add), evaluated in order
KEYWORD_RULES: list[tuple[list[str], list[str]]] = [
    (["google", "oauth", "google auth"], ["supabase-google-oauth"]),
    (["github", "github auth"], ["supabase-github-oauth"]),
    (["magic link", "passwordless", "email auth"], ["supabase-magic-link"]),
    (["protected", "routes", "middleware", "auth guard"], ["supabase-protected-routes"]),
    (["sign out", "logout", "signout"], ["supabase-signout"]),
    (["stripe", "checkout", "payment"], ["stripe-checkout-session"]),
    (["webhook", "stripe webhook"], ["stripe-webhook-handler"]),
    (["portal", "billing", "subscription manage"], ["stripe-customer-portal"]),
    (["rls", "row level", "security policies"], ["supabase-rls-policies"]),
    (["docker", "compose", "local dev"], ["docker-compose-dev"]),
    (["github actions", "vercel", "ci/cd", "deploy"], ["github-actions-vercel"]),
    (["rate limit", "upstash", "throttle"], ["rate-limiting-upstash"]),
    (
        ["auth", "authentication", "complete auth", "full auth"],
        ["supabase-client-nextjs", "supabase-google-oauth", "supabase-protected-routes"],
    ),
    (
        ["payments", "complete payments", "full payments"],
        ["stripe-checkout-session", "stripe-webhook-handler", "stripe-customer-portal"],
    ),
]


@dataclass(frozen=True)
class KeywordRule:
    """Adds ``patterns`` when any of ``keywords`` appears in a goal."""

    keywords: tuple[str, ...]
    patterns: tuple[str, ...]

    def matches(self, goal: str) -> bool:
        return any(keyword in goal for keyword in self.keywords)


def _freeze(mapping: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class PatternKnowledge:
    """Read-only lookup tables used by the sequence and check tools."""

    requirements: Mapping[str, Mapping[str, str]] = field(default_factory=dict)
    dependencies: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    time_estimates: Mapping[str, int] = field(default_factory=dict)
    reasons: Mapping[str, str] = field(default_factory=dict)
    keyword_rules: tuple[KeywordRule, ...] = ()

    @classmethod
    def build(
        cls,
        requirements: Mapping[str, Mapping[str, str]],
        dependencies: Mapping[str, list[str]],
        time_estimates: Mapping[str, int],
        reasons: Mapping[str, str],
        keyword_rules: list[tuple[list[str], list[str]]],
    ) -> "PatternKnowledge":
        """Build an immutable knowledge value from plain dicts and lists."""
        return cls(
            requirements=_freeze(
                {pid: _freeze(reqs or {}) for pid, reqs in requirements.items()}
            ),
            dependencies=_freeze({pid: tuple(deps or ()) for pid, deps in dependencies.items()}),
            time_estimates=_freeze({pid: int(m) for pid, m in time_estimates.items()}),
            reasons=_freeze(reasons),
            keyword_rules=tuple(
                KeywordRule(
                    keywords=tuple(k.lower() for k in keywords),
                    patterns=tuple(patterns),
                )
                for keywords, patterns in keyword_rules
            ),
        )

    def requirements_for(self, pattern_id: str) -> Mapping[str, str]:
        return self.requirements.get(pattern_id, {})

    def prerequisites(self, pattern_id: str) -> tuple[str, ...]:
        return self.dependencies.get(pattern_id, ())

    def dependents(self, pattern_id: str) -> list[str]:
        """Patterns that list ``pattern_id`` as a prerequisite."""
        return [pid for pid, deps in self.dependencies.items() if pattern_id in deps]

    def minutes_for(self, pattern_id: str) -> int:
        return self.time_estimates.get(pattern_id, DEFAULT_TIME_MINUTES)

    def reason_for(self, pattern_id: str) -> str:
        return self.reasons.get(pattern_id, DEFAULT_REASON)


DEFAULT_KNOWLEDGE = PatternKnowledge.build(
    requirements=REQUIREMENTS,
    dependencies=DEPENDENCIES,
    time_estimates=TIME_ESTIMATES,
    reasons=REASONS,
    keyword_rules=KEYWORD_RULES,
)


def load_knowledge(path: Path | None = None) -> PatternKnowledge:
    """Load knowledge tables, optionally overriding built-ins from YAML.

    The YAML file may define any of ``requirements``, ``dependencies``,
    ``time_estimates``, ``reasons`` and ``keyword_rules``. Keyword rules are a
    list of ``{keywords: [...], patterns: [...]}`` mappings. Tables missing
    from the file keep their built-in values.

    Args:
        path: YAML file to read, or None for the built-in tables

    Returns:
        Immutable knowledge tables
    """
    if path is None:
        return DEFAULT_KNOWLEDGE

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Knowledge file must contain a mapping: {path}")

    rules = KEYWORD_RULES
    if "keyword_rules" in data:
        rules = [
            (list(rule.get("keywords", [])), list(rule.get("patterns", [])))
            for rule in data["keyword_rules"]
        ]

    knowledge = PatternKnowledge.build(
        requirements=data.get("requirements", REQUIREMENTS),
        dependencies=data.get("dependencies", DEPENDENCIES),
        time_estimates=data.get("time_estimates", TIME_ESTIMATES),
        reasons=data.get("reasons", REASONS),
        keyword_rules=rules,
    )
    logger.info(
        "Loaded pattern knowledge",
        path=str(path),
        patterns=len(knowledge.requirements),
        rules=len(knowledge.keyword_rules),
    )
    return knowledge
