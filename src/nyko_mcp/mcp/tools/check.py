"""Dependency compatibility checks."""

from collections.abc import Mapping

import structlog

from nyko_mcp.mcp.errors import PatternNotFoundError
from nyko_mcp.mcp.models import CheckResult, CompatibilityIssue, PatternIndex
from nyko_mcp.mcp.knowledge import PatternKnowledge
from nyko_mcp.mcp.tools import ToolContext
from nyko_mcp.mcp.versions import is_compatible, minimum_version

logger = structlog.get_logger(__name__)


def build_install_command(packages: list[str], requirements: Mapping[str, str]) -> str:
    """Build one ``npm install`` command for the given packages.

    Each package is pinned with a caret at its minimum version, or ``@latest``
    when the requirement carries no version.
    """
    installs = []
    for package in packages:
        version = minimum_version(requirements.get(package, ""))
        installs.append(f"{package}@^{version}" if version else f"{package}@latest")
    return f"npm install {' '.join(installs)}"


def check_dependencies(
    pattern_id: str,
    dependencies: Mapping[str, str],
    index: PatternIndex,
    knowledge: PatternKnowledge,
) -> CheckResult:
    """Compare declared project dependencies against a pattern's requirements.

    Args:
        pattern_id: Pattern to check
        dependencies: ``package.json``-style ``{package: version}`` mapping
        index: Pattern index, used to confirm the pattern exists
        knowledge: Per-pattern requirement tables

    Returns:
        Compatibility verdict, issues, missing packages and an install command

    Raises:
        PatternNotFoundError: If the pattern is not in the index
    """
    if index.find_category(pattern_id) is None:
        raise PatternNotFoundError(pattern_id)

    requirements = knowledge.requirements_for(pattern_id)
    issues: list[CompatibilityIssue] = []
    missing: list[str] = []

    for package, required in requirements.items():
        current = dependencies.get(package)
        if not current:
            missing.append(package)
            continue

        if not is_compatible(current, required):
            issues.append(
                CompatibilityIssue(
                    type="version_mismatch",
                    package=package,
                    current=current,
                    required=required,
                    severity="error",
                )
            )

    return CheckResult(
        compatible=not issues and not missing,
        issues=issues,
        missing=missing,
        install_command=build_install_command(missing, requirements) if missing else None,
    )


async def check_pattern(
    ctx: ToolContext,
    pattern_id: str,
    dependencies: Mapping[str, str],
) -> CheckResult:
    """Check if a pattern is compatible with current project dependencies.

    Examples:
        >>> result = await check_pattern(ctx, "supabase-client-nextjs", {"next": "14.1.0"})
        >>> result.install_command
        'npm install @supabase/supabase-js@^2.49.0 @supabase/ssr@^0.5.0'
    """
    logger.debug("Checking compatibility", pattern_id=pattern_id, packages=len(dependencies))

    index = await ctx.store.get_index()
    return check_dependencies(pattern_id, dependencies, index, ctx.knowledge)
