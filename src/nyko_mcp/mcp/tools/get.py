"""Full pattern retrieval."""

import structlog

from nyko_mcp.mcp.models import GetResult, Pattern
from nyko_mcp.mcp.tools import ToolContext

logger = structlog.get_logger(__name__)

# Top-level directories that move under src/ in projects using one
SRC_DIR_PREFIXES = ("lib/", "utils/", "components/", "hooks/", "app/")


def adjust_path_for_src_dir(path: str) -> str:
    """Prefix ``src/`` to paths that live in a source directory.

    Examples:
        >>> adjust_path_for_src_dir("lib/supabase/client.ts")
        'src/lib/supabase/client.ts'
        >>> adjust_path_for_src_dir("middleware.ts")
        'middleware.ts'
    """
    if path.startswith(SRC_DIR_PREFIXES):
        return f"src/{path}"
    return path


def with_src_dir(pattern: Pattern) -> Pattern:
    """Return a copy of ``pattern`` with file paths moved under ``src/``."""
    files = [
        file.model_copy(update={"path": adjust_path_for_src_dir(file.path)})
        for file in pattern.files
    ]
    return pattern.model_copy(update={"files": files})


async def get_pattern(
    ctx: ToolContext,
    pattern_id: str,
    has_src_dir: bool = False,
) -> GetResult:
    """Get complete implementation details for a pattern.

    Args:
        ctx: Tool dependencies
        pattern_id: Pattern ID from search results
        has_src_dir: Whether the project keeps its code under ``src/``

    Returns:
        The pattern, with file paths adjusted when requested

    Raises:
        PatternNotFoundError: If the pattern does not exist
    """
    logger.debug("Getting pattern", pattern_id=pattern_id, has_src_dir=has_src_dir)

    pattern = await ctx.store.get_pattern(pattern_id)
    if has_src_dir and pattern.files:
        pattern = with_src_dir(pattern)

    return GetResult(pattern=pattern)
