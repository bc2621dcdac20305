"""Installation ordering for multi-pattern goals."""

import math

import structlog

from nyko_mcp.mcp.errors import DependencyCycleError
from nyko_mcp.mcp.knowledge import PatternKnowledge
from nyko_mcp.mcp.models import PatternIndex, SequenceResult, SequenceStep
from nyko_mcp.mcp.tools import ToolContext
from nyko_mcp.mcp.tools.search import find_relevant_patterns

logger = structlog.get_logger(__name__)


def build_sequence(
    targets: list[str],
    implemented: set[str],
    index: PatternIndex,
    knowledge: PatternKnowledge,
) -> list[SequenceStep]:
    """Order target patterns so every prerequisite comes first.

    Depth-first: each target is emitted after its prerequisites. Patterns
    already emitted, or already implemented in the project, are skipped.

    Args:
        targets: Pattern ids to install, in priority order
        implemented: Pattern ids the project already has
        index: Pattern index, used for display names
        knowledge: Dependency graph and reason strings

    Returns:
        Steps numbered from 1

    Raises:
        DependencyCycleError: If a prerequisite chain loops back on itself
    """
    sequence: list[SequenceStep] = []
    added: set[str] = set()
    visiting: list[str] = []

    def name_of(pattern_id: str) -> str:
        entry = index.find_entry(pattern_id)
        return entry.name if entry else pattern_id

    def add_with_deps(pattern_id: str, reason: str) -> None:
        if pattern_id in added or pattern_id in implemented:
            return
        if pattern_id in visiting:
            cycle = visiting[visiting.index(pattern_id):] + [pattern_id]
            raise DependencyCycleError(cycle)

        visiting.append(pattern_id)
        for dep in knowledge.prerequisites(pattern_id):
            add_with_deps(dep, f"Required for {name_of(pattern_id)}")
        visiting.pop()

        sequence.append(
            SequenceStep(
                order=len(sequence) + 1,
                id=pattern_id,
                name=name_of(pattern_id),
                reason=reason,
            )
        )
        added.add(pattern_id)

    for pattern_id in targets:
        add_with_deps(pattern_id, knowledge.reason_for(pattern_id))

    return sequence


def format_time_estimate(minutes: int) -> str:
    """Bucket a minute total into a human label.

    Examples:
        >>> format_time_estimate(40)
        '30-45 min'
        >>> format_time_estimate(100)
        '105 min'
    """
    if minutes <= 10:
        return "~10 min"
    if minutes <= 15:
        return "10-15 min"
    if minutes <= 30:
        return "20-30 min"
    if minutes <= 45:
        return "30-45 min"
    if minutes <= 60:
        return "45-60 min"
    return f"{math.floor(minutes / 15 + 0.5) * 15} min"


async def sequence_patterns(
    ctx: ToolContext,
    goal: str,
    already_implemented: list[str] | None = None,
) -> SequenceResult:
    """Get an ordered sequence of patterns to implement a goal.

    Args:
        ctx: Tool dependencies
        goal: What the user wants to achieve
        already_implemented: Pattern ids already in the project

    Returns:
        Ordered steps and a bucketed total time
    """
    logger.debug("Sequencing patterns", goal=goal, already_implemented=already_implemented)

    implemented = set(already_implemented or [])
    index = await ctx.store.get_index()

    targets = find_relevant_patterns(goal, index, ctx.knowledge)
    sequence = build_sequence(targets, implemented, index, ctx.knowledge)

    total_minutes = sum(ctx.knowledge.minutes_for(step.id) for step in sequence)
    return SequenceResult(sequence=sequence, total_time=format_time_estimate(total_minutes))
