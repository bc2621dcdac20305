"""Pattern search and goal matching."""

import structlog

from nyko_mcp.mcp.knowledge import PatternKnowledge
from nyko_mcp.mcp.models import PatternIndex, PatternIndexEntry, SearchHit, SearchResult
from nyko_mcp.mcp.tools import ToolContext

logger = structlog.get_logger(__name__)


def _score(entry: PatternIndexEntry, terms: list[str]) -> int:
    searchable = " ".join(
        [entry.name, entry.description, *entry.tags, entry.id, entry.category]
    ).lower()
    tags = [t.lower() for t in entry.tags]
    pattern_id = entry.id.lower()

    score = 0
    for term in terms:
        if term not in searchable:
            continue
        score += 1
        # Exact tag match
        if term in tags:
            score += 2
        if term in pattern_id:
            score += 1
    return score


def rank_patterns(
    query: str,
    index: PatternIndex,
    category: str | None = None,
) -> list[PatternIndexEntry]:
    """Rank index entries against a free-text query.

    Each query term scores +1 when it appears anywhere in the entry, +2 more
    when it equals a tag, and +1 more when it appears in the identifier.
    Entries that score zero are dropped. Ties keep index order.

    Args:
        query: Free-text query
        index: Pattern index to search
        category: Optional category filter

    Returns:
        Matching entries, best first
    """
    terms = query.lower().split()
    entries = index.patterns
    if category:
        entries = [e for e in entries if e.category == category]

    scored = [(entry, _score(entry, terms)) for entry in entries]
    scored = [(entry, score) for entry, score in scored if score > 0]
    scored.sort(key=lambda item: item[1], reverse=True)
    return [entry for entry, _ in scored]


def find_relevant_patterns(
    goal: str,
    index: PatternIndex,
    knowledge: PatternKnowledge,
) -> list[str]:
    """Map a goal description to the pattern ids that implement it.

    Keyword rules are tried first. When none fires, any indexed pattern whose
    name, description or tags contain one of the goal's words is selected.

    Args:
        goal: What the user wants to build
        index: Pattern index used for the fallback
        knowledge: Keyword rules

    Returns:
        Pattern ids in first-selected order, without duplicates
    """
    goal_lower = goal.lower()
    selected: dict[str, None] = {}

    for rule in knowledge.keyword_rules:
        if rule.matches(goal_lower):
            selected.update(dict.fromkeys(rule.patterns))

    if not selected:
        terms = goal_lower.split()
        for entry in index.patterns:
            searchable = " ".join([entry.name, entry.description, *entry.tags]).lower()
            if any(term in searchable for term in terms):
                selected[entry.id] = None

    return list(selected)


def _to_hit(entry: PatternIndexEntry, knowledge: PatternKnowledge) -> SearchHit:
    requires = list(knowledge.prerequisites(entry.id))
    enables = knowledge.dependents(entry.id)
    minutes = knowledge.time_estimates.get(entry.id)

    return SearchHit(
        id=entry.id,
        name=entry.name,
        description=entry.description,
        category=entry.category,
        difficulty=entry.difficulty,
        status=entry.status,
        time_estimate=f"{minutes} min" if minutes is not None else None,
        requires=requires or None,
        enables=enables or None,
    )


async def search_patterns(
    ctx: ToolContext,
    query: str,
    category: str | None = None,
) -> SearchResult:
    """Search for implementation patterns by keyword.

    Args:
        ctx: Tool dependencies
        query: What to search for (e.g. "google oauth")
        category: Optional category filter

    Returns:
        Ranked patterns and their count

    Examples:
        >>> result = await search_patterns(ctx, "stripe checkout", category="payments")
    """
    logger.debug("Searching patterns", query=query, category=category)

    index = await ctx.store.get_index()
    hits = [_to_hit(entry, ctx.knowledge) for entry in rank_patterns(query, index, category)]

    return SearchResult(patterns=hits, total=len(hits))
