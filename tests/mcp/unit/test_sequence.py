"""Tests for installation sequencing."""

import pytest

from nyko_mcp.mcp.errors import DependencyCycleError
from nyko_mcp.mcp.knowledge import DEFAULT_KNOWLEDGE, PatternKnowledge
from nyko_mcp.mcp.models import PatternIndex
from nyko_mcp.mcp.tools import ToolContext
from nyko_mcp.mcp.tools.sequence import build_sequence, format_time_estimate, sequence_patterns


class TestBuildSequence:
    """Tests for dependency-ordered emission."""

    def test_prerequisite_comes_first(self, sample_index: PatternIndex) -> None:
        steps = build_sequence(["stripe-customer-portal"], set(), sample_index, DEFAULT_KNOWLEDGE)

        assert [(s.order, s.id) for s in steps] == [
            (1, "stripe-checkout-session"),
            (2, "stripe-customer-portal"),
        ]
        assert steps[0].reason == "Required for Stripe Customer Portal"
        assert steps[1].reason == "Subscription management"
        assert steps[1].name == "Stripe Customer Portal"

    def test_rerun_with_everything_implemented_is_empty(self, sample_index: PatternIndex) -> None:
        first = build_sequence(["stripe-customer-portal"], set(), sample_index, DEFAULT_KNOWLEDGE)
        implemented = {step.id for step in first}

        again = build_sequence(
            ["stripe-customer-portal"], implemented, sample_index, DEFAULT_KNOWLEDGE
        )

        assert again == []

    def test_shared_prerequisite_emitted_once(self, sample_index: PatternIndex) -> None:
        steps = build_sequence(
            ["supabase-google-oauth", "supabase-protected-routes"],
            set(),
            sample_index,
            DEFAULT_KNOWLEDGE,
        )

        ids = [s.id for s in steps]
        assert ids == [
            "supabase-client-nextjs",
            "supabase-google-oauth",
            "supabase-protected-routes",
        ]
        assert [s.order for s in steps] == [1, 2, 3]

    def test_implemented_prerequisite_is_skipped(self, sample_index: PatternIndex) -> None:
        steps = build_sequence(
            ["supabase-google-oauth"], {"supabase-client-nextjs"}, sample_index, DEFAULT_KNOWLEDGE
        )

        assert [s.id for s in steps] == ["supabase-google-oauth"]
        assert steps[0].order == 1

    def test_unknown_pattern_uses_defaults(self, sample_index: PatternIndex) -> None:
        steps = build_sequence(["edge-functions"], set(), sample_index, DEFAULT_KNOWLEDGE)

        assert steps[0].name == "edge-functions"
        assert steps[0].reason == "Feature implementation"

    def test_cycle_is_detected(self, sample_index: PatternIndex) -> None:
        knowledge = PatternKnowledge.build(
            requirements={},
            dependencies={"a": ["b"], "b": ["c"], "c": ["a"]},
            time_estimates={},
            reasons={},
            keyword_rules=[],
        )

        with pytest.raises(DependencyCycleError) as exc_info:
            build_sequence(["a"], set(), sample_index, knowledge)

        assert exc_info.value.path == ["a", "b", "c", "a"]

    def test_self_dependency_is_a_cycle(self, sample_index: PatternIndex) -> None:
        knowledge = PatternKnowledge.build(
            requirements={}, dependencies={"a": ["a"]}, time_estimates={}, reasons={},
            keyword_rules=[],
        )

        with pytest.raises(DependencyCycleError):
            build_sequence(["a"], set(), sample_index, knowledge)


class TestFormatTimeEstimate:
    """Tests for time bucketing."""

    @pytest.mark.parametrize(
        ("minutes", "label"),
        [
            (0, "~10 min"),
            (10, "~10 min"),
            (15, "10-15 min"),
            (25, "20-30 min"),
            (40, "30-45 min"),
            (60, "45-60 min"),
            (67, "60 min"),
            (68, "75 min"),
            (100, "105 min"),
        ],
    )
    def test_buckets(self, minutes: int, label: str) -> None:
        assert format_time_estimate(minutes) == label


class TestSequencePatterns:
    """Tests for the nyko_sequence handler."""

    @pytest.mark.asyncio
    async def test_complete_auth_system(self, tool_context: ToolContext) -> None:
        result = await sequence_patterns(tool_context, "complete auth system", [])

        ids = [s.id for s in result.sequence]
        assert ids == [
            "supabase-client-nextjs",
            "supabase-google-oauth",
            "supabase-protected-routes",
        ]
        assert result.sequence[0].reason == "Base Supabase setup"
        # 10 + 20 + 10 minutes
        assert result.total_time == "30-45 min"

    @pytest.mark.asyncio
    async def test_already_implemented_is_excluded(self, tool_context: ToolContext) -> None:
        result = await sequence_patterns(
            tool_context, "complete auth system", ["supabase-client-nextjs"]
        )

        assert [s.id for s in result.sequence] == [
            "supabase-google-oauth",
            "supabase-protected-routes",
        ]
        assert result.total_time == "20-30 min"
