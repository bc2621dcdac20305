"""Tests for the static knowledge tables."""

from pathlib import Path

import pytest

from nyko_mcp.mcp.knowledge import DEFAULT_KNOWLEDGE, load_knowledge


class TestPatternKnowledge:
    """Tests for knowledge lookups."""

    def test_defaults_for_unknown_patterns(self) -> None:
        assert DEFAULT_KNOWLEDGE.minutes_for("unknown") == 10
        assert DEFAULT_KNOWLEDGE.reason_for("unknown") == "Feature implementation"
        assert dict(DEFAULT_KNOWLEDGE.requirements_for("unknown")) == {}
        assert DEFAULT_KNOWLEDGE.prerequisites("unknown") == ()

    def test_tables_are_read_only(self) -> None:
        with pytest.raises(TypeError):
            DEFAULT_KNOWLEDGE.time_estimates["supabase-signout"] = 99  # type: ignore[index]
        with pytest.raises(TypeError):
            DEFAULT_KNOWLEDGE.requirements["stripe-checkout-session"]["stripe"] = "1"  # type: ignore[index]

    def test_dependents(self) -> None:
        dependents = DEFAULT_KNOWLEDGE.dependents("supabase-client-nextjs")

        assert "supabase-google-oauth" in dependents
        assert "stripe-customer-portal" not in dependents


class TestLoadKnowledge:
    """Tests for YAML overrides."""

    def test_none_returns_builtins(self) -> None:
        assert load_knowledge(None) is DEFAULT_KNOWLEDGE

    def test_yaml_overrides_selected_tables(self, tmp_path: Path) -> None:
        path = tmp_path / "knowledge.yaml"
        path.write_text(
            "time_estimates:\n"
            "  edge-functions: 25\n"
            "keyword_rules:\n"
            "  - keywords: [Edge, serverless]\n"
            "    patterns: [edge-functions]\n"
            "dependencies:\n"
            "  edge-functions: null\n",
            encoding="utf-8",
        )

        knowledge = load_knowledge(path)

        assert knowledge.minutes_for("edge-functions") == 25
        assert knowledge.minutes_for("supabase-signout") == 10
        assert knowledge.prerequisites("edge-functions") == ()
        assert knowledge.keyword_rules[0].keywords == ("edge", "serverless")
        assert knowledge.keyword_rules[0].matches("deploy an edge worker")
        # Untouched tables keep built-ins
        assert knowledge.reason_for("supabase-signout") == "Sign out functionality"

    def test_non_mapping_file_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "knowledge.yaml"
        path.write_text("- just\n- a list\n", encoding="utf-8")

        with pytest.raises(ValueError, match="must contain a mapping"):
            load_knowledge(path)
