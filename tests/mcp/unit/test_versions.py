"""Tests for version compatibility checks."""

import pytest

from nyko_mcp.mcp.versions import is_compatible, minimum_version, parse_version


class TestParseVersion:
    """Tests for version parsing."""

    def test_strips_operators_and_prerelease(self) -> None:
        assert parse_version(">=2.49.0-beta.1") == (2, 49, 0)
        assert parse_version("^14.1.2") == (14, 1, 2)
        assert parse_version("~0.5") == (0, 5, 0)

    def test_missing_components_are_zero(self) -> None:
        assert parse_version("14") == (14, 0, 0)

    def test_unparsable_components_are_zero(self) -> None:
        """Malformed text falls back to 0 instead of raising."""
        assert parse_version("latest") == (0, 0, 0)
        assert parse_version("1.x.3") == (1, 0, 3)
        assert parse_version("") == (0, 0, 0)

    def test_non_ascii_digits_are_zero(self) -> None:
        assert parse_version("1.\N{SUPERSCRIPT TWO}.0") == (1, 0, 0)
        assert parse_version("\N{ARABIC-INDIC DIGIT THREE}.1") == (0, 1, 0)
        assert is_compatible("1.\N{SUPERSCRIPT TWO}.0", ">=1.0.0") is True


class TestIsCompatible:
    """Tests for the two comparison rules."""

    @pytest.mark.parametrize(
        ("current", "required", "expected"),
        [
            ("2.49.0", ">=2.49.0", True),
            ("2.48.9", ">=2.49.0", False),
            ("^2.50.1", ">=2.49.0", True),
            ("3.0.0", ">=2.49.0", True),
            ("0.4.9", ">=0.5.0", False),
        ],
    )
    def test_minimum_requirement_compares_full_triple(
        self, current: str, required: str, expected: bool
    ) -> None:
        assert is_compatible(current, required) is expected

    @pytest.mark.parametrize(
        ("current", "required", "expected"),
        [
            ("15.2.0", "14.0.0", True),
            ("13.9.0", "14.0.0", False),
            ("14.0.0", "^14.5.0", True),
        ],
    )
    def test_pinned_requirement_compares_major_only(
        self, current: str, required: str, expected: bool
    ) -> None:
        assert is_compatible(current, required) is expected

    def test_unparsable_current_is_incompatible_with_minimum(self) -> None:
        assert is_compatible("workspace:*", ">=1.0.0") is False


class TestMinimumVersion:
    def test_strips_operators(self) -> None:
        assert minimum_version(">=2.49.0") == "2.49.0"
        assert minimum_version("") == ""
