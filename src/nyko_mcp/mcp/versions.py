"""Version compatibility checks for package requirements.

This is deliberately NOT semver. Two rules are supported:

- ``>=X.Y.Z`` requirements compare the full (major, minor, patch) triple.
- Anything else (``^X``, ``~X``, a bare pin) only requires the current major
  version to be at least the required major version.

Operators and pre-release suffixes are stripped before comparison, and a
component that is not a number counts as 0.
"""

import re

_OPERATOR_CHARS = re.compile(r"[\^~>=<]")
_NUMERIC = re.compile(r"[0-9]+")


def parse_version(version: str) -> tuple[int, int, int]:
    """Parse a version string into a (major, minor, patch) triple.

    Examples:
        >>> parse_version("^2.49.0-beta.1")
        (2, 49, 0)
        >>> parse_version("14")
        (14, 0, 0)
    """
    cleaned = _OPERATOR_CHARS.sub("", version.strip()).split("-")[0]
    parts = cleaned.split(".")

    components: list[int] = []
    for i in range(3):
        raw = parts[i].strip() if i < len(parts) else ""
        components.append(int(raw) if _NUMERIC.fullmatch(raw) else 0)
    return components[0], components[1], components[2]


def is_compatible(current: str, required: str) -> bool:
    """Check whether an installed version satisfies a minimum requirement.

    Args:
        current: Version declared by the project (e.g. ``"^2.48.0"``)
        required: Requirement string (e.g. ``">=2.49.0"``)

    Returns:
        True if ``current`` satisfies ``required``
    """
    current_parts = parse_version(current)
    required_parts = parse_version(required)

    if required.strip().startswith(">="):
        return current_parts >= required_parts

    return current_parts[0] >= required_parts[0]


def minimum_version(required: str) -> str:
    """Strip operators from a requirement, leaving the bare minimum version."""
    return _OPERATOR_CHARS.sub("", required).strip()
