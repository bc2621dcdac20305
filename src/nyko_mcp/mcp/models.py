"""Pydantic models for the Nyko MCP server.

Catalog documents are loosely structured YAML. They are normalized once, here,
into the shapes the tool handlers work with. Numeric YAML scalars such as
``example: 3000`` are accepted wherever a string is expected.
"""

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Category(str, Enum):
    """Pattern categories accepted as a search filter."""

    AUTH = "auth"
    PAYMENTS = "payments"
    DATABASE = "database"
    DEPLOY = "deploy"
    EMAIL = "email"
    API = "api"
    STORAGE = "storage"
    MONITORING = "monitoring"
    AI = "ai"


class Difficulty(str, Enum):
    """How hard a pattern is to implement."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class PatternStatus(str, Enum):
    """Maturity of a pattern."""

    STABLE = "stable"
    BETA = "beta"
    EXPERIMENTAL = "experimental"


class PatternIndexEntry(BaseModel):
    """Summary record for one pattern in the index."""

    model_config = ConfigDict(frozen=True, extra="ignore", coerce_numbers_to_str=True)

    id: str
    category: str
    name: str
    description: str
    tags: list[str] = Field(default_factory=list)
    difficulty: Difficulty
    status: PatternStatus


class PatternIndex(BaseModel):
    """The catalog index: every available pattern plus version metadata."""

    model_config = ConfigDict(frozen=True, extra="ignore", coerce_numbers_to_str=True)

    version: str = ""
    updated_at: str = ""
    patterns: list[PatternIndexEntry] = Field(default_factory=list)

    @field_validator("patterns")
    @classmethod
    def _unique_ids(cls, patterns: list[PatternIndexEntry]) -> list[PatternIndexEntry]:
        seen: set[str] = set()
        for entry in patterns:
            if entry.id in seen:
                raise ValueError(f"duplicate pattern id in index: {entry.id}")
            seen.add(entry.id)
        return patterns

    def find_category(self, pattern_id: str) -> str | None:
        """Return the category of a pattern, or None if it is not indexed."""
        for entry in self.patterns:
            if entry.id == pattern_id:
                return entry.category
        return None

    def find_entry(self, pattern_id: str) -> PatternIndexEntry | None:
        for entry in self.patterns:
            if entry.id == pattern_id:
                return entry
        return None


class EnvVar(BaseModel):
    """An environment variable a pattern needs."""

    model_config = ConfigDict(frozen=True, extra="ignore", coerce_numbers_to_str=True)

    key: str
    required: bool = True
    description: str = ""
    example: str | None = None
    where_to_find: str | None = None
    source: Literal["env_vars", "env"] = "env"


class PatternFile(BaseModel):
    """A file the pattern adds to a project."""

    model_config = ConfigDict(frozen=True, extra="ignore", coerce_numbers_to_str=True)

    path: str
    code: str = ""
    description: str | None = None


class ExternalSetup(BaseModel):
    """Manual steps to perform in a third-party dashboard."""

    model_config = ConfigDict(frozen=True, extra="ignore", coerce_numbers_to_str=True)

    provider: str = "Unknown"
    steps: list[str] = Field(default_factory=list)
    url: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _service_alias(cls, data: Any) -> Any:
        # Older documents name the provider "service"
        if isinstance(data, dict) and not data.get("provider") and data.get("service"):
            data = {**data, "provider": data["service"]}
        return data


class EdgeCase(BaseModel):
    """A known failure symptom and how to fix it."""

    model_config = ConfigDict(frozen=True, extra="ignore", coerce_numbers_to_str=True)

    symptom: str
    solution: str


class Pattern(PatternIndexEntry):
    """A complete pattern document."""

    description: str = ""
    difficulty: Difficulty = Difficulty.INTERMEDIATE
    status: PatternStatus = PatternStatus.STABLE
    time_estimate: str | None = None
    install: str | None = None
    requires: list[str] = Field(default_factory=list)
    enables: list[str] = Field(default_factory=list)
    env: list[EnvVar] = Field(default_factory=list)
    files: list[PatternFile] = Field(default_factory=list)
    external_setup: list[ExternalSetup] = Field(default_factory=list)
    edge_cases: list[EdgeCase] = Field(default_factory=list)
    validation: list[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _normalize_env(cls, data: Any) -> Any:
        """Merge the structured ``env_vars`` block with the legacy ``env`` list.

        ``env_vars: {required: [...], optional: [...]}`` wins over ``env`` when
        both declare the same key.
        """
        if not isinstance(data, dict):
            return data

        merged: list[dict[str, Any]] = []
        seen: set[str] = set()

        structured = data.get("env_vars")
        if isinstance(structured, dict):
            for required, group in ((True, "required"), (False, "optional")):
                for item in structured.get(group) or []:
                    if isinstance(item, dict) and item.get("key") and item["key"] not in seen:
                        merged.append({**item, "required": required, "source": "env_vars"})
                        seen.add(item["key"])

        legacy = data.get("env")
        if isinstance(legacy, list):
            for item in legacy:
                if isinstance(item, dict) and item.get("key") and item["key"] not in seen:
                    merged.append(item)
                    seen.add(item["key"])

        data = {k: v for k, v in data.items() if k != "env_vars"}
        data["env"] = merged
        return data

    @field_validator("time_estimate", mode="before")
    @classmethod
    def _minutes_to_label(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return f"{int(value)} min"
        return value

    @field_validator(
        "tags", "requires", "enables", "files", "external_setup",
        "edge_cases", "validation",
        mode="before",
    )
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


# =============================================================================
# Tool results
# =============================================================================


class SearchHit(BaseModel):
    """One ranked search result."""

    id: str
    name: str
    description: str
    category: str
    difficulty: Difficulty
    status: PatternStatus
    time_estimate: str | None = None
    requires: list[str] | None = None
    enables: list[str] | None = None


class SearchResult(BaseModel):
    patterns: list[SearchHit]
    total: int


class GetResult(BaseModel):
    pattern: Pattern


class SequenceStep(BaseModel):
    """One step in an installation order."""

    order: int
    id: str
    name: str
    reason: str


class SequenceResult(BaseModel):
    sequence: list[SequenceStep]
    total_time: str


class CompatibilityIssue(BaseModel):
    """A declared dependency that does not satisfy a pattern requirement."""

    type: Literal["version_mismatch", "missing_dependency", "incompatible"]
    package: str
    current: str | None = None
    required: str | None = None
    severity: Literal["error", "warning"]


class CheckResult(BaseModel):
    compatible: bool
    issues: list[CompatibilityIssue]
    missing: list[str]
    install_command: str | None = None


class SetupStep(BaseModel):
    """External setup instructions for one provider."""

    provider: str
    title: str
    url: str
    steps: list[str]


class EnvVarInfo(BaseModel):
    key: str
    where_to_find: str


class SetupResult(BaseModel):
    pattern_id: str
    pattern_name: str
    setup_steps: list[SetupStep]
    env_vars_needed: list[EnvVarInfo]
