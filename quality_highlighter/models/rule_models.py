"""
Rule Data Models — Rules, severities, categories, and pattern matches.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from quality_highlighter.core.matcher import PatternMatcher


class Severity(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"
    GOOD = "good"


class PatternCategory(str, Enum):
    PERFORMANCE = "performance"
    SECURITY = "security"
    MAINTAINABILITY = "maintainability"
    STYLE = "style"


class Language(str, Enum):
    JAVASCRIPT = "javascript"
    TYPESCRIPT = "typescript"
    JAVASCRIPT_REACT = "javascriptreact"
    TYPESCRIPT_REACT = "typescriptreact"
    PHP = "php"


JS_LANGUAGES: frozenset[Language] = frozenset({
    Language.JAVASCRIPT,
    Language.TYPESCRIPT,
    Language.JAVASCRIPT_REACT,
    Language.TYPESCRIPT_REACT,
})

REACT_LANGUAGES: frozenset[Language] = frozenset({
    Language.JAVASCRIPT_REACT,
    Language.TYPESCRIPT_REACT,
})

# Score delta applied to a category per match
SEVERITY_DELTAS: dict[Severity, int] = {
    Severity.CRITICAL: -15,
    Severity.WARNING: -8,
    Severity.INFO: -3,
    Severity.GOOD: 2,
}


class Rule(BaseModel):
    """A registered anti-pattern. Only ``enabled`` may change after construction."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: str = Field(..., min_length=1, frozen=True, description="Unique rule identifier, e.g. 'nested-loops'")
    name: str = Field(..., frozen=True)
    description: str = Field(default="", frozen=True)
    category: PatternCategory = Field(..., frozen=True)
    severity: Severity = Field(..., frozen=True)
    languages: frozenset[Language] = Field(..., min_length=1, frozen=True)
    enabled: bool = True
    matcher: PatternMatcher = Field(..., frozen=True, exclude=True, repr=False)
    score_impact: int = Field(..., frozen=True, description="Category score delta per match")

    @model_validator(mode="before")
    @classmethod
    def _default_score_impact(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("score_impact") is None and "severity" in data:
            data = {**data, "score_impact": SEVERITY_DELTAS[Severity(data["severity"])]}
        return data


class MatchDetails(BaseModel):
    """Explanation attached to a match."""

    complexity: int = Field(..., description="Relative cost estimate of the flagged construct")
    impact: str = Field(..., description="What the construct costs at runtime")
    suggestion: str = Field(..., description="How to fix it")
    metadata: dict[str, Any] = Field(
        default_factory=dict, description="Rule-specific extra data"
    )


class SourceRange(BaseModel):
    start_line: int
    start_column: int
    end_line: int
    end_column: int
    start_offset: int
    end_offset: int


class PatternMatch(BaseModel):
    """One rule firing at one syntax node."""

    model_config = ConfigDict(frozen=True)

    rule_id: str
    severity: Severity
    category: PatternCategory
    range: SourceRange
    file_path: str
    line: int
    column: int
    detail: MatchDetails | None = None
    node: Any = Field(default=None, exclude=True, repr=False)
