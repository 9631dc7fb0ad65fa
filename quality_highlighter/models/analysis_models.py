"""
Analysis API Models — Analyzer results, HTTP request/response, audit entries.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from quality_highlighter.models.rule_models import (
    Language,
    PatternCategory,
    PatternMatch,
    Severity,
)
from quality_highlighter.models.score_models import QualityScore, ScoreAnalysis, ScoreTrend


class AnalysisError(BaseModel):
    type: Literal["parse", "runtime", "timeout"]
    message: str
    line: int | None = None


class AnalysisResult(BaseModel):
    """Everything one analysis of one file produced."""

    file_path: str
    language: Language | None = None
    matches: list[PatternMatch] = Field(default_factory=list)
    score: QualityScore
    analysis: ScoreAnalysis | None = None
    analysis_time_ms: float = 0.0
    errors: list[AnalysisError] = Field(default_factory=list)


# ── HTTP request / response ──


class AnalyzeRequest(BaseModel):
    source: str = Field(..., description="Full source text of the file")
    file_path: str = Field(..., min_length=1, description="Path used for language detection and reporting")
    language: Language | None = Field(
        default=None, description="Language tag; detected from the file extension when omitted"
    )
    categories: list[PatternCategory] = Field(
        default_factory=list, description="Categories to check; empty means all"
    )
    tree: dict[str, Any] | None = Field(
        default=None, description="Optional ESTree/Babel JSON tree; skips server-side parsing"
    )
    previous_score: int | None = Field(
        default=None, ge=0, le=100, description="Score of the previous analysis, for the trend"
    )


class AnalyzeResponse(BaseModel):
    analysis_id: str
    result: AnalysisResult
    trend: ScoreTrend | None = None


class RuleInfo(BaseModel):
    id: str
    name: str
    description: str
    category: PatternCategory
    severity: Severity
    languages: list[Language]
    enabled: bool
    score_impact: int


class RuleToggle(BaseModel):
    enabled: bool


class CategoryToggleResponse(BaseModel):
    category: PatternCategory
    enabled: bool
    toggled: int


# ── Audit ──


class AuditEntry(BaseModel):
    """One analysis recorded in the audit trail."""

    analysis_id: str
    file_path: str
    language: str | None = None
    total_issues: int = 0
    critical_issues: int = 0
    score: int = Field(..., ge=0, le=100)
    label: str
    rule_ids: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    duration_ms: float = 0.0


class AuditSummary(BaseModel):
    files_analyzed: int = 0
    average_score: float = 0.0
    total_issues: int = 0
    recent: list[dict] = Field(default_factory=list)
