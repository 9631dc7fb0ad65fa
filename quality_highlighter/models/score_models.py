"""
Score Data Models — Quality score, breakdown, analysis and trend.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class ScoreLabel(str, Enum):
    EXCELLENT = "excellent"
    VERY_GOOD = "very good"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    CRITICAL = "critical"


class ScoreBreakdown(BaseModel):
    """Per-category scores and weighted total, all in [0, 100]."""

    performance: int = Field(..., ge=0, le=100)
    security: int = Field(..., ge=0, le=100)
    maintainability: int = Field(..., ge=0, le=100)
    style: int = Field(..., ge=0, le=100)
    total: int = Field(..., ge=0, le=100)


class QualityScore(BaseModel):
    value: int = Field(..., ge=0, le=100, description="Weighted total score")
    label: ScoreLabel
    breakdown: ScoreBreakdown


class ScoreAnalysis(BaseModel):
    """Score plus counts and human-readable recommendations."""

    score: QualityScore
    severity_counts: dict[str, int] = Field(default_factory=dict)
    category_counts: dict[str, int] = Field(default_factory=dict)
    total_issues: int = 0
    critical_issues: int = 0
    recommendations: list[str] = Field(default_factory=list)


class TrendDirection(str, Enum):
    UP = "up"
    DOWN = "down"
    NEUTRAL = "neutral"


class ScoreTrend(BaseModel):
    direction: TrendDirection
    change: int = 0
    message: str = ""
