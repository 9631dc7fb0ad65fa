"""
Score Calculator — Turns pattern matches into a 0-100 quality score.

Every category starts at 100 and moves by its matches' severity deltas;
categories are clamped to [0, 100] and the total is their weighted sum,
rounded half-up and clamped again. Scores are recomputed from scratch on
every call.
"""

from __future__ import annotations

import math
from collections import Counter
from typing import Sequence

from quality_highlighter.models.rule_models import (
    SEVERITY_DELTAS,
    PatternCategory,
    PatternMatch,
    Severity,
)
from quality_highlighter.models.score_models import (
    QualityScore,
    ScoreAnalysis,
    ScoreBreakdown,
    ScoreLabel,
    ScoreTrend,
    TrendDirection,
)

BASE_SCORE = 100

CATEGORY_WEIGHTS: dict[PatternCategory, float] = {
    PatternCategory.PERFORMANCE: 0.35,
    PatternCategory.SECURITY: 0.30,
    PatternCategory.MAINTAINABILITY: 0.25,
    PatternCategory.STYLE: 0.10,
}

# (minimum total, label), checked in order
LABEL_THRESHOLDS: list[tuple[int, ScoreLabel]] = [
    (90, ScoreLabel.EXCELLENT),
    (80, ScoreLabel.VERY_GOOD),
    (70, ScoreLabel.GOOD),
    (60, ScoreLabel.FAIR),
    (40, ScoreLabel.POOR),
]

RECOMMENDATION_THRESHOLD = 70
TREND_NOISE = 2

_CATEGORY_ADVICE = {
    PatternCategory.PERFORMANCE: "Focus on performance optimizations",
    PatternCategory.SECURITY: "Review security vulnerabilities",
    PatternCategory.MAINTAINABILITY: "Improve code maintainability",
    PatternCategory.STYLE: "Clean up code style issues",
}


def _clamp(value: float) -> int:
    return int(max(0, min(BASE_SCORE, value)))


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def calculate_breakdown(matches: Sequence[PatternMatch]) -> ScoreBreakdown:
    scores = {category: BASE_SCORE for category in PatternCategory}
    for match in matches:
        scores[PatternCategory(match.category)] += SEVERITY_DELTAS[Severity(match.severity)]
    clamped = {category: _clamp(score) for category, score in scores.items()}

    weighted = sum(clamped[category] * weight for category, weight in CATEGORY_WEIGHTS.items())
    return ScoreBreakdown(
        performance=clamped[PatternCategory.PERFORMANCE],
        security=clamped[PatternCategory.SECURITY],
        maintainability=clamped[PatternCategory.MAINTAINABILITY],
        style=clamped[PatternCategory.STYLE],
        total=_clamp(_round_half_up(weighted)),
    )


def score_label(total: int) -> ScoreLabel:
    for minimum, label in LABEL_THRESHOLDS:
        if total >= minimum:
            return label
    return ScoreLabel.CRITICAL


def calculate_score(matches: Sequence[PatternMatch]) -> QualityScore:
    """Compute the quality score for one file's matches."""
    breakdown = calculate_breakdown(matches)
    return QualityScore(value=breakdown.total, label=score_label(breakdown.total), breakdown=breakdown)


def recommendations(breakdown: ScoreBreakdown, critical_count: int) -> list[str]:
    advice: list[str] = []
    if critical_count > 0:
        plural = "s" if critical_count > 1 else ""
        advice.append(f"Address {critical_count} critical issue{plural} immediately")

    for category, message in _CATEGORY_ADVICE.items():
        if getattr(breakdown, category.value) < RECOMMENDATION_THRESHOLD:
            advice.append(message)

    if breakdown.total >= 90:
        advice.append("Excellent code quality! Keep it up!")
    elif breakdown.total >= 80:
        advice.append("Good code quality with room for minor improvements")
    elif breakdown.total >= 60:
        advice.append("Moderate code quality - focus on critical issues first")
    else:
        advice.append("Code quality needs significant improvement")
    return advice


def analyze_score(matches: Sequence[PatternMatch]) -> ScoreAnalysis:
    """Score plus severity/category counts and recommendations."""
    score = calculate_score(matches)
    severity_counts = Counter(Severity(match.severity).value for match in matches)
    category_counts = Counter(PatternCategory(match.category).value for match in matches)
    critical = severity_counts.get(Severity.CRITICAL.value, 0)
    return ScoreAnalysis(
        score=score,
        severity_counts=dict(severity_counts),
        category_counts=dict(category_counts),
        total_issues=len(matches),
        critical_issues=critical,
        recommendations=recommendations(score.breakdown, critical),
    )


def calculate_trend(current: int, previous: int | None = None) -> ScoreTrend:
    if previous is None:
        return ScoreTrend(direction=TrendDirection.NEUTRAL, change=0, message="Initial analysis")

    change = current - previous
    if abs(change) < TREND_NOISE:
        return ScoreTrend(direction=TrendDirection.NEUTRAL, change=change, message="No significant change")
    if change > 0:
        return ScoreTrend(direction=TrendDirection.UP, change=change, message=f"Improved by {change} points")
    return ScoreTrend(direction=TrendDirection.DOWN, change=change, message=f"Decreased by {abs(change)} points")
