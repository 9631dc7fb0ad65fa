"""
Rule Routes — list rules and toggle them at runtime.

  GET   /rules                     → every registered rule
  GET   /rules/statistics          → counts by language / severity / category
  PATCH /rules/{rule_id}           → enable or disable one rule
  PATCH /categories/{category}     → enable or disable a whole category
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from quality_highlighter.api.dependencies import get_engine
from quality_highlighter.core.pattern_engine import PatternEngine
from quality_highlighter.models.analysis_models import CategoryToggleResponse, RuleInfo, RuleToggle
from quality_highlighter.models.rule_models import PatternCategory, Rule

router = APIRouter()


def _rule_info(rule: Rule) -> RuleInfo:
    return RuleInfo(
        id=rule.id,
        name=rule.name,
        description=rule.description,
        category=rule.category,
        severity=rule.severity,
        languages=sorted(rule.languages, key=lambda language: language.value),
        enabled=rule.enabled,
        score_impact=rule.score_impact,
    )


@router.get("/rules", response_model=list[RuleInfo])
async def list_rules(engine: PatternEngine = Depends(get_engine)):
    return [_rule_info(rule) for rule in engine.all_rules()]


@router.get("/rules/statistics")
async def rule_statistics(engine: PatternEngine = Depends(get_engine)):
    return engine.statistics()


@router.patch("/rules/{rule_id}", response_model=RuleInfo)
async def toggle_rule(rule_id: str, body: RuleToggle, engine: PatternEngine = Depends(get_engine)):
    if not engine.set_enabled(rule_id, body.enabled):
        raise HTTPException(status_code=404, detail=f"Unknown rule: {rule_id}")
    return _rule_info(engine.get_rule(rule_id))


@router.patch("/categories/{category}", response_model=CategoryToggleResponse)
async def toggle_category(
    category: PatternCategory,
    body: RuleToggle,
    engine: PatternEngine = Depends(get_engine),
):
    toggled = engine.set_category_enabled(category, body.enabled)
    return CategoryToggleResponse(category=category, enabled=body.enabled, toggled=toggled)
