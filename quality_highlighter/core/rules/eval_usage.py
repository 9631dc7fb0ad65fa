"""
Eval Usage Rule — Detects calls to ``eval()``.

Evaluated strings run with the caller's privileges; with any user input
in them this is arbitrary code execution.
"""

from __future__ import annotations

from quality_highlighter.core.matcher import MatchContext, PatternMatcher
from quality_highlighter.models.rule_models import (
    JS_LANGUAGES,
    MatchDetails,
    PatternCategory,
    Rule,
    Severity,
)
from quality_highlighter.models.syntax import CallExpression, Identifier, Node

RULE_ID = "eval-usage"


class EvalUsageMatcher(PatternMatcher):
    def match(self, node: Node, context: MatchContext) -> bool:
        return (
            isinstance(node, CallExpression)
            and isinstance(node.callee, Identifier)
            and node.callee.name == "eval"
        )

    def details(self, node: Node, context: MatchContext) -> MatchDetails:
        return MatchDetails(
            complexity=10,
            impact="eval() executes arbitrary code and disables engine optimizations",
            suggestion="Parse data with JSON.parse() or dispatch through an explicit lookup table",
        )


def rule() -> Rule:
    return Rule(
        id=RULE_ID,
        name="Eval Usage",
        description="Detects use of eval() which can execute arbitrary code",
        category=PatternCategory.SECURITY,
        severity=Severity.CRITICAL,
        languages=JS_LANGUAGES,
        matcher=EvalUsageMatcher(),
    )
