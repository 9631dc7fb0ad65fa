"""
Synchronous XHR Rule — Detects ``xhr.open(method, url, false)``.
"""

from __future__ import annotations

from quality_highlighter.core.matcher import MatchContext, PatternMatcher
from quality_highlighter.core.node_utils import member_property_name
from quality_highlighter.models.rule_models import (
    JS_LANGUAGES,
    MatchDetails,
    PatternCategory,
    Rule,
    Severity,
)
from quality_highlighter.models.syntax import CallExpression, Literal, MemberExpression, Node

RULE_ID = "synchronous-xhr"


class SynchronousXhrMatcher(PatternMatcher):
    def match(self, node: Node, context: MatchContext) -> bool:
        if not isinstance(node, CallExpression) or not isinstance(node.callee, MemberExpression):
            return False
        if member_property_name(node.callee) != "open" or len(node.arguments) < 3:
            return False
        flag = node.arguments[2]
        return isinstance(flag, Literal) and flag.value is False

    def details(self, node: Node, context: MatchContext) -> MatchDetails:
        return MatchDetails(
            complexity=8,
            impact="Synchronous request freezes the main thread until the response arrives",
            suggestion="Use fetch() with await, or pass true as the third argument to open()",
        )


def rule() -> Rule:
    return Rule(
        id=RULE_ID,
        name="Synchronous XHR",
        description="Detects synchronous XMLHttpRequest usage",
        category=PatternCategory.PERFORMANCE,
        severity=Severity.CRITICAL,
        languages=JS_LANGUAGES,
        matcher=SynchronousXhrMatcher(),
    )
