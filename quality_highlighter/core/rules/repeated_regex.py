"""
Repeated RegExp Compilation Rule — Detects loops that build a regular
expression on every iteration.
"""

from __future__ import annotations

from quality_highlighter.core.matcher import MatchContext, PatternMatcher
from quality_highlighter.core.node_utils import is_loop, loop_body
from quality_highlighter.core.walker import contains
from quality_highlighter.models.rule_models import (
    JS_LANGUAGES,
    MatchDetails,
    PatternCategory,
    Rule,
    Severity,
)
from quality_highlighter.models.syntax import Identifier, Literal, NewExpression, Node

RULE_ID = "repeated-regex-compilation"


def _creates_regex(node: Node) -> bool:
    if isinstance(node, NewExpression):
        return isinstance(node.callee, Identifier) and node.callee.name == "RegExp"
    return isinstance(node, Literal) and node.regex is not None


class RepeatedRegexMatcher(PatternMatcher):
    def match(self, node: Node, context: MatchContext) -> bool:
        return is_loop(node) and contains(loop_body(node), _creates_regex)

    def details(self, node: Node, context: MatchContext) -> MatchDetails:
        return MatchDetails(
            complexity=3,
            impact="The regular expression is recompiled on every iteration",
            suggestion="Hoist the RegExp out of the loop and reuse it",
        )


def rule() -> Rule:
    return Rule(
        id=RULE_ID,
        name="Repeated RegExp Compilation",
        description="Detects repeated RegExp compilation in loops",
        category=PatternCategory.PERFORMANCE,
        severity=Severity.WARNING,
        languages=JS_LANGUAGES,
        matcher=RepeatedRegexMatcher(),
    )
