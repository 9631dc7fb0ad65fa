"""
Function Too Long Rule — Flags functions spanning more than 30 lines.
"""

from __future__ import annotations

from quality_highlighter.core.matcher import MatchContext, PatternMatcher
from quality_highlighter.core.node_utils import is_function
from quality_highlighter.core.vocabulary import MAX_FUNCTION_LINES
from quality_highlighter.models.rule_models import (
    JS_LANGUAGES,
    MatchDetails,
    PatternCategory,
    Rule,
    Severity,
)
from quality_highlighter.models.syntax import Node

RULE_ID = "function-too-long"


def line_count(node: Node) -> int:
    return node.loc.end.line - node.loc.start.line + 1


class FunctionTooLongMatcher(PatternMatcher):
    def __init__(self, max_lines: int = MAX_FUNCTION_LINES) -> None:
        self.max_lines = max_lines

    def match(self, node: Node, context: MatchContext) -> bool:
        return is_function(node) and line_count(node) > self.max_lines

    def details(self, node: Node, context: MatchContext) -> MatchDetails:
        lines = line_count(node)
        return MatchDetails(
            complexity=lines,
            impact=f"Function has {lines} lines (recommended: <{self.max_lines})",
            suggestion="Break it down into smaller, focused functions",
            metadata={"lines": lines},
        )


def rule() -> Rule:
    return Rule(
        id=RULE_ID,
        name="Function Too Long",
        description="Detects functions that are too long to read and test comfortably",
        category=PatternCategory.MAINTAINABILITY,
        severity=Severity.WARNING,
        languages=JS_LANGUAGES,
        matcher=FunctionTooLongMatcher(),
    )
