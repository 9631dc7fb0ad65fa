"""
Nested Loops Rule — Detects loops whose body contains another loop.

Each level of nesting multiplies the iteration count: two levels over
inputs of size n cost O(n^2), three levels O(n^3).
"""

from __future__ import annotations

from quality_highlighter.core.matcher import MatchContext, PatternMatcher
from quality_highlighter.core.node_utils import is_loop, loop_body
from quality_highlighter.core.walker import contains, iter_child_nodes
from quality_highlighter.models.rule_models import (
    JS_LANGUAGES,
    MatchDetails,
    PatternCategory,
    Rule,
    Severity,
)
from quality_highlighter.models.syntax import Node

RULE_ID = "nested-loops"


def max_loop_depth(loop: Node) -> int:
    """Deepest loop nesting reachable from ``loop``, counting ``loop`` as 1."""
    deepest = 0
    stack: list[tuple[Node, int]] = [(loop, 0)]
    while stack:
        node, depth = stack.pop()
        if is_loop(node):
            depth += 1
            deepest = max(deepest, depth)
        stack.extend((child, depth) for child in iter_child_nodes(node))
    return deepest


class NestedLoopsMatcher(PatternMatcher):
    def match(self, node: Node, context: MatchContext) -> bool:
        if not is_loop(node):
            return False
        return contains(loop_body(node), is_loop)

    def details(self, node: Node, context: MatchContext) -> MatchDetails:
        depth = max_loop_depth(node)
        if depth >= 3:
            suggestion = "Flatten the iteration with a Map/Set index or split the work into separate passes"
        else:
            suggestion = "Index the inner collection in a Map or Set before the outer loop"
        return MatchDetails(
            complexity=depth,
            impact=f"Estimated O(n^{depth}) time as the inputs grow",
            suggestion=suggestion,
            metadata={"depth": depth},
        )


def rule() -> Rule:
    return Rule(
        id=RULE_ID,
        name="Nested Loops",
        description="Detects loops nested inside other loops that multiply iteration cost",
        category=PatternCategory.PERFORMANCE,
        severity=Severity.CRITICAL,
        languages=JS_LANGUAGES,
        matcher=NestedLoopsMatcher(),
    )
