"""
DOM Operations in Loops Rule — Detects DOM queries, mutations and layout
reads performed on every loop iteration.

Each query walks the document; each mutation or layout read can force a
reflow. Helpers that are merely *defined* near a loop are not flagged:
containment is judged with named function declarations as boundaries.
"""

from __future__ import annotations

from quality_highlighter.core.matcher import MatchContext, PatternMatcher
from quality_highlighter.core.node_utils import member_property_name, method_name
from quality_highlighter.core.scope import is_loop_contained
from quality_highlighter.core.vocabulary import (
    ALWAYS_GLOBAL_DOM_METHODS,
    DOM_MUTATION_METHODS,
    DOM_OPERATION_COMPLEXITY,
    DOM_QUERY_METHODS,
    LAYOUT_METHODS,
    LAYOUT_PROPERTIES,
)
from quality_highlighter.models.rule_models import (
    JS_LANGUAGES,
    MatchDetails,
    PatternCategory,
    Rule,
    Severity,
)
from quality_highlighter.models.syntax import CallExpression, MemberExpression, Node

RULE_ID = "dom-queries-in-loops"

DOM_QUERY = "DOM Query"
DOM_MANIPULATION = "DOM Manipulation"
STYLE_LAYOUT = "Style/Layout"

_SUGGESTIONS = {
    DOM_QUERY: "Cache DOM elements outside the loop",
    DOM_MANIPULATION: "Use a DocumentFragment and attach it once after the loop",
    STYLE_LAYOUT: "Read layout values once before the loop and batch the writes",
}


def dom_operation_type(node: Node) -> str | None:
    """Classify a call or member read as a DOM operation, or None."""
    if isinstance(node, MemberExpression):
        if member_property_name(node) in LAYOUT_PROPERTIES:
            return STYLE_LAYOUT
        return None
    if not isinstance(node, CallExpression):
        return None

    name = method_name(node)
    if name in DOM_QUERY_METHODS:
        return DOM_QUERY
    if name in DOM_MUTATION_METHODS:
        # A bare appendChild() is a user function, not the DOM API
        if isinstance(node.callee, MemberExpression) or name in ALWAYS_GLOBAL_DOM_METHODS:
            return DOM_MANIPULATION
        return None
    if name in LAYOUT_METHODS:
        return STYLE_LAYOUT
    return None


class DOMQueriesInLoopsMatcher(PatternMatcher):
    def match(self, node: Node, context: MatchContext) -> bool:
        if dom_operation_type(node) is None:
            return False
        return is_loop_contained(node, context, helpers_are_boundaries=True)

    def details(self, node: Node, context: MatchContext) -> MatchDetails:
        operation = dom_operation_type(node) or DOM_QUERY
        return MatchDetails(
            complexity=DOM_OPERATION_COMPLEXITY.get(operation, 2),
            impact=f"{operation} operation in loop forces browser reflow/repaint on each iteration",
            suggestion=_SUGGESTIONS.get(operation, "Cache DOM operations outside the loop"),
            metadata={"operation": operation},
        )


def rule() -> Rule:
    return Rule(
        id=RULE_ID,
        name="DOM Operations in Loops",
        description="Detects DOM queries, manipulation and layout reads inside loops",
        category=PatternCategory.PERFORMANCE,
        severity=Severity.CRITICAL,
        languages=JS_LANGUAGES,
        matcher=DOMQueriesInLoopsMatcher(),
    )
