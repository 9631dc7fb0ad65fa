"""
Expensive Operations in Loops Rule — Detects costly calls made on every
loop iteration.

DOM queries and layout reads are left to ``dom-queries-in-loops`` so one
call is never reported twice.
"""

from __future__ import annotations

from quality_highlighter.core.matcher import MatchContext, PatternMatcher
from quality_highlighter.core.node_utils import method_name
from quality_highlighter.core.scope import is_loop_contained
from quality_highlighter.core.vocabulary import (
    CACHEABLE_CALLS,
    EXPENSIVE_ARRAY_METHODS,
    EXPENSIVE_OPERATION_COMPLEXITY,
    EXPENSIVE_STATIC_CALLS,
)
from quality_highlighter.models.rule_models import (
    JS_LANGUAGES,
    MatchDetails,
    PatternCategory,
    Rule,
    Severity,
)
from quality_highlighter.models.syntax import CallExpression, Identifier, MemberExpression, Node

RULE_ID = "expensive-operations-in-loops"

ARRAY = "Array"
OBJECT = "Object"
FUNCTION = "Function"

_SUGGESTIONS = {
    ARRAY: "Build a Map or Set once before the loop instead of searching the array each time",
    OBJECT: "Compute the object operation once outside the loop",
    FUNCTION: "Call it once before the loop and reuse the result",
}


def _static_call(node: CallExpression) -> str | None:
    """``Object.keys(x)`` -> "Object.keys" for the known static helpers."""
    callee = node.callee
    if not isinstance(callee, MemberExpression) or not isinstance(callee.object, Identifier):
        return None
    members = EXPENSIVE_STATIC_CALLS.get(callee.object.name)
    name = method_name(node)
    if members is None or name not in members:
        return None
    return f"{callee.object.name}.{name}"


def expensive_operation(node: Node) -> tuple[str, str] | None:
    """(operation type, operation name) for an expensive member call, or None."""
    if not isinstance(node, CallExpression) or not isinstance(node.callee, MemberExpression):
        return None
    static = _static_call(node)
    if static is not None:
        return OBJECT, static
    name = method_name(node)
    if name in EXPENSIVE_ARRAY_METHODS:
        return ARRAY, name
    if name in CACHEABLE_CALLS:
        return FUNCTION, name
    return None


class ExpensiveOperationsInLoopsMatcher(PatternMatcher):
    def match(self, node: Node, context: MatchContext) -> bool:
        if expensive_operation(node) is None:
            return False
        return is_loop_contained(node, context)

    def details(self, node: Node, context: MatchContext) -> MatchDetails:
        operation, name = expensive_operation(node) or (FUNCTION, "unknown")
        return MatchDetails(
            complexity=EXPENSIVE_OPERATION_COMPLEXITY.get(name, 2),
            impact=f"{operation} operation '{name}' in loop creates O(n^2) or worse complexity",
            suggestion=_SUGGESTIONS[operation],
            metadata={"operation": operation, "method": name},
        )


def rule() -> Rule:
    return Rule(
        id=RULE_ID,
        name="Expensive Operations in Loops",
        description="Detects expensive operations that should be moved outside loops",
        category=PatternCategory.PERFORMANCE,
        severity=Severity.CRITICAL,
        languages=JS_LANGUAGES,
        matcher=ExpensiveOperationsInLoopsMatcher(),
    )
