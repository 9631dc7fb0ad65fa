"""
Multiple Array Iterations Rule — Detects chains like ``a.map().filter().sort()``.

Every link of the chain is a full pass over the array; k links cost
O(k·n) where a single reduce() or loop would be O(n).
"""

from __future__ import annotations

from quality_highlighter.core.matcher import MatchContext, PatternMatcher
from quality_highlighter.core.node_utils import member_property_name
from quality_highlighter.core.vocabulary import CHAINABLE_ARRAY_METHODS
from quality_highlighter.models.rule_models import (
    JS_LANGUAGES,
    MatchDetails,
    PatternCategory,
    Rule,
    Severity,
)
from quality_highlighter.models.syntax import CallExpression, Identifier, MemberExpression, Node

RULE_ID = "multiple-array-iterations"


def chain_length(node: Node) -> int:
    """Consecutive chainable array calls ending at ``node``."""
    length = 0
    current = node
    while isinstance(current, CallExpression) and isinstance(current.callee, MemberExpression):
        if member_property_name(current.callee) not in CHAINABLE_ARRAY_METHODS:
            break
        length += 1
        current = current.callee.object
    return length


def chain_root_name(node: Node) -> str:
    """Identifier the chain starts from, or 'array' if it isn't a plain name."""
    current = node
    while isinstance(current, CallExpression) and isinstance(current.callee, MemberExpression):
        receiver = current.callee.object
        if isinstance(receiver, Identifier):
            return receiver.name
        if not isinstance(receiver, CallExpression):
            break
        current = receiver
    return "array"


class MultipleArrayIterationsMatcher(PatternMatcher):
    def match(self, node: Node, context: MatchContext) -> bool:
        return isinstance(node, CallExpression) and chain_length(node) >= 2

    def details(self, node: Node, context: MatchContext) -> MatchDetails:
        length = chain_length(node)
        name = chain_root_name(node)
        if length <= 2:
            suggestion = "Consider combining operations into a single reduce() call"
        elif length <= 3:
            suggestion = "Use a single reduce() or for-loop to avoid multiple iterations"
        else:
            suggestion = "Refactor into a single-pass algorithm using reduce() or a plain loop"
        return MatchDetails(
            complexity=min(length * 2, 10),
            impact=f"{length} separate iterations over array '{name}' - O({length}n) complexity",
            suggestion=suggestion,
            metadata={"chain_length": length, "array": name},
        )


def rule() -> Rule:
    return Rule(
        id=RULE_ID,
        name="Multiple Array Iterations",
        description="Detects chained array methods that iterate the same data several times",
        category=PatternCategory.PERFORMANCE,
        severity=Severity.CRITICAL,
        languages=JS_LANGUAGES,
        matcher=MultipleArrayIterationsMatcher(),
    )
