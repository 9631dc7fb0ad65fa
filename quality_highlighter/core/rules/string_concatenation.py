"""
String Concatenation in Loops Rule — Detects ``+=`` / ``+`` string building
inside loop bodies.

Strings are immutable, so repeated concatenation copies the accumulated
buffer on every iteration. Whether an operand is a string is guessed from
literals, template strings, string-ish identifier names and string method
calls anywhere in the expression; numeric additions that share those
naming conventions are accepted false positives.
"""

from __future__ import annotations

from quality_highlighter.core.matcher import MatchContext, PatternMatcher
from quality_highlighter.core.node_utils import method_name
from quality_highlighter.core.scope import is_loop_contained
from quality_highlighter.core.vocabulary import STRING_METHODS, STRING_NAME_HINTS
from quality_highlighter.core.walker import contains
from quality_highlighter.models.rule_models import (
    JS_LANGUAGES,
    MatchDetails,
    PatternCategory,
    Rule,
    Severity,
)
from quality_highlighter.models.syntax import (
    AssignmentExpression,
    BinaryExpression,
    CallExpression,
    Identifier,
    Literal,
    Node,
    TemplateLiteral,
)

RULE_ID = "string-concatenation-in-loops"


def _is_string_literal(node: Node) -> bool:
    return isinstance(node, Literal) and isinstance(node.value, str) and node.regex is None


def _is_stringish_identifier(node: Node) -> bool:
    if not isinstance(node, Identifier):
        return False
    lowered = node.name.lower()
    return any(hint in lowered for hint in STRING_NAME_HINTS)


def _is_string_method_call(node: Node) -> bool:
    return isinstance(node, CallExpression) and method_name(node) in STRING_METHODS


def looks_like_string_operation(node: Node) -> bool:
    return (
        contains(node, _is_string_literal)
        or contains(node, lambda n: isinstance(n, TemplateLiteral))
        or contains(node, _is_stringish_identifier)
        or contains(node, _is_string_method_call)
    )


def _is_concatenation(node: Node) -> bool:
    if isinstance(node, AssignmentExpression):
        return node.operator == "+="
    if isinstance(node, BinaryExpression):
        return node.operator == "+"
    return False


class StringConcatenationMatcher(PatternMatcher):
    def match(self, node: Node, context: MatchContext) -> bool:
        if not _is_concatenation(node):
            return False
        if not is_loop_contained(node, context):
            return False
        return looks_like_string_operation(node)

    def details(self, node: Node, context: MatchContext) -> MatchDetails:
        if isinstance(node, AssignmentExpression):
            target = node.left.name if isinstance(node.left, Identifier) else "the string"
            suggestion = f"Collect parts in an array and call join('') once instead of growing '{target}'"
        else:
            suggestion = "Build the pieces with a template literal or push them to an array and join once"
        return MatchDetails(
            complexity=2,
            impact="Each concatenation copies the accumulated string: O(n^2) for n iterations",
            suggestion=suggestion,
        )


def rule() -> Rule:
    return Rule(
        id=RULE_ID,
        name="String Concatenation in Loops",
        description="Detects string building with + or += inside loops",
        category=PatternCategory.PERFORMANCE,
        severity=Severity.CRITICAL,
        languages=JS_LANGUAGES,
        matcher=StringConcatenationMatcher(),
    )
