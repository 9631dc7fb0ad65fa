"""
Inefficient Object Access Rule — Detects deep or repeated property chains
resolved on every loop iteration.

Repetition is judged by counting the dotted path in the source text. That
detects redundancy without proving aliasing, and can over- or
under-report when the same path means different objects.
"""

from __future__ import annotations

import re

from quality_highlighter.core.matcher import MatchContext, PatternMatcher
from quality_highlighter.core.node_utils import member_depth, property_path
from quality_highlighter.core.scope import is_loop_contained
from quality_highlighter.models.rule_models import (
    JS_LANGUAGES,
    MatchDetails,
    PatternCategory,
    Rule,
    Severity,
)
from quality_highlighter.models.syntax import CallExpression, MemberExpression, Node

RULE_ID = "inefficient-object-access"

DEEP_ACCESS_DEPTH = 3


def _is_repeated_property_access(node: MemberExpression, source: str) -> bool:
    path = property_path(node)
    parts = path.split(".") if path else []
    if len(parts) < 2:
        return False
    if source.count(path) > 1:
        return True
    base = ".".join(parts[:-1])
    return bool(base) and source.count(base + ".") > 1


def _is_repeated_method_call(node: CallExpression, source: str) -> bool:
    if not isinstance(node.callee, MemberExpression):
        return False
    path = property_path(node.callee)
    if not path:
        return False
    return len(re.findall(re.escape(path) + r"\s*\(", source)) > 1


def access_type(node: Node) -> str:
    if isinstance(node, CallExpression):
        return "Method call"
    if member_depth(node) >= DEEP_ACCESS_DEPTH:
        return "Deep property access"
    return "Property access"


class InefficientObjectAccessMatcher(PatternMatcher):
    def match(self, node: Node, context: MatchContext) -> bool:
        if not isinstance(node, (MemberExpression, CallExpression)):
            return False
        if not is_loop_contained(node, context):
            return False
        if isinstance(node, MemberExpression):
            return (
                _is_repeated_property_access(node, context.source)
                or member_depth(node) >= DEEP_ACCESS_DEPTH
            )
        return _is_repeated_method_call(node, context.source)

    def details(self, node: Node, context: MatchContext) -> MatchDetails:
        kind = access_type(node)
        if isinstance(node, CallExpression):
            path = property_path(node.callee)
            complexity = 6
            suggestion = f"Cache the result of '{path}()' outside the loop if it doesn't change"
        else:
            path = property_path(node)
            complexity = max(5, min(member_depth(node) * 2, 8))
            if kind == "Deep property access":
                suggestion = f"Cache '{path}' in a variable before the loop"
            else:
                suggestion = f"Store '{path}' in a local variable before the loop"
        return MatchDetails(
            complexity=complexity,
            impact=f"{kind} '{path}' resolved on every loop iteration",
            suggestion=suggestion,
            metadata={"path": path},
        )


def rule() -> Rule:
    return Rule(
        id=RULE_ID,
        name="Inefficient Object Access",
        description="Detects repeated property access or method calls within loops that should be cached",
        category=PatternCategory.PERFORMANCE,
        severity=Severity.CRITICAL,
        languages=JS_LANGUAGES,
        matcher=InefficientObjectAccessMatcher(),
    )
