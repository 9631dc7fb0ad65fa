"""
Infinite Recursion Risks Rule — Detects recursive functions without an
evident way to stop.

Three facets are computed for every recursive function:

  (a) unmodified parameters: a recursive call passes the function's own
      parameters back unchanged, so no progress is made;
  (b) missing base case: every return-style exit path recurses;
  (c) missing depth guard: no depth/counter/limit name is referenced.

A function is flagged when (a) holds, or when (b) and (c) both hold. One
safeguard, a base case or a depth guard, is enough to suppress the warning.

Functions with no resolvable name are treated permissively: any call to a
plain identifier counts as a recursion candidate.
"""

from __future__ import annotations

from dataclasses import dataclass

from quality_highlighter.core.matcher import MatchContext, PatternMatcher
from quality_highlighter.core.node_utils import (
    function_name,
    function_params,
    is_function,
    iter_own_scope,
)
from quality_highlighter.core.vocabulary import DEPTH_GUARD_NAMES
from quality_highlighter.core.walker import NodeIndex, contains, iter_nodes, iter_with_parents
from quality_highlighter.models.rule_models import (
    JS_LANGUAGES,
    MatchDetails,
    PatternCategory,
    Rule,
    Severity,
)
from quality_highlighter.models.syntax import (
    ArrowFunctionExpression,
    CallExpression,
    ConditionalExpression,
    Identifier,
    MemberExpression,
    Node,
    ReturnStatement,
)

RULE_ID = "infinite-recursion-risks"

UNMODIFIED_PARAMETERS = "may not modify parameters"
MISSING_BASE_CASE = "lacks clear base case"
MISSING_DEPTH_GUARD = "lacks depth limiting"
GENERIC_RISK = "has recursion risks"

_RISK_COMPLEXITY = {
    MISSING_BASE_CASE: 10,
    MISSING_DEPTH_GUARD: 8,
    UNMODIFIED_PARAMETERS: 6,
}

_RISK_SUGGESTIONS = {
    MISSING_BASE_CASE: "Add clear base case conditions that return without recursion",
    MISSING_DEPTH_GUARD: "Add a depth/counter parameter to limit recursion depth",
    UNMODIFIED_PARAMETERS: "Ensure parameters are modified to progress toward the base case",
}


@dataclass(frozen=True)
class RecursionAnalysis:
    name: str | None
    recursive: bool
    unmodified_parameters: bool = False
    missing_base_case: bool = False
    missing_depth_guard: bool = False
    direct_recursive_return: bool = False

    @property
    def at_risk(self) -> bool:
        if not self.recursive:
            return False
        return self.unmodified_parameters or (self.missing_base_case and self.missing_depth_guard)

    @property
    def risk_type(self) -> str:
        if self.unmodified_parameters:
            return UNMODIFIED_PARAMETERS
        if self.missing_base_case and self.direct_recursive_return:
            return MISSING_BASE_CASE
        if self.missing_depth_guard:
            return MISSING_DEPTH_GUARD
        if self.missing_base_case:
            return MISSING_BASE_CASE
        return GENERIC_RISK


def _is_recursive_call(node: Node, name: str | None) -> bool:
    if not isinstance(node, CallExpression) or not isinstance(node.callee, Identifier):
        return False
    return name is None or node.callee.name == name


def _exit_expressions(function: Node) -> list[Node | None]:
    """Values the function can return, with conditionals split per branch."""
    exits: list[Node | None] = []
    if isinstance(function, ArrowFunctionExpression) and function.expression:
        exits.append(function.body)
    elif function.body is not None:
        for node in iter_own_scope(function.body):
            if isinstance(node, ReturnStatement):
                exits.append(node.argument)

    expanded: list[Node | None] = []
    while exits:
        value = exits.pop()
        if isinstance(value, ConditionalExpression):
            exits.extend([value.consequent, value.alternate])
        else:
            expanded.append(value)
    return expanded


def _has_base_case(function: Node, name: str | None) -> bool:
    for value in _exit_expressions(function):
        if value is None or not contains(value, lambda n: _is_recursive_call(n, name)):
            return True
    return False


def _references_depth_guard(body: Node | None) -> bool:
    if body is None:
        return False
    for node, parent in iter_with_parents(body):
        if not isinstance(node, Identifier) or node.name not in DEPTH_GUARD_NAMES:
            continue
        # obj.depth names a property, not a guard variable
        if isinstance(parent, MemberExpression) and parent.property is node and not parent.computed:
            continue
        return True
    return False


def _passes_own_parameters(body: Node | None, name: str, params: list[str]) -> bool:
    if body is None or not params:
        return False
    for node in iter_nodes(body):
        if not _is_recursive_call(node, name):
            continue
        arguments = node.arguments
        if len(arguments) == len(params) and all(
            isinstance(arg, Identifier) and arg.name == param
            for arg, param in zip(arguments, params)
        ):
            return True
    return False


def _has_direct_recursive_return(body: Node | None, name: str) -> bool:
    if body is None:
        return False
    return any(
        isinstance(node, ReturnStatement) and _is_recursive_call(node.argument, name)
        for node in iter_nodes(body)
    )


def analyze_recursion(function: Node, index: NodeIndex | None = None) -> RecursionAnalysis:
    name = function_name(function, index)
    body = function.body
    if not contains(body, lambda n: _is_recursive_call(n, name)):
        return RecursionAnalysis(name=name, recursive=False)

    unmodified = False
    direct_return = False
    if name is not None:
        unmodified = _passes_own_parameters(body, name, function_params(function))
        direct_return = _has_direct_recursive_return(body, name)

    return RecursionAnalysis(
        name=name,
        recursive=True,
        unmodified_parameters=unmodified,
        missing_base_case=not _has_base_case(function, name),
        missing_depth_guard=not _references_depth_guard(body),
        direct_recursive_return=direct_return,
    )


class InfiniteRecursionMatcher(PatternMatcher):
    def match(self, node: Node, context: MatchContext) -> bool:
        if not is_function(node):
            return False
        return analyze_recursion(node, context.node_index).at_risk

    def details(self, node: Node, context: MatchContext) -> MatchDetails:
        analysis = analyze_recursion(node, context.node_index)
        risk = analysis.risk_type
        return MatchDetails(
            complexity=_RISK_COMPLEXITY.get(risk, 7),
            impact=f"Function '{analysis.name or 'anonymous'}' {risk} - risk of stack overflow",
            suggestion=_RISK_SUGGESTIONS.get(risk, "Review recursion logic to prevent infinite loops"),
            metadata={"risk": risk},
        )


def rule() -> Rule:
    return Rule(
        id=RULE_ID,
        name="Infinite Recursion Risks",
        description="Detects recursive functions without a base case, depth guard or progressing arguments",
        category=PatternCategory.PERFORMANCE,
        severity=Severity.CRITICAL,
        languages=JS_LANGUAGES,
        matcher=InfiniteRecursionMatcher(),
    )
