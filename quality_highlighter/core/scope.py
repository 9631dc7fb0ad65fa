"""
Loop containment — "is this node lexically inside a loop?"

Two answers to the same question:

  * structural: walk the parent links collected by the engine's single pass
    (used whenever the context carries a NodeIndex that knows the node);
  * textual: brace counting over the source window before the node, used
    for trees handed to a matcher without an index.

Both honor the named-helper refinement: a node inside a named function
declaration is judged only by loops inside that function, so a helper
defined between two loop bodies is not reported as loop-contained.
"""

from __future__ import annotations

import re

from quality_highlighter.core.matcher import MatchContext
from quality_highlighter.core.node_utils import (
    is_function,
    is_loop,
    is_named_function_declaration,
    method_name,
)
from quality_highlighter.core.vocabulary import ITERATION_METHODS, LOOP_TOKENS
from quality_highlighter.core.walker import NodeIndex
from quality_highlighter.models.syntax import CallExpression, Node

_FUNCTION_HEADER = re.compile(r"\bfunction\s+(\w+)\s*\(")


def is_loop_contained(node: Node, context: MatchContext, helpers_are_boundaries: bool = False) -> bool:
    """Loop containment for ``node``, structural when parent links exist."""
    index = context.node_index
    if index is not None and node in index:
        return is_inside_loop_structural(node, index, helpers_are_boundaries)
    return is_inside_loop_textual(context.source, node.start, helpers_are_boundaries)


def is_inside_loop_structural(node: Node, index: NodeIndex, helpers_are_boundaries: bool = False) -> bool:
    child = node
    for ancestor in index.ancestors(node):
        if is_loop(ancestor) and getattr(ancestor, "body", None) is child:
            return True
        if is_function(ancestor):
            if helpers_are_boundaries and is_named_function_declaration(ancestor):
                return False
            if _is_iteration_callback(ancestor, index):
                return True
        child = ancestor
    return False


def _is_iteration_callback(function: Node, index: NodeIndex) -> bool:
    parent = index.parent(function)
    return (
        isinstance(parent, CallExpression)
        and any(arg is function for arg in parent.arguments)
        and method_name(parent) in ITERATION_METHODS
    )


def is_inside_loop_textual(source: str, offset: int, helpers_are_boundaries: bool = False) -> bool:
    """Brace-counting heuristic over ``source[:offset]``.

    For each loop token, its last occurrence before ``offset`` opens a
    window; more ``{`` than ``}`` in that window means the loop body is
    still open at ``offset``.
    """
    if offset <= 0:
        return False
    window_floor = 0
    if helpers_are_boundaries:
        helper = enclosing_named_function(source, offset)
        if helper is not None:
            window_floor = helper[0]

    before = source[:offset]
    for token in LOOP_TOKENS:
        position = before.rfind(token)
        if position == -1 or position < window_floor:
            continue
        between = source[position:offset]
        if between.count("{") > between.count("}"):
            return True
    return False


def enclosing_named_function(source: str, offset: int) -> tuple[int, int] | None:
    """(header start, closing brace) of the last named function header before
    ``offset``, if ``offset`` falls inside that function's braces."""
    headers = list(_FUNCTION_HEADER.finditer(source, 0, offset))
    if not headers:
        return None
    start = headers[-1].start()
    end = _closing_brace(source, start)
    if offset > start and (end == -1 or offset < end):
        return start, end
    return None


def _closing_brace(source: str, start: int) -> int:
    depth = 0
    opened = False
    for position in range(start, len(source)):
        char = source[position]
        if char == "{":
            opened = True
            depth += 1
        elif char == "}" and opened:
            depth -= 1
            if depth == 0:
                return position
    return -1
