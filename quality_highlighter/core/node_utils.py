"""
Node helpers — small structural queries shared by the rules.
"""

from __future__ import annotations

from quality_highlighter.core.walker import NodeIndex, iter_child_nodes
from quality_highlighter.models.syntax import (
    FUNCTION_TYPES,
    LOOP_TYPES,
    AssignmentExpression,
    AssignmentPattern,
    CallExpression,
    FunctionDeclaration,
    Identifier,
    Literal,
    MemberExpression,
    MethodDefinition,
    Node,
    Property,
    ThisExpression,
    VariableDeclarator,
)


def is_loop(node: Node | None) -> bool:
    return node is not None and node.type in LOOP_TYPES


def loop_body(node: Node) -> Node | None:
    return getattr(node, "body", None) if is_loop(node) else None


def is_function(node: Node | None) -> bool:
    return node is not None and node.type in FUNCTION_TYPES


def key_name(key: Node | None) -> str | None:
    """Name of a property/method key (identifier or string literal)."""
    if isinstance(key, Identifier):
        return key.name
    if isinstance(key, Literal) and isinstance(key.value, str):
        return key.value
    return None


def method_name(node: Node) -> str | None:
    """Called name of a call: ``foo()`` -> foo, ``a.b.foo()`` -> foo."""
    if not isinstance(node, CallExpression):
        return None
    callee = node.callee
    if isinstance(callee, Identifier):
        return callee.name
    if isinstance(callee, MemberExpression):
        return member_property_name(callee)
    return None


def member_property_name(member: MemberExpression) -> str | None:
    if not member.computed:
        return key_name(member.property)
    if isinstance(member.property, Literal) and isinstance(member.property.value, str):
        return member.property.value
    return None


def property_path(node: Node) -> str:
    """Dotted path of a member chain, e.g. ``this.user.profile``.

    Computed segments are skipped; the chain stops at the first base that
    is neither an identifier nor ``this``.
    """
    parts: list[str] = []
    current = node
    while isinstance(current, MemberExpression):
        if not current.computed and isinstance(current.property, Identifier):
            parts.append(current.property.name)
        current = current.object
    if isinstance(current, Identifier):
        parts.append(current.name)
    elif isinstance(current, ThisExpression):
        parts.append("this")
    return ".".join(reversed(parts))


def member_depth(node: Node) -> int:
    """Number of chained member accesses: ``a.b.c.d`` -> 3."""
    depth = 0
    current = node
    while isinstance(current, MemberExpression):
        depth += 1
        current = current.object
    return depth


def function_name(node: Node, index: NodeIndex | None = None) -> str | None:
    """Name a function is declared or bound under, or None if anonymous."""
    own_id = getattr(node, "id", None)
    if isinstance(own_id, Identifier):
        return own_id.name
    if index is None:
        return None

    parent = index.parent(node)
    if isinstance(parent, VariableDeclarator) and parent.init is node:
        return parent.id.name if isinstance(parent.id, Identifier) else None
    if isinstance(parent, AssignmentExpression) and parent.right is node:
        if isinstance(parent.left, Identifier):
            return parent.left.name
        if isinstance(parent.left, MemberExpression):
            return member_property_name(parent.left)
    if isinstance(parent, (Property, MethodDefinition)) and parent.value is node:
        return key_name(parent.key)
    if isinstance(parent, AssignmentPattern) and parent.right is node:
        return parent.left.name if isinstance(parent.left, Identifier) else None
    return None


def function_params(node: Node) -> list[str]:
    """Names of plain identifier parameters, in order."""
    names = []
    for param in getattr(node, "params", []):
        if isinstance(param, Identifier):
            names.append(param.name)
        elif isinstance(param, AssignmentPattern) and isinstance(param.left, Identifier):
            names.append(param.left.name)
    return names


def nearest_function(node: Node, index: NodeIndex | None) -> Node | None:
    if index is None:
        return None
    for ancestor in index.ancestors(node):
        if is_function(ancestor):
            return ancestor
    return None


def iter_own_scope(root: Node):
    """Pre-order nodes under ``root`` that do not enter nested functions."""
    stack = list(reversed(list(iter_child_nodes(root))))
    while stack:
        node = stack.pop()
        yield node
        if is_function(node):
            continue
        stack.extend(reversed(list(iter_child_nodes(node))))


def is_named_function_declaration(node: Node) -> bool:
    return isinstance(node, FunctionDeclaration) and isinstance(node.id, Identifier)
