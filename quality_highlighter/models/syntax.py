"""
Syntax Tree Models — Typed ESTree-shaped nodes consumed by the pattern engine.

Every node is a plain dataclass whose ``type`` is its ESTree tag. Child
nodes live in ordinary fields (a node, a list of nodes, or None), which is
all the tree walker relies on. Offsets are character offsets into the
source text; lines are 1-based and columns 0-based.

``from_estree`` converts ESTree / Babel JSON (as produced by an editor
integration) into this model.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Position:
    line: int = 1
    column: int = 0


@dataclass(frozen=True)
class Location:
    start: Position = Position()
    end: Position = Position()


@dataclass(eq=False, kw_only=True)
class Node:
    """Base syntax node. Identity-compared; carries no parent pointer."""

    start: int = 0
    end: int = 0
    loc: Location = field(default_factory=Location)

    @property
    def type(self) -> str:
        return type(self).__name__

    def text(self, source: str) -> str:
        """Return the slice of ``source`` this node spans."""
        return source[self.start:self.end]


# ── Statements ──


@dataclass(eq=False, kw_only=True)
class Program(Node):
    body: list[Node] = field(default_factory=list)


@dataclass(eq=False, kw_only=True)
class ExpressionStatement(Node):
    expression: Node | None = None


@dataclass(eq=False, kw_only=True)
class BlockStatement(Node):
    body: list[Node] = field(default_factory=list)


@dataclass(eq=False, kw_only=True)
class VariableDeclaration(Node):
    declarations: list[Node] = field(default_factory=list)
    kind: str = "var"


@dataclass(eq=False, kw_only=True)
class VariableDeclarator(Node):
    id: Node | None = None
    init: Node | None = None


@dataclass(eq=False, kw_only=True)
class ForStatement(Node):
    init: Node | None = None
    test: Node | None = None
    update: Node | None = None
    body: Node | None = None


@dataclass(eq=False, kw_only=True)
class ForInStatement(Node):
    left: Node | None = None
    right: Node | None = None
    body: Node | None = None


@dataclass(eq=False, kw_only=True)
class ForOfStatement(Node):
    left: Node | None = None
    right: Node | None = None
    body: Node | None = None


@dataclass(eq=False, kw_only=True)
class WhileStatement(Node):
    test: Node | None = None
    body: Node | None = None


@dataclass(eq=False, kw_only=True)
class DoWhileStatement(Node):
    body: Node | None = None
    test: Node | None = None


@dataclass(eq=False, kw_only=True)
class IfStatement(Node):
    test: Node | None = None
    consequent: Node | None = None
    alternate: Node | None = None


@dataclass(eq=False, kw_only=True)
class ReturnStatement(Node):
    argument: Node | None = None


# ── Functions and classes ──


@dataclass(eq=False, kw_only=True)
class FunctionDeclaration(Node):
    id: Node | None = None
    params: list[Node] = field(default_factory=list)
    body: Node | None = None
    is_async: bool = False
    generator: bool = False


@dataclass(eq=False, kw_only=True)
class FunctionExpression(Node):
    id: Node | None = None
    params: list[Node] = field(default_factory=list)
    body: Node | None = None
    is_async: bool = False
    generator: bool = False


@dataclass(eq=False, kw_only=True)
class ArrowFunctionExpression(Node):
    params: list[Node] = field(default_factory=list)
    body: Node | None = None
    is_async: bool = False
    expression: bool = False


@dataclass(eq=False, kw_only=True)
class MethodDefinition(Node):
    key: Node | None = None
    value: Node | None = None
    kind: str = "method"
    computed: bool = False
    static: bool = False


@dataclass(eq=False, kw_only=True)
class ClassDeclaration(Node):
    id: Node | None = None
    superclass: Node | None = None
    body: list[Node] = field(default_factory=list)


# ── Expressions ──


@dataclass(eq=False, kw_only=True)
class CallExpression(Node):
    callee: Node | None = None
    arguments: list[Node] = field(default_factory=list)
    optional: bool = False


@dataclass(eq=False, kw_only=True)
class NewExpression(Node):
    callee: Node | None = None
    arguments: list[Node] = field(default_factory=list)


@dataclass(eq=False, kw_only=True)
class MemberExpression(Node):
    object: Node | None = None
    property: Node | None = None
    computed: bool = False
    optional: bool = False


@dataclass(eq=False, kw_only=True)
class Identifier(Node):
    name: str = ""


@dataclass(eq=False, kw_only=True)
class Literal(Node):
    value: Any = None
    raw: str = ""
    regex: str | None = None


@dataclass(eq=False, kw_only=True)
class TemplateLiteral(Node):
    quasis: list[str] = field(default_factory=list)
    expressions: list[Node] = field(default_factory=list)


@dataclass(eq=False, kw_only=True)
class AssignmentExpression(Node):
    operator: str = "="
    left: Node | None = None
    right: Node | None = None


@dataclass(eq=False, kw_only=True)
class BinaryExpression(Node):
    operator: str = ""
    left: Node | None = None
    right: Node | None = None


@dataclass(eq=False, kw_only=True)
class LogicalExpression(Node):
    operator: str = ""
    left: Node | None = None
    right: Node | None = None


@dataclass(eq=False, kw_only=True)
class UnaryExpression(Node):
    operator: str = ""
    argument: Node | None = None
    prefix: bool = True


@dataclass(eq=False, kw_only=True)
class UpdateExpression(Node):
    operator: str = ""
    argument: Node | None = None
    prefix: bool = False


@dataclass(eq=False, kw_only=True)
class ConditionalExpression(Node):
    test: Node | None = None
    consequent: Node | None = None
    alternate: Node | None = None


@dataclass(eq=False, kw_only=True)
class ObjectExpression(Node):
    properties: list[Node] = field(default_factory=list)


@dataclass(eq=False, kw_only=True)
class Property(Node):
    key: Node | None = None
    value: Node | None = None
    computed: bool = False
    shorthand: bool = False
    kind: str = "init"


@dataclass(eq=False, kw_only=True)
class ArrayExpression(Node):
    elements: list[Node] = field(default_factory=list)


@dataclass(eq=False, kw_only=True)
class SpreadElement(Node):
    argument: Node | None = None


@dataclass(eq=False, kw_only=True)
class AwaitExpression(Node):
    argument: Node | None = None


@dataclass(eq=False, kw_only=True)
class SequenceExpression(Node):
    expressions: list[Node] = field(default_factory=list)


@dataclass(eq=False, kw_only=True)
class ThisExpression(Node):
    pass


@dataclass(eq=False, kw_only=True)
class AssignmentPattern(Node):
    left: Node | None = None
    right: Node | None = None


# ── JSX ──


@dataclass(eq=False, kw_only=True)
class JSXElement(Node):
    name: str = ""
    attributes: list[Node] = field(default_factory=list)
    children: list[Node] = field(default_factory=list)


@dataclass(eq=False, kw_only=True)
class JSXAttribute(Node):
    name: str = ""
    value: Node | None = None


@dataclass(eq=False, kw_only=True)
class JSXExpressionContainer(Node):
    expression: Node | None = None


# ── Fallback ──


@dataclass(eq=False, kw_only=True)
class GenericNode(Node):
    """Any construct without a dedicated class. ``type`` is the raw kind."""

    kind: str = "Unknown"
    children: list[Node] = field(default_factory=list)

    @property
    def type(self) -> str:
        return self.kind


NODE_CLASSES: dict[str, type[Node]] = {
    cls.__name__: cls
    for cls in (
        Program, ExpressionStatement, BlockStatement, VariableDeclaration,
        VariableDeclarator, ForStatement, ForInStatement, ForOfStatement,
        WhileStatement, DoWhileStatement, IfStatement, ReturnStatement,
        FunctionDeclaration, FunctionExpression, ArrowFunctionExpression,
        MethodDefinition, ClassDeclaration, CallExpression, NewExpression,
        MemberExpression, Identifier, Literal, TemplateLiteral,
        AssignmentExpression, BinaryExpression, LogicalExpression,
        UnaryExpression, UpdateExpression, ConditionalExpression,
        ObjectExpression, Property, ArrayExpression, SpreadElement,
        AwaitExpression, SequenceExpression, ThisExpression,
        AssignmentPattern, JSXElement, JSXAttribute, JSXExpressionContainer,
    )
}

LOOP_TYPES = frozenset({
    "ForStatement", "ForInStatement", "ForOfStatement",
    "WhileStatement", "DoWhileStatement",
})

FUNCTION_TYPES = frozenset({
    "FunctionDeclaration", "FunctionExpression", "ArrowFunctionExpression",
})


# ── ESTree / Babel JSON conversion ──

_BABEL_LITERALS = frozenset({
    "StringLiteral", "NumericLiteral", "BooleanLiteral", "NullLiteral",
    "RegExpLiteral", "BigIntLiteral", "DirectiveLiteral",
})

_TYPE_ALIASES = {
    "ClassExpression": "ClassDeclaration",
    "ObjectProperty": "Property",
    "OptionalMemberExpression": "MemberExpression",
    "OptionalCallExpression": "CallExpression",
}

_FIELD_ALIASES = {"is_async": "async", "superclass": "superClass"}

_SKIPPED = frozenset({"JSXText", "CommentBlock", "CommentLine", "EmptyStatement"})

_NON_CHILD_KEYS = frozenset({"loc", "range", "extra", "leadingComments", "trailingComments"})


def from_estree(data: dict, source: str | None = None) -> Node:
    """Convert an ESTree or Babel JSON tree into typed syntax nodes.

    Raises ValueError if ``data`` is not a node object.
    """
    if not isinstance(data, dict) or "type" not in data:
        raise ValueError("ESTree input must be an object with a 'type' key")
    if data["type"] == "File" and isinstance(data.get("program"), dict):
        data = data["program"]
    line_starts = compute_line_starts(source) if source is not None else None
    node = _EstreeConverter(line_starts).convert(data)
    if node is None:
        raise ValueError(f"ESTree root of type {data['type']!r} has no syntax content")
    return node


class _EstreeConverter:
    """Builds typed nodes from JSON objects, children before parents."""

    def __init__(self, line_starts: list[int] | None) -> None:
        self._line_starts = line_starts
        self._converted: dict[int, Node | None] = {}

    def convert(self, root: dict) -> Node | None:
        # Pre-order collection; reversed, every object follows its children
        order: list[dict] = []
        stack = [root]
        while stack:
            data = stack.pop()
            order.append(data)
            for key, value in data.items():
                if key in _NON_CHILD_KEYS:
                    continue
                if isinstance(value, dict):
                    stack.append(value)
                elif isinstance(value, list):
                    stack.extend(item for item in value if isinstance(item, dict))
        for data in reversed(order):
            self._converted[id(data)] = self._build(data)
        return self._converted[id(root)]

    def _node(self, data: Any) -> Node | None:
        return self._converted.get(id(data)) if isinstance(data, dict) else None

    def _nodes(self, items: list | None) -> list[Node]:
        converted = []
        for item in items or []:
            node = self._node(item)
            if node is not None:
                converted.append(node)
        return converted

    def _generic_children(self, data: dict) -> list[Node]:
        children: list[Node] = []
        for key, value in data.items():
            if key in _NON_CHILD_KEYS:
                continue
            if isinstance(value, dict):
                node = self._node(value)
                if node is not None:
                    children.append(node)
            elif isinstance(value, list):
                children.extend(self._nodes(value))
        return children

    def _build(self, data: dict) -> Node | None:
        if "type" not in data:
            return None
        kind = _TYPE_ALIASES.get(data["type"], data["type"])
        if kind in _SKIPPED:
            return None

        position = _position(data, self._line_starts)

        if kind in _BABEL_LITERALS or kind == "Literal":
            regex = data.get("regex")
            pattern = data.get("pattern")
            if isinstance(regex, dict):
                pattern = regex.get("pattern")
            raw = data.get("raw") or (data.get("extra") or {}).get("raw", "")
            return Literal(value=data.get("value"), raw=raw, regex=pattern, **position)

        if kind == "TemplateLiteral":
            quasis = [
                (q.get("value") or {}).get("cooked") or (q.get("value") or {}).get("raw", "")
                for q in data.get("quasis", [])
            ]
            return TemplateLiteral(
                quasis=quasis,
                expressions=self._nodes(data.get("expressions")),
                **position,
            )

        if kind in ("ClassMethod", "ObjectMethod"):
            function = FunctionExpression(
                params=self._nodes(data.get("params")),
                body=self._node(data.get("body")),
                is_async=bool(data.get("async")),
                generator=bool(data.get("generator")),
                **position,
            )
            key = self._node(data.get("key"))
            if kind == "ClassMethod":
                return MethodDefinition(
                    key=key, value=function, kind=data.get("kind", "method"),
                    computed=bool(data.get("computed")), static=bool(data.get("static")),
                    **position,
                )
            return Property(key=key, value=function, kind="init", **position)

        if kind == "ClassDeclaration":
            body = data.get("body") or {}
            members = body.get("body", []) if isinstance(body, dict) else []
            return ClassDeclaration(
                id=self._node(data.get("id")),
                superclass=self._node(data.get("superClass")),
                body=self._nodes(members),
                **position,
            )

        if kind == "ChainExpression":
            return self._node(data.get("expression"))

        if kind in ("JSXElement", "JSXFragment"):
            opening = data.get("openingElement") or {}
            return JSXElement(
                name=_jsx_name(opening.get("name")),
                attributes=self._nodes(opening.get("attributes")),
                children=self._nodes(data.get("children")),
                **position,
            )

        if kind == "JSXAttribute":
            return JSXAttribute(
                name=_jsx_name(data.get("name")),
                value=self._node(data.get("value")),
                **position,
            )

        cls = NODE_CLASSES.get(kind)
        if cls is None:
            return GenericNode(kind=kind, children=self._generic_children(data), **position)

        kwargs: dict[str, Any] = {}
        for name in cls.__dataclass_fields__:
            if name in ("start", "end", "loc"):
                continue
            raw_value = data.get(_FIELD_ALIASES.get(name, name))
            if isinstance(raw_value, dict):
                kwargs[name] = self._node(raw_value)
            elif isinstance(raw_value, list):
                kwargs[name] = self._nodes(raw_value)
            elif raw_value is not None:
                kwargs[name] = raw_value
        if kind == "ArrowFunctionExpression" and "expression" not in kwargs:
            kwargs["expression"] = not isinstance(kwargs.get("body"), BlockStatement)
        return cls(**kwargs, **position)


def _jsx_name(name: Any) -> str:
    if not isinstance(name, dict):
        return ""
    if name.get("type") == "JSXMemberExpression":
        return f"{_jsx_name(name.get('object'))}.{_jsx_name(name.get('property'))}"
    if name.get("type") == "JSXNamespacedName":
        return f"{_jsx_name(name.get('namespace'))}:{_jsx_name(name.get('name'))}"
    return name.get("name", "")


def _position(data: dict, line_starts: list[int] | None) -> dict[str, Any]:
    start, end = data.get("start"), data.get("end")
    if start is None and isinstance(data.get("range"), list):
        start, end = data["range"][0], data["range"][1]
    start = start or 0
    end = end if end is not None else start

    loc = data.get("loc")
    if isinstance(loc, dict) and "start" in loc:
        location = Location(
            Position(loc["start"].get("line", 1), loc["start"].get("column", 0)),
            Position(loc["end"].get("line", 1), loc["end"].get("column", 0)),
        )
    elif line_starts is not None:
        location = Location(offset_to_position(line_starts, start), offset_to_position(line_starts, end))
    else:
        location = Location()
    return {"start": start, "end": end, "loc": location}


def compute_line_starts(source: str) -> list[int]:
    """Character offsets at which each line of ``source`` begins."""
    starts = [0]
    for index, char in enumerate(source):
        if char == "\n":
            starts.append(index + 1)
    return starts


def offset_to_position(starts: list[int], offset: int) -> Position:
    """Map a character offset to a 1-based line / 0-based column."""
    low, high = 0, len(starts) - 1
    while low < high:
        mid = (low + high + 1) // 2
        if starts[mid] <= offset:
            low = mid
        else:
            high = mid - 1
    return Position(low + 1, offset - starts[low])
