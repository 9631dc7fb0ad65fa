"""
Tree Walker — Generic depth-first, pre-order traversal of syntax nodes.

The walker knows nothing about node semantics: a child is any dataclass
field holding a Node or a list of Nodes. Traversal uses an explicit stack,
so deeply nested input cannot hit the interpreter recursion limit.
"""

from __future__ import annotations

from dataclasses import fields
from typing import Callable, Iterator

from quality_highlighter.models.syntax import Node

_POSITION_FIELDS = frozenset({"start", "end", "loc"})


def iter_child_nodes(node: Node) -> Iterator[Node]:
    """Yield direct children in field order, skipping primitives and None."""
    for f in fields(node):
        if f.name in _POSITION_FIELDS:
            continue
        value = getattr(node, f.name)
        if isinstance(value, Node):
            yield value
        elif isinstance(value, list):
            for item in value:
                if isinstance(item, Node):
                    yield item


def iter_nodes(root: Node) -> Iterator[Node]:
    """Yield every node under ``root`` (inclusive) exactly once, pre-order."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        children = list(iter_child_nodes(node))
        stack.extend(reversed(children))


def iter_with_parents(root: Node) -> Iterator[tuple[Node, Node | None]]:
    """Pre-order traversal yielding ``(node, parent)`` pairs."""
    stack: list[tuple[Node, Node | None]] = [(root, None)]
    while stack:
        node, parent = stack.pop()
        yield node, parent
        children = list(iter_child_nodes(node))
        stack.extend((child, node) for child in reversed(children))


def walk(root: Node, visitor: Callable[[Node], None]) -> None:
    """Invoke ``visitor`` on every node of the tree, pre-order."""
    for node in iter_nodes(root):
        visitor(node)


def find_all(root: Node, predicate: Callable[[Node], bool]) -> list[Node]:
    return [node for node in iter_nodes(root) if predicate(node)]


def contains(root: Node | None, predicate: Callable[[Node], bool]) -> bool:
    """True if any node under ``root`` (inclusive) satisfies ``predicate``."""
    if root is None:
        return False
    return any(predicate(node) for node in iter_nodes(root))


class NodeIndex:
    """Read-only parent links for a tree, filled during a single walk."""

    def __init__(self) -> None:
        self._parents: dict[int, Node | None] = {}

    @classmethod
    def build(cls, root: Node) -> NodeIndex:
        index = cls()
        for node, parent in iter_with_parents(root):
            index.add(node, parent)
        return index

    def add(self, node: Node, parent: Node | None) -> None:
        self._parents[id(node)] = parent

    def __contains__(self, node: Node) -> bool:
        return id(node) in self._parents

    def parent(self, node: Node) -> Node | None:
        return self._parents.get(id(node))

    def ancestors(self, node: Node) -> Iterator[Node]:
        """Yield parents from the nearest outward."""
        current = self._parents.get(id(node))
        while current is not None:
            yield current
            current = self._parents.get(id(current))
