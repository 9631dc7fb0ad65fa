"""
Matcher contract — what every rule plugs into the pattern engine.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

from quality_highlighter.core.walker import NodeIndex
from quality_highlighter.models.syntax import Node

if TYPE_CHECKING:
    from quality_highlighter.models.rule_models import Language, MatchDetails


@dataclass(frozen=True)
class MatchContext:
    """Per-file information handed to matchers. Never mutated by a matcher."""

    file_path: str
    language: Language
    source: str
    line: int = 1
    column: int = 0
    node_index: NodeIndex | None = None


class PatternMatcher(ABC):
    """Node predicate plus an optional explanation for positive matches."""

    @abstractmethod
    def match(self, node: Node, context: MatchContext) -> bool:
        """Return True if ``node`` exhibits the anti-pattern."""

    def details(self, node: Node, context: MatchContext) -> MatchDetails | None:
        return None
