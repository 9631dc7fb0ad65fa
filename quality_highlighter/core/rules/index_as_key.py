"""
Index as Key Rule — Detects React list items keyed by their array index.
"""

from __future__ import annotations

from quality_highlighter.core.matcher import MatchContext, PatternMatcher
from quality_highlighter.core.vocabulary import INDEX_KEY_NAMES
from quality_highlighter.models.rule_models import (
    REACT_LANGUAGES,
    MatchDetails,
    PatternCategory,
    Rule,
    Severity,
)
from quality_highlighter.models.syntax import (
    Identifier,
    JSXAttribute,
    JSXExpressionContainer,
    Node,
)

RULE_ID = "index-as-key"


def _is_react_file(context: MatchContext) -> bool:
    return context.language in REACT_LANGUAGES or context.file_path.endswith((".jsx", ".tsx"))


class IndexAsKeyMatcher(PatternMatcher):
    def match(self, node: Node, context: MatchContext) -> bool:
        if not _is_react_file(context):
            return False
        if not isinstance(node, JSXAttribute) or node.name != "key":
            return False
        value = node.value
        return (
            isinstance(value, JSXExpressionContainer)
            and isinstance(value.expression, Identifier)
            and value.expression.name in INDEX_KEY_NAMES
        )

    def details(self, node: Node, context: MatchContext) -> MatchDetails:
        return MatchDetails(
            complexity=2,
            impact="State can stick to the wrong item when the list is reordered or filtered",
            suggestion="Use a stable unique identifier such as item.id as the key",
        )


def rule() -> Rule:
    return Rule(
        id=RULE_ID,
        name="Index as Key",
        description="Detects React list rendering using array index as key",
        category=PatternCategory.MAINTAINABILITY,
        severity=Severity.WARNING,
        languages=REACT_LANGUAGES,
        matcher=IndexAsKeyMatcher(),
    )
