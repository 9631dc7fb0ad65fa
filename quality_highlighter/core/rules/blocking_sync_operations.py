"""
Blocking Sync Operations Rule — Detects synchronous Node.js APIs
(``fs.readFileSync``, ``execSync``, ``crypto.pbkdf2Sync`` ...).

Each call blocks the event loop for its whole duration, stalling every
other request the process is serving.
"""

from __future__ import annotations

from quality_highlighter.core.matcher import MatchContext, PatternMatcher
from quality_highlighter.core.node_utils import member_property_name
from quality_highlighter.core.vocabulary import (
    DEFAULT_SYNC_BLOCK_MS,
    SYNC_ALTERNATIVES,
    SYNC_BLOCK_ESTIMATES_MS,
    SYNC_MODULE_MEMBERS,
    SYNC_OPERATIONS,
)
from quality_highlighter.models.rule_models import (
    JS_LANGUAGES,
    MatchDetails,
    PatternCategory,
    Rule,
    Severity,
)
from quality_highlighter.models.syntax import CallExpression, Identifier, MemberExpression, Node

RULE_ID = "blocking-sync-operations"


def sync_operation_name(node: Node) -> str | None:
    """Name of the blocking operation a call invokes, or None."""
    if not isinstance(node, CallExpression):
        return None
    callee = node.callee
    if isinstance(callee, Identifier):
        return callee.name if callee.name in SYNC_OPERATIONS else None
    if isinstance(callee, MemberExpression) and isinstance(callee.object, Identifier):
        name = member_property_name(callee)
        members = SYNC_MODULE_MEMBERS.get(callee.object.name, frozenset())
        return name if name in members else None
    return None


class BlockingSyncOperationsMatcher(PatternMatcher):
    def match(self, node: Node, context: MatchContext) -> bool:
        return sync_operation_name(node) is not None

    def details(self, node: Node, context: MatchContext) -> MatchDetails:
        name = sync_operation_name(node) or ""
        blocking_ms = SYNC_BLOCK_ESTIMATES_MS.get(name, DEFAULT_SYNC_BLOCK_MS)
        alternative = SYNC_ALTERNATIVES.get(name, "the asynchronous (promise-based) variant")
        return MatchDetails(
            complexity=max(1, min(blocking_ms // 50, 10)),
            impact=f"'{name}' blocks the event loop for ~{blocking_ms}ms per call",
            suggestion=f"Use {alternative} instead",
            metadata={"operation": name, "estimated_block_ms": blocking_ms},
        )


def rule() -> Rule:
    return Rule(
        id=RULE_ID,
        name="Blocking Sync Operations",
        description="Detects synchronous file system, process and crypto calls that block the event loop",
        category=PatternCategory.PERFORMANCE,
        severity=Severity.CRITICAL,
        languages=JS_LANGUAGES,
        matcher=BlockingSyncOperationsMatcher(),
    )
