"""
Memory Leaks Rule — Detects subscriptions, timers and DOM references that
are likely never released.

  * event subscriptions inside a function or component with no matching
    cleanup call anywhere in the file;
  * timers whose handle is discarded, or whose cancel call never appears;
  * DOM query results captured in a variable inside a closure.

"Cleanup exists" is a whole-file substring search, not a proof that the
cleanup runs on every exit path.
"""

from __future__ import annotations

from quality_highlighter.core.matcher import MatchContext, PatternMatcher
from quality_highlighter.core.node_utils import method_name, nearest_function
from quality_highlighter.core.vocabulary import (
    CLOSURE_HINTS,
    COMPONENT_HINTS,
    EVENT_CLEANUP_PAIRS,
    RETAINED_DOM_QUERY_METHODS,
    TIMER_CLEANUP_PAIRS,
)
from quality_highlighter.models.rule_models import (
    JS_LANGUAGES,
    MatchDetails,
    PatternCategory,
    Rule,
    Severity,
)
from quality_highlighter.models.syntax import (
    AssignmentExpression,
    CallExpression,
    Node,
    VariableDeclarator,
)

RULE_ID = "memory-leaks"

EVENT_LISTENER = "Event Listener"
TIMER = "Timer"
DOM_REFERENCE = "DOM Reference"

_SUGGESTIONS = {
    EVENT_LISTENER: "Remove event listeners in cleanup functions or component unmount",
    TIMER: "Keep the timer handle and clear it when the component or task is torn down",
    DOM_REFERENCE: "Avoid holding DOM references in closures; query them when needed or null them out",
}


def _in_function(node: Node, context: MatchContext, hints: tuple[str, ...]) -> bool:
    index = context.node_index
    if index is not None and node in index:
        return nearest_function(node, index) is not None
    before = context.source[:node.start]
    return any(hint in before for hint in hints)


def _is_stored(node: Node, context: MatchContext) -> bool:
    index = context.node_index
    if index is not None and node in index:
        parent = index.parent(node)
        if isinstance(parent, VariableDeclarator):
            return parent.init is node
        if isinstance(parent, AssignmentExpression):
            return parent.right is node
        return False
    before = context.source[:node.start].rstrip()
    return before.endswith("=") and not before.endswith(("==", "!=", "<=", ">="))


def _event_leak(node: Node, context: MatchContext) -> bool:
    name = method_name(node)
    if name not in EVENT_CLEANUP_PAIRS:
        return False
    if not _in_function(node, context, COMPONENT_HINTS):
        return False
    return EVENT_CLEANUP_PAIRS[name] not in context.source


def _timer_leak(node: Node, context: MatchContext) -> bool:
    name = method_name(node)
    if name not in TIMER_CLEANUP_PAIRS:
        return False
    if not _is_stored(node, context):
        return True
    return TIMER_CLEANUP_PAIRS[name] not in context.source


def _dom_reference_leak(node: Node, context: MatchContext) -> bool:
    if not isinstance(node, VariableDeclarator) or node.init is None:
        return False
    if method_name(node.init) not in RETAINED_DOM_QUERY_METHODS:
        return False
    return _in_function(node, context, CLOSURE_HINTS)


def leak_type(node: Node, context: MatchContext) -> str | None:
    if isinstance(node, CallExpression):
        if _event_leak(node, context):
            return EVENT_LISTENER
        if _timer_leak(node, context):
            return TIMER
        return None
    if _dom_reference_leak(node, context):
        return DOM_REFERENCE
    return None


class MemoryLeaksMatcher(PatternMatcher):
    def match(self, node: Node, context: MatchContext) -> bool:
        return leak_type(node, context) is not None

    def details(self, node: Node, context: MatchContext) -> MatchDetails:
        kind = leak_type(node, context) or EVENT_LISTENER
        return MatchDetails(
            complexity=1,
            impact=f"{kind} can cause memory leaks if not properly cleaned up",
            suggestion=_SUGGESTIONS[kind],
            metadata={"leak_type": kind},
        )


def rule() -> Rule:
    return Rule(
        id=RULE_ID,
        name="Memory Leaks",
        description="Detects event listeners, timers and DOM references that are never released",
        category=PatternCategory.PERFORMANCE,
        severity=Severity.CRITICAL,
        languages=JS_LANGUAGES,
        matcher=MemoryLeaksMatcher(),
    )
