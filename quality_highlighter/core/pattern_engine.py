"""
Pattern Engine — Rule registry and single-pass detection.

Rules are indexed by id, by language, by category and by (language,
category), so selecting the applicable set for a file never scans the whole
registry. ``detect`` walks the tree once and tests every applicable rule's
matcher at every node, building the parent index as it goes.

The engine is an ordinary value: callers construct one, register rules and
pass it around. Nothing here is process-global.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Iterable

from quality_highlighter.core.matcher import MatchContext
from quality_highlighter.core.rules import (
    blocking_sync_operations,
    dom_queries_in_loops,
    eval_usage,
    expensive_operations_in_loops,
    function_too_long,
    index_as_key,
    inefficient_object_access,
    infinite_recursion,
    memory_leaks,
    multiple_array_iterations,
    nested_loops,
    repeated_regex,
    string_concatenation,
    synchronous_xhr,
)
from quality_highlighter.core.walker import NodeIndex, iter_with_parents
from quality_highlighter.models.rule_models import (
    Language,
    PatternCategory,
    PatternMatch,
    Rule,
    Severity,
    SourceRange,
)
from quality_highlighter.models.syntax import Node

logger = logging.getLogger("quality_highlighter.engine")

# Registry of built-in rule factories, in registration order
RULE_FACTORIES: dict[str, Callable[[], Rule]] = {
    nested_loops.RULE_ID: nested_loops.rule,
    string_concatenation.RULE_ID: string_concatenation.rule,
    dom_queries_in_loops.RULE_ID: dom_queries_in_loops.rule,
    inefficient_object_access.RULE_ID: inefficient_object_access.rule,
    multiple_array_iterations.RULE_ID: multiple_array_iterations.rule,
    infinite_recursion.RULE_ID: infinite_recursion.rule,
    memory_leaks.RULE_ID: memory_leaks.rule,
    expensive_operations_in_loops.RULE_ID: expensive_operations_in_loops.rule,
    blocking_sync_operations.RULE_ID: blocking_sync_operations.rule,
    synchronous_xhr.RULE_ID: synchronous_xhr.rule,
    repeated_regex.RULE_ID: repeated_regex.rule,
    function_too_long.RULE_ID: function_too_long.rule,
    index_as_key.RULE_ID: index_as_key.rule,
    eval_usage.RULE_ID: eval_usage.rule,
}


def default_rules() -> list[Rule]:
    """Fresh instances of every built-in rule."""
    return [factory() for factory in RULE_FACTORIES.values()]


class PatternEngine:
    """
    Rule registry plus detector.

    Registration is expected between analyses, never during ``detect``.
    """

    def __init__(self, rules: Iterable[Rule] | None = None) -> None:
        self._rules: dict[str, Rule] = {}
        self._order: dict[str, int] = {}
        self._sequence = 0
        self._by_language: dict[Language, set[str]] = {}
        self._by_category: dict[PatternCategory, set[str]] = {}
        self._by_language_category: dict[tuple[Language, PatternCategory], set[str]] = {}
        if rules is not None:
            self.register_rules(rules)

    @classmethod
    def with_default_rules(cls) -> PatternEngine:
        return cls(default_rules())

    # ── registry ──

    def register(self, rule: Rule) -> None:
        """Insert or replace a rule; the last registration of an id wins."""
        previous = self._rules.get(rule.id)
        if previous is not None:
            self._unindex(previous)
            logger.debug(f"Replacing rule '{rule.id}'")
        else:
            self._order[rule.id] = self._sequence
            self._sequence += 1

        self._rules[rule.id] = rule
        self._by_category.setdefault(rule.category, set()).add(rule.id)
        for language in rule.languages:
            self._by_language.setdefault(language, set()).add(rule.id)
            self._by_language_category.setdefault((language, rule.category), set()).add(rule.id)

    def register_rules(self, rules: Iterable[Rule]) -> None:
        for rule in rules:
            self.register(rule)

    def _unindex(self, rule: Rule) -> None:
        self._by_category.get(rule.category, set()).discard(rule.id)
        for language in rule.languages:
            self._by_language.get(language, set()).discard(rule.id)
            self._by_language_category.get((language, rule.category), set()).discard(rule.id)

    def _ordered(self, rule_ids: Iterable[str]) -> list[Rule]:
        return [self._rules[rule_id] for rule_id in sorted(rule_ids, key=self._order.__getitem__)]

    def get_rule(self, rule_id: str) -> Rule | None:
        return self._rules.get(rule_id)

    def all_rules(self) -> list[Rule]:
        return self._ordered(self._rules)

    def enabled_rules(self) -> list[Rule]:
        return [rule for rule in self.all_rules() if rule.enabled]

    def rules_for_language(self, language: Language) -> list[Rule]:
        return self._ordered(self._by_language.get(Language(language), set()))

    def rules_for_category(self, category: PatternCategory) -> list[Rule]:
        return self._ordered(self._by_category.get(PatternCategory(category), set()))

    def rules_for(
        self,
        language: Language,
        categories: Iterable[PatternCategory] | None = None,
    ) -> list[Rule]:
        """Enabled rules for a language, limited to ``categories`` if given.

        An empty or omitted category list means every category.
        """
        language = Language(language)
        wanted = [PatternCategory(c) for c in categories or ()]
        if wanted:
            rule_ids: set[str] = set()
            for category in wanted:
                rule_ids |= self._by_language_category.get((language, category), set())
        else:
            rule_ids = self._by_language.get(language, set())
        return [rule for rule in self._ordered(rule_ids) if rule.enabled]

    def set_enabled(self, rule_id: str, enabled: bool) -> bool:
        """Toggle a rule. Returns False if no rule has that id."""
        rule = self._rules.get(rule_id)
        if rule is None:
            return False
        rule.enabled = enabled
        return True

    def set_category_enabled(self, category: PatternCategory, enabled: bool) -> int:
        """Toggle every rule in a category; returns how many rules it touched."""
        rule_ids = self._by_category.get(PatternCategory(category), set())
        for rule_id in rule_ids:
            self._rules[rule_id].enabled = enabled
        return len(rule_ids)

    def statistics(self) -> dict:
        rules = self.all_rules()
        by_language = {
            language.value: len(rule_ids)
            for language, rule_ids in self._by_language.items()
            if rule_ids
        }
        by_severity: dict[str, int] = {severity.value: 0 for severity in Severity}
        by_category: dict[str, int] = {category.value: 0 for category in PatternCategory}
        for rule in rules:
            by_severity[rule.severity.value] += 1
            by_category[rule.category.value] += 1
        return {
            "total_rules": len(rules),
            "enabled_rules": sum(1 for rule in rules if rule.enabled),
            "by_language": by_language,
            "by_severity": by_severity,
            "by_category": by_category,
        }

    def clear(self) -> None:
        self._rules.clear()
        self._order.clear()
        self._by_language.clear()
        self._by_category.clear()
        self._by_language_category.clear()

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, rule_id: str) -> bool:
        return rule_id in self._rules

    # ── detection ──

    def detect(
        self,
        tree: Node,
        context: MatchContext,
        categories: Iterable[PatternCategory] | None = None,
    ) -> list[PatternMatch]:
        """Run every applicable rule against every node of ``tree``.

        Matches are returned in traversal order, then registration order
        of the rules. A matcher that raises is skipped for that node only.
        """
        rules = self.rules_for(context.language, categories)
        if not rules:
            return []

        index = NodeIndex()
        base_context = replace(context, node_index=index)
        matches: list[PatternMatch] = []

        for node, parent in iter_with_parents(tree):
            index.add(node, parent)
            node_context = replace(
                base_context,
                line=node.loc.start.line,
                column=node.loc.start.column,
            )
            for rule in rules:
                try:
                    matched = rule.matcher.match(node, node_context)
                except Exception:
                    logger.debug(
                        f"Rule '{rule.id}' failed on {node.type} at "
                        f"{context.file_path}:{node_context.line}",
                        exc_info=True,
                    )
                    continue
                if matched:
                    matches.append(self._build_match(rule, node, node_context))

        return matches

    def _build_match(self, rule: Rule, node: Node, context: MatchContext) -> PatternMatch:
        try:
            detail = rule.matcher.details(node, context)
        except Exception:
            logger.warning(
                f"Rule '{rule.id}' matched but failed to describe {node.type} at "
                f"{context.file_path}:{context.line}",
                exc_info=True,
            )
            detail = None

        return PatternMatch(
            rule_id=rule.id,
            severity=rule.severity,
            category=rule.category,
            range=SourceRange(
                start_line=node.loc.start.line,
                start_column=node.loc.start.column,
                end_line=node.loc.end.line,
                end_column=node.loc.end.column,
                start_offset=node.start,
                end_offset=node.end,
            ),
            file_path=context.file_path,
            line=context.line,
            column=context.column,
            detail=detail,
            node=node,
        )
