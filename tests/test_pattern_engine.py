"""
Tests for the Pattern Engine — registry indexes, toggling, single-pass detection.
"""

import pytest
from pydantic import ValidationError

from quality_highlighter.core.matcher import MatchContext, PatternMatcher
from quality_highlighter.core.pattern_engine import RULE_FACTORIES, PatternEngine
from quality_highlighter.core.rules import eval_usage, nested_loops
from quality_highlighter.models.rule_models import Language, PatternCategory, Rule, Severity
from quality_highlighter.models.syntax import Identifier, Program


class ExplodingMatcher(PatternMatcher):
    def match(self, node, context):
        raise RuntimeError("boom")


class ProgramMatcher(PatternMatcher):
    """Matches the root only, then fails to describe it."""

    def match(self, node, context):
        return isinstance(node, Program)

    def details(self, node, context):
        raise KeyError("no details")


def _rule(rule_id, matcher, category=PatternCategory.STYLE, severity=Severity.INFO, languages=None):
    return Rule(
        id=rule_id,
        name=rule_id.title(),
        category=category,
        severity=severity,
        languages=languages if languages is not None else frozenset({Language.JAVASCRIPT}),
        matcher=matcher,
    )


def _context(code, language=Language.JAVASCRIPT):
    return MatchContext(file_path="test.js", language=language, source=code)


def test_default_rules_registered_in_order(engine):
    assert len(engine) == len(RULE_FACTORIES) == 14
    assert [rule.id for rule in engine.all_rules()] == list(RULE_FACTORIES)
    assert "nested-loops" in engine
    assert engine.get_rule("missing") is None


def test_score_impact_defaults_from_severity():
    assert nested_loops.rule().score_impact == -15
    assert _rule("r", ProgramMatcher(), severity=Severity.GOOD).score_impact == 2


def test_rule_fields_are_frozen_except_enabled():
    rule = eval_usage.rule()
    with pytest.raises(ValidationError):
        rule.name = "renamed"
    with pytest.raises(ValidationError):
        rule.severity = Severity.INFO
    rule.enabled = False
    assert rule.enabled is False


def test_rule_requires_languages():
    with pytest.raises(ValidationError):
        _rule("empty", ProgramMatcher(), languages=frozenset())


def test_rules_for_language(engine):
    js_ids = {rule.id for rule in engine.rules_for(Language.JAVASCRIPT)}
    jsx_ids = {rule.id for rule in engine.rules_for(Language.JAVASCRIPT_REACT)}
    assert "index-as-key" not in js_ids
    assert jsx_ids - js_ids == {"index-as-key"}
    assert engine.rules_for(Language.PHP) == []


def test_rules_for_categories(engine):
    security = engine.rules_for(Language.TYPESCRIPT, [PatternCategory.SECURITY])
    assert [rule.id for rule in security] == ["eval-usage"]

    both = engine.rules_for(
        Language.TYPESCRIPT, [PatternCategory.SECURITY, PatternCategory.MAINTAINABILITY]
    )
    assert [rule.id for rule in both] == ["function-too-long", "eval-usage"]
    assert len(engine.rules_for(Language.TYPESCRIPT, [])) == 13


def test_register_replaces_and_reindexes(engine):
    replacement = _rule("nested-loops", ProgramMatcher(), category=PatternCategory.STYLE)
    engine.register(replacement)

    assert len(engine) == 14
    assert engine.get_rule("nested-loops") is replacement
    assert engine.all_rules()[0] is replacement
    assert "nested-loops" not in {r.id for r in engine.rules_for_category(PatternCategory.PERFORMANCE)}
    assert [r.id for r in engine.rules_for_category(PatternCategory.STYLE)] == ["nested-loops"]


def test_registration_is_idempotent(parser):
    code = "for (;;) { for (;;) {} }"
    tree = parser.parse(code, Language.JAVASCRIPT)

    once = PatternEngine([nested_loops.rule()])
    twice = PatternEngine([nested_loops.rule(), nested_loops.rule()])
    assert len(once) == len(twice) == 1
    assert [m.range for m in once.detect(tree, _context(code))] == [
        m.range for m in twice.detect(tree, _context(code))
    ]


def test_set_enabled(engine):
    assert engine.set_enabled("eval-usage", False) is True
    assert "eval-usage" not in {rule.id for rule in engine.rules_for(Language.JAVASCRIPT)}
    assert engine.set_enabled("no-such-rule", False) is False


def test_set_category_enabled(engine):
    assert engine.set_category_enabled(PatternCategory.MAINTAINABILITY, False) == 2
    assert engine.rules_for(Language.JAVASCRIPT_REACT, [PatternCategory.MAINTAINABILITY]) == []
    assert engine.set_category_enabled(PatternCategory.STYLE, False) == 0


def test_statistics(engine):
    stats = engine.statistics()
    assert stats["total_rules"] == 14
    assert stats["enabled_rules"] == 14
    assert stats["by_severity"] == {"critical": 11, "warning": 3, "info": 0, "good": 0}
    assert stats["by_category"] == {
        "performance": 11, "security": 1, "maintainability": 2, "style": 0,
    }
    assert stats["by_language"]["javascript"] == 13
    assert stats["by_language"]["typescriptreact"] == 14

    engine.set_enabled("nested-loops", False)
    assert engine.statistics()["enabled_rules"] == 13


def test_clear(engine):
    engine.clear()
    assert len(engine) == 0
    assert engine.rules_for(Language.JAVASCRIPT) == []


def test_detect_is_deterministic(engine, parser, nested_loop_code):
    tree = parser.parse(nested_loop_code, Language.JAVASCRIPT)
    first = engine.detect(tree, _context(nested_loop_code))
    second = engine.detect(tree, _context(nested_loop_code))
    assert [(m.rule_id, m.range) for m in first] == [(m.rule_id, m.range) for m in second]


def test_matcher_fault_is_isolated(parser, nested_loop_code):
    engine = PatternEngine([_rule("exploding", ExplodingMatcher()), nested_loops.rule()])
    tree = parser.parse(nested_loop_code, Language.JAVASCRIPT)
    matches = engine.detect(tree, _context(nested_loop_code))
    assert [m.rule_id for m in matches] == ["nested-loops"]


def test_details_failure_keeps_match(parser):
    engine = PatternEngine([_rule("program", ProgramMatcher())])
    tree = parser.parse("a;", Language.JAVASCRIPT)
    matches = engine.detect(tree, _context("a;"))
    assert len(matches) == 1
    assert matches[0].detail is None


def test_detect_category_filter(engine, parser, nested_loop_code):
    tree = parser.parse(nested_loop_code, Language.JAVASCRIPT)
    assert engine.detect(tree, _context(nested_loop_code), [PatternCategory.SECURITY]) == []
    assert len(engine.detect(tree, _context(nested_loop_code), [PatternCategory.PERFORMANCE])) == 1


def test_detect_without_applicable_rules(engine):
    tree = Program(body=[Identifier(name="x")])
    assert engine.detect(tree, _context("x", language=Language.PHP)) == []


def test_match_fields(engine, parser):
    code = "\n  eval(payload);"
    tree = parser.parse(code, Language.JAVASCRIPT)
    match = engine.detect(tree, _context(code))[0]
    assert match.rule_id == "eval-usage"
    assert match.file_path == "test.js"
    assert (match.line, match.column) == (2, 2)
    assert match.range.start_offset == code.index("eval")
    assert match.range.end_offset == code.index(";")
    assert "node" not in match.model_dump()
