"""
Tests for the FastAPI dependencies — engine configuration from settings.
"""

import pytest

from quality_highlighter.api.dependencies import get_engine
from quality_highlighter.config import Settings, settings


@pytest.fixture
def fresh_engine():
    get_engine.cache_clear()
    yield get_engine
    get_engine.cache_clear()


def test_default_engine_has_every_rule_enabled(fresh_engine):
    engine = fresh_engine()
    assert len(engine) == 14
    assert len(engine.enabled_rules()) == 14
    assert fresh_engine() is engine


def test_disabled_rules_setting(fresh_engine, monkeypatch):
    monkeypatch.setattr(settings, "disabled_rules", ["function-too-long", "not-a-rule"])
    engine = fresh_engine()
    assert engine.get_rule("function-too-long").enabled is False
    assert len(engine.enabled_rules()) == 13


def test_enabled_categories_setting(fresh_engine, monkeypatch):
    monkeypatch.setattr(settings, "enabled_categories", ["security"])
    engine = fresh_engine()
    assert [rule.id for rule in engine.enabled_rules()] == ["eval-usage"]


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("ANALYSIS_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("DISABLED_RULES", '["eval-usage"]')
    loaded = Settings()
    assert loaded.analysis_timeout_seconds == 2.5
    assert loaded.disabled_rules == ["eval-usage"]
    assert loaded.audit_enabled is True
