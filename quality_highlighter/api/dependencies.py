"""
FastAPI Dependencies — Shared singletons injected via Depends().
"""

from __future__ import annotations

import logging
from functools import lru_cache

from quality_highlighter.audit.logger import AuditLogger
from quality_highlighter.config import settings
from quality_highlighter.core.analyzer import Analyzer
from quality_highlighter.core.parser import SourceParser
from quality_highlighter.core.pattern_engine import PatternEngine
from quality_highlighter.models.rule_models import PatternCategory

logger = logging.getLogger("quality_highlighter.api")


@lru_cache
def get_engine() -> PatternEngine:
    """Shared pattern engine, configured from settings."""
    engine = PatternEngine.with_default_rules()

    if settings.enabled_categories:
        wanted = {PatternCategory(category) for category in settings.enabled_categories}
        for category in PatternCategory:
            if category not in wanted:
                engine.set_category_enabled(category, False)

    for rule_id in settings.disabled_rules:
        if not engine.set_enabled(rule_id, False):
            logger.warning(f"Ignoring unknown rule id in disabled_rules: '{rule_id}'")

    return engine


@lru_cache
def get_parser() -> SourceParser:
    """Shared tree-sitter parser singleton."""
    return SourceParser()


@lru_cache
def get_analyzer() -> Analyzer:
    """Shared analyzer singleton."""
    return Analyzer(engine=get_engine(), parser=get_parser())


@lru_cache
def get_audit_logger() -> AuditLogger:
    """Shared audit logger singleton."""
    return AuditLogger()
