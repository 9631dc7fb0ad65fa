"""
Analyzer — parse, detect, score one file.

Parse failures and unsupported file types are reported as analysis errors
on the result instead of exceptions, so an editor always gets a score back.
"""

from __future__ import annotations

import logging
import time
from pathlib import PurePath
from typing import Iterable

from quality_highlighter.core.matcher import MatchContext
from quality_highlighter.core.parser import SourceParser, SyntaxParseError, UnsupportedLanguageError
from quality_highlighter.core.pattern_engine import PatternEngine
from quality_highlighter.core.score_calculator import analyze_score
from quality_highlighter.models.analysis_models import AnalysisError, AnalysisResult
from quality_highlighter.models.rule_models import Language, PatternCategory, PatternMatch
from quality_highlighter.models.syntax import Node

logger = logging.getLogger("quality_highlighter.analyzer")

EXTENSION_LANGUAGES: dict[str, Language] = {
    ".js": Language.JAVASCRIPT,
    ".mjs": Language.JAVASCRIPT,
    ".cjs": Language.JAVASCRIPT,
    ".jsx": Language.JAVASCRIPT_REACT,
    ".ts": Language.TYPESCRIPT,
    ".mts": Language.TYPESCRIPT,
    ".cts": Language.TYPESCRIPT,
    ".tsx": Language.TYPESCRIPT_REACT,
    ".php": Language.PHP,
}


def language_for_path(file_path: str) -> Language | None:
    return EXTENSION_LANGUAGES.get(PurePath(file_path).suffix.lower())


class Analyzer:
    """Runs a PatternEngine over source files."""

    def __init__(self, engine: PatternEngine, parser: SourceParser | None = None) -> None:
        self.engine = engine
        self.parser = parser or SourceParser()

    def supports(self, file_path: str) -> bool:
        return language_for_path(file_path) is not None

    def analyze(
        self,
        source: str,
        file_path: str,
        language: Language | None = None,
        categories: Iterable[PatternCategory] | None = None,
        tree: Node | None = None,
    ) -> AnalysisResult:
        """
        Analyze one file.

        Args:
            source: Full source text.
            file_path: Path for reporting and language detection.
            language: Explicit language tag; detected from the extension if None.
            categories: Categories to check; None or empty means all.
            tree: Pre-parsed syntax tree; the source is parsed when None.

        Returns:
            AnalysisResult with matches, score and any errors.
        """
        start = time.monotonic()
        language = Language(language) if language is not None else language_for_path(file_path)
        matches: list[PatternMatch] = []
        errors: list[AnalysisError] = []

        if language is None:
            errors.append(AnalysisError(type="runtime", message=f"Unsupported file type: {file_path}"))
        elif source.strip():
            try:
                syntax_tree = tree if tree is not None else self.parser.parse(source, language)
                context = MatchContext(file_path=file_path, language=language, source=source)
                matches = self.engine.detect(syntax_tree, context, categories)
            except SyntaxParseError as e:
                logger.info(f"Parse error in {file_path}: {e}")
                errors.append(AnalysisError(type="parse", message=str(e), line=e.line))
            except UnsupportedLanguageError as e:
                errors.append(AnalysisError(type="runtime", message=str(e)))

        analysis = analyze_score(matches)
        elapsed = (time.monotonic() - start) * 1000
        logger.info(
            f"Analyzed {file_path}: {len(matches)} issues, score {analysis.score.value} "
            f"in {elapsed:.1f}ms"
        )

        return AnalysisResult(
            file_path=file_path,
            language=language,
            matches=matches,
            score=analysis.score,
            analysis=analysis,
            analysis_time_ms=round(elapsed, 2),
            errors=errors,
        )
