"""
Audit Logger — JSON-lines trail of analyses.

One line per analyzed file: timestamp, analysis_id, file and language,
issue counts, score and label, the rules that fired, errors, and duration.
``summary`` folds the whole trail into running totals.
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Iterator

from quality_highlighter.config import settings
from quality_highlighter.models.analysis_models import AnalysisResult, AuditEntry, AuditSummary
from quality_highlighter.models.rule_models import Severity

logger = logging.getLogger("quality_highlighter.audit")


class AuditLogger:
    """Appends analysis entries to a JSON-lines file and summarizes them."""

    def __init__(self, log_path: str | None = None) -> None:
        self.log_path = Path(log_path or settings.audit_log_path)

    def record(self, analysis_id: str, result: AnalysisResult) -> AuditEntry:
        """Build the entry for one analysis result and append it."""
        entry = AuditEntry(
            analysis_id=analysis_id,
            file_path=result.file_path,
            language=result.language.value if result.language is not None else None,
            total_issues=len(result.matches),
            critical_issues=sum(1 for m in result.matches if m.severity == Severity.CRITICAL),
            score=result.score.value,
            label=result.score.label.value,
            rule_ids=sorted({m.rule_id for m in result.matches}),
            errors=[f"{e.type}: {e.message}" for e in result.errors],
            duration_ms=result.analysis_time_ms,
        )
        self.log(entry)
        return entry

    def log(self, entry: AuditEntry) -> None:
        line = json.dumps({
            "timestamp": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
            **entry.model_dump(),
        })
        try:
            with open(self.log_path, "a", encoding="utf-8") as f:
                f.write(line + "\n")
        except OSError as e:
            logger.error(f"Failed to write audit log {self.log_path}: {e}")

    def _iter_entries(self) -> Iterator[dict]:
        if not self.log_path.exists():
            return
        try:
            with open(self.log_path, encoding="utf-8") as f:
                for number, raw in enumerate(f, start=1):
                    raw = raw.strip()
                    if not raw:
                        continue
                    try:
                        yield json.loads(raw)
                    except json.JSONDecodeError:
                        logger.debug(f"Skipping malformed audit line {number} in {self.log_path}")
        except OSError as e:
            logger.error(f"Failed to read audit log {self.log_path}: {e}")

    def read_all(self) -> list[dict]:
        return list(self._iter_entries())

    def read_recent(self, count: int = 50) -> list[dict]:
        """The most recent ``count`` entries, oldest first."""
        if count <= 0:
            return []
        return self.read_all()[-count:]

    def summary(self, recent: int = 10) -> AuditSummary:
        entries = self.read_all()
        if not entries:
            return AuditSummary()
        return AuditSummary(
            files_analyzed=len(entries),
            average_score=round(sum(e.get("score", 0) for e in entries) / len(entries), 1),
            total_issues=sum(e.get("total_issues", 0) for e in entries),
            recent=entries[-recent:] if recent > 0 else [],
        )
