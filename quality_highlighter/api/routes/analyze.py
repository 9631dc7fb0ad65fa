"""
Analyze Route — POST /analyze

Accepts {"source": str, "file_path": str, ...}, parses with tree-sitter (or
converts a client-supplied ESTree tree), runs the pattern engine, scores
the matches and records the analysis in the audit trail.
"""

from __future__ import annotations

import asyncio
import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException

from quality_highlighter.api.dependencies import get_analyzer, get_audit_logger
from quality_highlighter.audit.logger import AuditLogger
from quality_highlighter.config import settings
from quality_highlighter.core.analyzer import Analyzer
from quality_highlighter.core.score_calculator import calculate_score, calculate_trend
from quality_highlighter.models.analysis_models import (
    AnalysisError,
    AnalysisResult,
    AnalyzeRequest,
    AnalyzeResponse,
)
from quality_highlighter.models.syntax import from_estree

logger = logging.getLogger("quality_highlighter.api.analyze")
router = APIRouter()


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze(
    req: AnalyzeRequest,
    analyzer: Analyzer = Depends(get_analyzer),
    audit: AuditLogger = Depends(get_audit_logger),
):
    """Detect anti-patterns in one file and score it."""
    analysis_id = str(uuid.uuid4())[:12]

    tree = None
    if req.tree is not None:
        try:
            tree = from_estree(req.tree, req.source)
        except ValueError as e:
            raise HTTPException(status_code=422, detail=f"Invalid syntax tree: {e}")

    try:
        result = await asyncio.wait_for(
            asyncio.to_thread(
                analyzer.analyze,
                req.source,
                req.file_path,
                req.language,
                req.categories,
                tree,
            ),
            timeout=settings.analysis_timeout_seconds,
        )
    except asyncio.TimeoutError:
        logger.warning(f"[{analysis_id}] Analysis of {req.file_path} timed out")
        result = AnalysisResult(
            file_path=req.file_path,
            language=req.language,
            score=calculate_score([]),
            errors=[
                AnalysisError(
                    type="timeout",
                    message=f"Analysis exceeded {settings.analysis_timeout_seconds}s",
                )
            ],
        )

    if settings.audit_enabled:
        audit.record(analysis_id, result)

    trend = None
    if req.previous_score is not None:
        trend = calculate_trend(result.score.value, req.previous_score)

    return AnalyzeResponse(analysis_id=analysis_id, result=result, trend=trend)
