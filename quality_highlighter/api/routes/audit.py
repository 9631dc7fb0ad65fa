"""
Audit Route — GET /audit/summary
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from quality_highlighter.api.dependencies import get_audit_logger
from quality_highlighter.audit.logger import AuditLogger
from quality_highlighter.models.analysis_models import AuditSummary

router = APIRouter()


@router.get("/audit/summary", response_model=AuditSummary)
async def audit_summary(
    recent: int = Query(default=10, ge=0, le=500),
    audit: AuditLogger = Depends(get_audit_logger),
):
    """Files analyzed, average score and the most recent entries."""
    return audit.summary(recent=recent)
