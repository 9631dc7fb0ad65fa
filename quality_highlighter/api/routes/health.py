"""
Health Check Route — GET /health
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from quality_highlighter.api.dependencies import get_engine
from quality_highlighter.config import APP_VERSION
from quality_highlighter.core.pattern_engine import PatternEngine

router = APIRouter()


@router.get("/health")
async def health(engine: PatternEngine = Depends(get_engine)):
    """Health check endpoint."""
    return {
        "status": "ok",
        "version": APP_VERSION,
        "rules": len(engine),
        "enabled_rules": len(engine.enabled_rules()),
    }
