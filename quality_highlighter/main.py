"""
Quality Highlighter FastAPI Application — JS/TS anti-pattern detection.

  POST  /analyze                → detect patterns, score the file
  GET   /rules                  → registered rules
  GET   /rules/statistics       → rule counts
  PATCH /rules/{rule_id}        → toggle a rule
  PATCH /categories/{category}  → toggle a category
  GET   /audit/summary          → recent analyses
  GET   /health                 → {"status": "ok", ...}
"""

from __future__ import annotations

import logging

from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from quality_highlighter.api.routes.analyze import router as analyze_router
from quality_highlighter.api.routes.audit import router as audit_router
from quality_highlighter.api.routes.health import router as health_router
from quality_highlighter.api.routes.rules import router as rules_router
from quality_highlighter.config import APP_VERSION, settings

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("quality_highlighter")

app = FastAPI(
    title="Quality Highlighter",
    description="Heuristic anti-pattern detection and quality scoring for JavaScript and TypeScript",
    version=APP_VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(analyze_router)
app.include_router(rules_router)
app.include_router(audit_router)
app.include_router(health_router)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    body = await request.body()
    logger.error(f"Validation Error. Raw body: {body.decode('utf-8')[:500]} | Errors: {exc.errors()}")
    return JSONResponse(
        status_code=422,
        content={"detail": exc.errors(), "body": body.decode("utf-8")[:100]},
    )
