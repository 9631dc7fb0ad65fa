"""
Quality Highlighter Configuration — pydantic-settings based.

All settings are read from environment variables or .env file.
"""

from pydantic import Field
from pydantic_settings import BaseSettings

APP_VERSION = "1.0.0"


class Settings(BaseSettings):
    """Application-wide settings sourced from environment variables."""

    # ── Rules ──
    enabled_categories: list[str] = Field(
        default_factory=list,
        description="Pattern categories to check (empty = all)",
    )
    disabled_rules: list[str] = Field(
        default_factory=list,
        description="Rule ids disabled at startup, e.g. [\"function-too-long\"]",
    )

    # ── Analysis ──
    analysis_timeout_seconds: float = Field(
        default=10.0, description="Wall-clock limit for one analysis request"
    )

    # ── Logging ──
    log_level: str = Field(default="INFO", description="Root log level")

    # ── Server ──
    port: int = Field(default=5001, description="Server port")
    host: str = Field(default="0.0.0.0", description="Server bind host")
    cors_origins: list[str] = Field(
        default=["*"], description="Allowed CORS origins"
    )

    # ── Audit ──
    audit_enabled: bool = Field(default=True, description="Record analyses in the audit log")
    audit_log_path: str = Field(
        default="audit.jsonl", description="Path to JSON-lines audit log file"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


# Singleton instance — imported by other modules
settings = Settings()
