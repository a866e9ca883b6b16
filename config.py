"""
Configuration settings for story-trainer.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Story Worker (remote generator)
    # ========================================
    story_worker_url: str = Field(
        default="https://kids-story-worker.mikegyver.workers.dev/api/story",
        description="Story generation worker endpoint (empty to disable AI)",
    )
    story_grade_level: int = Field(
        default=5,
        ge=1,
        le=12,
        description="Target audience grade level sent to the worker",
    )
    story_question_count: int = Field(
        default=4,
        ge=1,
        description="Number of questions requested from the worker",
    )
    request_timeout_ms: int = Field(
        default=15000,
        description="Worker request timeout in milliseconds",
    )
    retry_attempts: int = Field(
        default=2,
        ge=1,
        description="Attempts per story request (timeouts, 5xx, network errors)",
    )
    backoff_seconds: float = Field(
        default=1.0,
        ge=0.0,
        description="Base delay for exponential backoff between attempts",
    )

    # ========================================
    # Session Defaults
    # ========================================
    default_paragraph_count: int = Field(
        default=3,
        ge=1,
        le=6,
        description="Initial paragraph count for new sessions",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    # ========================================
    # Helper Methods
    # ========================================
    def has_ai_configured(self) -> bool:
        """Check if the remote story worker is configured."""
        return bool(self.story_worker_url.strip())

    def get_story_client_config(self) -> dict[str, Any]:
        """Get story client configuration as a dictionary."""
        return {
            "api_url": self.story_worker_url,
            "timeout_ms": self.request_timeout_ms,
            "retry_attempts": self.retry_attempts,
            "backoff_seconds": self.backoff_seconds,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
