"""
Configuration settings for the payprep practice engine.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

BUNDLED_CONTENT_DIR = Path(__file__).parent / "payprep" / "data"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PAYPREP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Storage
    # ========================================
    data_dir: Path = Field(
        default=Path.home() / ".payprep",
        description="Directory holding settings, the current attempt, history and weakness profile",
    )
    content_dir: Path = Field(
        default=BUNDLED_CONTENT_DIR,
        description="Directory containing packs.json and the pack files it references",
    )

    # ========================================
    # Scoring
    # ========================================
    passing_score: int = Field(
        default=70,
        ge=0,
        le=100,
        description="Minimum score percent counted as a pass",
    )
    history_limit: int = Field(
        default=10,
        ge=1,
        description="Number of attempt summaries kept (most recent first)",
    )

    # ========================================
    # Selection
    # ========================================
    default_question_count: int = Field(
        default=20,
        ge=1,
        description="Question count used when the blueprint has none for a mode",
    )
    max_slot_attempts: int = Field(
        default=8,
        ge=1,
        description="Hydration attempts per slot before a colliding slot is dropped",
    )

    # ========================================
    # Session
    # ========================================
    autosave_interval_seconds: int = Field(
        default=5,
        ge=1,
        description="Elapsed seconds between attempt snapshots",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging level for the CLI",
    )
    log_file: str | None = Field(
        default=None,
        description="Optional log file path",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
