"""
LRID — Application Configuration

Loads runtime configuration from environment variables (and an optional .env
file) using Pydantic Settings.  A cached ``get_settings()`` helper is provided
so every call-site receives the same validated instance without re-parsing the
environment on each scoring run.

Scoring parameters that belong to a particular instrument (bands, penalties,
confidence cut-offs) live in the instrument document, not here.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration for the LRID scoring engine."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="LRID_",
        extra="ignore",
    )

    # ------------------------------------------------------------------ #
    # Runtime environment
    # ------------------------------------------------------------------ #
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    # ------------------------------------------------------------------ #
    # Instrument
    # ------------------------------------------------------------------ #
    INSTRUMENT_PATH: str = "schemas/instrument.v1.json"

    # Minimum number of non-null dimension scores an aggregate index needs.
    # 1 means "average whatever is available".
    MIN_INDEX_COVERAGE: int = 1

    # ------------------------------------------------------------------ #
    # Approval workflow
    # ------------------------------------------------------------------ #
    DEFAULT_EXPERT_NAME: str = "Prof. Robert Karaszewski"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @field_validator("MIN_INDEX_COVERAGE")
    @classmethod
    def _coverage_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"MIN_INDEX_COVERAGE must be >= 1, got {v}")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def _log_level_must_be_known(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown LOG_LEVEL: {v}")
        return level


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached, validated ``Settings`` instance.

    Using ``@lru_cache`` guarantees the .env file is read and validated
    exactly once per process lifetime::

        from lrid.config import get_settings
        settings = get_settings()
    """
    return Settings()
