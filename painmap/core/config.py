"""
Application configuration using Pydantic Settings.

Loads configuration from environment variables and .env files.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_SUMMARY_API_MODES = ("chat_completions", "responses")
_SUMMARY_TONES = ("compassionate", "professional", "clinical", "encouraging", "factual")
_SUMMARY_AUDIENCES = ("patient", "doctor", "caregiver", "family", "research")


def _read_secret_file(path: str) -> str:
    try:
        content = Path(path).expanduser().read_text(encoding="utf-8").strip()
    except OSError as exc:
        msg = f"Could not read secret file '{path}'"
        raise ValueError(msg) from exc
    if not content:
        msg = f"Secret file '{path}' is empty"
        raise ValueError(msg)
    return content


class Settings(BaseSettings):
    """
    Application settings.

    All settings can be overridden via environment variables.
    For example, the OPENAI_API_KEY env var sets the OPENAI_API_KEY field.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode="after")
    def _load_secret_file_values(self) -> Settings:
        if self.OPENAI_API_KEY_FILE:
            self.OPENAI_API_KEY = _read_secret_file(self.OPENAI_API_KEY_FILE)
        return self

    @field_validator("LLM_PRIMARY_BASE_URL", mode="before")
    @classmethod
    def parse_optional_llm_base_url(cls, value: Any) -> str | None:
        """Normalize optional LLM base URL values."""
        if value is None:
            return None
        if isinstance(value, str):
            normalized = value.strip()
            return normalized or None
        return str(value).strip() or None

    @field_validator("LLM_SUMMARY_API_MODE", mode="before")
    @classmethod
    def parse_summary_api_mode(cls, value: Any) -> str:
        normalized = str(value or "").strip().lower()
        if normalized not in _SUMMARY_API_MODES:
            msg = f"LLM_SUMMARY_API_MODE must be one of {', '.join(_SUMMARY_API_MODES)}"
            raise ValueError(msg)
        return normalized

    @field_validator("SUMMARY_DEFAULT_TONE", mode="before")
    @classmethod
    def parse_default_tone(cls, value: Any) -> str:
        normalized = str(value or "").strip().lower()
        if normalized not in _SUMMARY_TONES:
            msg = f"SUMMARY_DEFAULT_TONE must be one of {', '.join(_SUMMARY_TONES)}"
            raise ValueError(msg)
        return normalized

    @field_validator("SUMMARY_DEFAULT_AUDIENCE", mode="before")
    @classmethod
    def parse_default_audience(cls, value: Any) -> str:
        normalized = str(value or "").strip().lower()
        if normalized not in _SUMMARY_AUDIENCES:
            msg = f"SUMMARY_DEFAULT_AUDIENCE must be one of {', '.join(_SUMMARY_AUDIENCES)}"
            raise ValueError(msg)
        return normalized

    @field_validator("SUMMARY_DEADLINE_SECONDS", mode="before")
    @classmethod
    def parse_optional_deadline(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("LOG_FORMAT", mode="before")
    @classmethod
    def parse_log_format(cls, value: Any) -> str:
        normalized = str(value or "").strip().lower()
        if normalized not in ("json", "console"):
            msg = "LOG_FORMAT must be 'json' or 'console'"
            raise ValueError(msg)
        return normalized

    @model_validator(mode="after")
    def _validate_summary_length_bounds(self) -> Settings:
        if self.SUMMARY_MIN_LENGTH > self.SUMMARY_MAX_LENGTH:
            msg = "SUMMARY_MIN_LENGTH must be <= SUMMARY_MAX_LENGTH"
            raise ValueError(msg)
        return self

    # =========================================================================
    # LLM Provider
    # =========================================================================
    OPENAI_API_KEY: str = Field(
        default="",
        description="API key for the OpenAI-compatible text generation provider",
    )
    OPENAI_API_KEY_FILE: str | None = Field(
        default=None,
        description="Path to file containing OPENAI_API_KEY",
    )
    LLM_PRIMARY_PROVIDER: str = Field(
        default="openai",
        description="LLM provider identifier for logging",
    )
    LLM_PRIMARY_BASE_URL: str | None = Field(
        default=None,
        description="Optional base URL for OpenAI-compatible provider endpoints",
    )
    LLM_SUMMARY_MODEL: str = Field(
        default="gpt-4.1-mini",
        description="Model for pain summary narrative generation",
    )
    LLM_SUMMARY_API_MODE: str = Field(
        default="chat_completions",
        description="chat_completions or responses",
    )
    LLM_SUMMARY_TEMPERATURE: float = Field(default=0.7, ge=0, le=2)
    LLM_SUMMARY_MAX_OUTPUT_TOKENS: int = Field(
        default=200,
        ge=1,
        description="Upper bound on generated summary tokens",
    )
    LLM_REQUEST_TIMEOUT_SECONDS: float = Field(
        default=30.0,
        gt=0,
        description="HTTP timeout for a single generation request",
    )

    # =========================================================================
    # Summary Generation
    # =========================================================================
    SUMMARY_MAX_ATTEMPTS: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Generation attempts before falling back or failing",
    )
    SUMMARY_RETRY_BASE_DELAY_SECONDS: float = Field(
        default=1.0,
        ge=0,
        description="Base delay between attempts (linear for transport errors, flat for validation)",
    )
    SUMMARY_FALLBACK_ENABLED: bool = Field(default=True)
    SUMMARY_VALIDATION_ENABLED: bool = Field(default=True)
    SUMMARY_DEADLINE_SECONDS: float | None = Field(
        default=None,
        gt=0,
        description="Optional overall deadline for one summary request",
    )
    SUMMARY_DEFAULT_TONE: str = Field(default="compassionate")
    SUMMARY_DEFAULT_AUDIENCE: str = Field(default="patient")
    SUMMARY_MIN_LENGTH: int = Field(
        default=20,
        ge=0,
        description="Summaries shorter than this are rejected",
    )
    SUMMARY_MAX_LENGTH: int = Field(
        default=1000,
        ge=1,
        description="Summaries longer than this are flagged as verbose",
    )

    # =========================================================================
    # Application
    # =========================================================================
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: str = Field(default="json", description="json or console")

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def effective_log_level(self) -> str:
        level_name = self.LOG_LEVEL.strip().upper()
        if isinstance(logging.getLevelName(level_name), int):
            return level_name
        return "INFO"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


# Convenience instance
settings = get_settings()
