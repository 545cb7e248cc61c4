"""
Centralized application configuration.

Uses pydantic BaseSettings for automatic env-var loading and validation.
Import the singleton ``settings`` instance throughout the app.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings

# Relative paths resolve from the project root
_PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))


class Settings(BaseSettings):
    """Application settings, validated from environment variables."""

    # ── Environment ────────────────────────────────────────
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"
    DEBUG: bool = False

    # ── Database ──────────────────────────────────────────
    DATABASE_URL: str = "sqlite+aiosqlite:///./data/flashcards.db"

    # ── Uploads ───────────────────────────────────────────
    MAX_UPLOAD_SIZE_MB: int = 25
    MAX_REQUEST_BODY_MB: int = 50

    # ── JWT / Auth ────────────────────────────────────────
    JWT_SECRET_KEY: str = ""
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    TRIAL_DURATION_DAYS: int = 30

    # ── CORS ──────────────────────────────────────────────
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _parse_cors(cls, v):
        if isinstance(v, str):
            return [o.strip() for o in v.split(",") if o.strip()]
        return v

    # ── Generation backend ────────────────────────────────
    OPENAI_API_KEY: str = ""
    OPENAI_BASE_URL: Optional[str] = None
    GENERATION_MODEL: str = "gpt-4o"
    LLM_TEMPERATURE: float = 0.7
    LLM_MAX_TOKENS: int = 1500
    IMAGE_DETAIL: Literal["low", "high"] = "low"
    GENERATION_TIMEOUT_SECONDS: float = 60.0

    # ── Transcription backend ─────────────────────────────
    TRANSCRIPTION_API_KEY: str = ""
    TRANSCRIPTION_MODEL: str = "whisper-1"
    TRANSCRIPTION_TIMEOUT_SECONDS: float = 60.0

    @field_validator("JWT_SECRET_KEY", mode="after")
    @classmethod
    def _validate_jwt(cls, v: str) -> str:
        if not v:
            raise ValueError(
                "JWT_SECRET_KEY must be set. "
                'Generate: python -c "import secrets; print(secrets.token_urlsafe(64))"'
            )
        return v

    @field_validator("TRIAL_DURATION_DAYS", "MAX_UPLOAD_SIZE_MB", "MAX_REQUEST_BODY_MB", mode="after")
    @classmethod
    def _positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be a positive integer")
        return v

    @model_validator(mode="after")
    def _resolve_paths_and_cross_validate(self):
        """Resolve a relative SQLite path & fill in the transcription key."""
        prefix = "sqlite+aiosqlite:///"
        if self.DATABASE_URL.startswith(prefix):
            db_path = self.DATABASE_URL[len(prefix):]
            if db_path and db_path != ":memory:" and not os.path.isabs(db_path):
                object.__setattr__(
                    self, "DATABASE_URL", prefix + os.path.join(_PROJECT_ROOT, db_path)
                )

        # One OpenAI key usually covers both backends
        if not self.TRANSCRIPTION_API_KEY and self.OPENAI_API_KEY:
            object.__setattr__(self, "TRANSCRIPTION_API_KEY", self.OPENAI_API_KEY)

        _log = logging.getLogger("config")
        if not self.OPENAI_API_KEY:
            _log.warning("OPENAI_API_KEY is empty; flashcard generation will fail")
        if not self.TRANSCRIPTION_API_KEY:
            _log.warning("TRANSCRIPTION_API_KEY is empty; voice notes will fail")

        return self

    @property
    def max_upload_bytes(self) -> int:
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    @property
    def max_request_body_bytes(self) -> int:
        return self.MAX_REQUEST_BODY_MB * 1024 * 1024

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached settings singleton."""
    return Settings()


settings = get_settings()
