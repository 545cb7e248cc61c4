"""
Unit tests for backend/flashcard_api/core/config.py
Tests: Settings defaults, field validators (CORS parsing, positive limits,
JWT secret), SQLite path resolution, transcription key fallback
No DB or network required.
"""

import sys
import os
import pytest
from pydantic import ValidationError as SettingsValidationError

BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", "backend"))
sys.path.insert(0, BACKEND_DIR)

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-unit-tests-only-32chars!")

from flashcard_api.core.config import settings, Settings


class TmpSettings(Settings):
    model_config = {"env_file": None, "extra": "ignore"}


def _make(**overrides):
    values = {"JWT_SECRET_KEY": "a" * 40}
    values.update(overrides)
    return TmpSettings(**values)


class TestSettingsDefaults:
    """Verify default values in the Settings singleton."""

    def test_settings_is_settings_instance(self):
        assert isinstance(settings, Settings)

    def test_jwt_algorithm_default(self):
        assert settings.JWT_ALGORITHM == "HS256"

    def test_environment_is_valid(self):
        assert settings.ENVIRONMENT in ("development", "staging", "production")

    def test_cors_origins_is_list(self):
        assert isinstance(settings.CORS_ORIGINS, list)
        assert len(settings.CORS_ORIGINS) >= 1

    def test_generation_defaults(self):
        tmp = _make()
        assert tmp.GENERATION_MODEL == "gpt-4o"
        assert tmp.LLM_TEMPERATURE == 0.7
        assert tmp.LLM_MAX_TOKENS == 1500
        assert tmp.IMAGE_DETAIL == "low"

    def test_trial_and_upload_defaults(self):
        tmp = _make()
        assert tmp.TRIAL_DURATION_DAYS == 30
        assert tmp.MAX_UPLOAD_SIZE_MB == 25
        assert tmp.max_upload_bytes == 25 * 1024 * 1024

    def test_timeouts_positive(self):
        assert settings.GENERATION_TIMEOUT_SECONDS > 0
        assert settings.TRANSCRIPTION_TIMEOUT_SECONDS > 0


class TestValidators:

    def test_cors_string_input_split(self):
        tmp = _make(CORS_ORIGINS="http://a.com, http://b.com,")
        assert tmp.CORS_ORIGINS == ["http://a.com", "http://b.com"]

    def test_cors_list_input_preserved(self):
        tmp = _make(CORS_ORIGINS=["http://localhost:5173"])
        assert tmp.CORS_ORIGINS == ["http://localhost:5173"]

    def test_empty_jwt_secret_rejected(self):
        with pytest.raises(SettingsValidationError):
            TmpSettings(JWT_SECRET_KEY="")

    def test_non_positive_trial_rejected(self):
        with pytest.raises(SettingsValidationError):
            _make(TRIAL_DURATION_DAYS=0)

    def test_unknown_image_detail_rejected(self):
        with pytest.raises(SettingsValidationError):
            _make(IMAGE_DETAIL="auto")


class TestDerivedValues:

    def test_relative_sqlite_path_made_absolute(self):
        tmp = _make(DATABASE_URL="sqlite+aiosqlite:///./data/x.db")
        path = tmp.DATABASE_URL[len("sqlite+aiosqlite:///"):]
        assert os.path.isabs(path)
        assert path.endswith("x.db")

    def test_memory_sqlite_untouched(self):
        tmp = _make(DATABASE_URL="sqlite+aiosqlite:///:memory:")
        assert tmp.DATABASE_URL == "sqlite+aiosqlite:///:memory:"

    def test_transcription_key_falls_back_to_openai_key(self):
        tmp = _make(OPENAI_API_KEY="sk-main", TRANSCRIPTION_API_KEY="")
        assert tmp.TRANSCRIPTION_API_KEY == "sk-main"

    def test_explicit_transcription_key_kept(self):
        tmp = _make(OPENAI_API_KEY="sk-main", TRANSCRIPTION_API_KEY="sk-audio")
        assert tmp.TRANSCRIPTION_API_KEY == "sk-audio"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
