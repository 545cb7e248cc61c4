"""
Shared pytest fixtures and configuration for the entire test suite.
Applies to all subdirectories: unit/, api/, e2e/
"""

import sys
import os
import uuid
import tempfile
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
import pytest

# ── Ensure backend is importable from every pytest session ──────────────────
BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "backend"))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

# Minimal env so that Pydantic Settings can validate on import
_TEST_DB = os.path.join(tempfile.mkdtemp(prefix="flashcards_test_"), "test.db")
os.environ.setdefault("DATABASE_URL", f"sqlite+aiosqlite:///{_TEST_DB}")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-unit-tests-only-32chars!")
os.environ.setdefault("OPENAI_API_KEY", "sk-test-not-a-real-key")


# ── Fake account fixtures ────────────────────────────────────────────────────

def make_account(*, subscribed=False, trial_end_date=None, active=True):
    """Account-shaped namespace; the gate only reads id/trial/subscription."""
    return SimpleNamespace(
        id="test-user-id-" + str(uuid.uuid4())[:8],
        username="testuser",
        email="test@example.com",
        trial_end_date=trial_end_date or datetime.now(timezone.utc) + timedelta(days=30),
        is_subscribed=subscribed,
        is_active=active,
    )


@pytest.fixture
def trial_account():
    return make_account()


@pytest.fixture
def expired_account():
    return make_account(trial_end_date=datetime.now(timezone.utc) - timedelta(days=1))


@pytest.fixture
def subscribed_account():
    return make_account(subscribed=True, trial_end_date=datetime.now(timezone.utc) - timedelta(days=90))


@pytest.fixture
def disabled_account():
    return make_account(active=False)


@pytest.fixture
def token_for():
    """Return a factory that issues an access token for an account."""
    from flashcard_api.services.auth.security import create_access_token

    def _issue(account):
        return create_access_token({"sub": str(account.id)})
    return _issue


# ── FastAPI TestClient fixture ────────────────────────────────────────────────

@pytest.fixture(scope="session")
def app_client():
    """Return a FastAPI TestClient for the full application."""
    from fastapi.testclient import TestClient
    from flashcard_api.main import app
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client
