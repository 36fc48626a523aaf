"""Shared pytest fixtures for the TypeWise test suite."""

from __future__ import annotations

import os
import json
import tempfile
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

# Ensure test environment variables are set BEFORE importing app modules
_TMP_DIR = tempfile.mkdtemp(prefix="typewise-tests-")
os.environ.setdefault("OPENAI_API_KEY", "test-key-not-real")
os.environ.setdefault("OPENAI_MODEL", "gpt-4o-mini")
os.environ["SUPABASE_URL"] = ""
os.environ["SUPABASE_ANON_KEY"] = ""
os.environ["DEV_USER_ID"] = ""
os.environ.setdefault("LOG_LEVEL", "DEBUG")
os.environ["LOG_DIR"] = os.path.join(_TMP_DIR, "logs")
os.environ["DATA_DIR"] = os.path.join(_TMP_DIR, "data")


SAMPLE_REQUEST = {
    "goal": "ask for an internship",
    "keyPoints": "I am a CS student",
    "tone": "Professional & Formal",
}

TEST_USER_ID = "5b0f7c1e-0000-4000-8000-000000000001"


@pytest.fixture
def request_data() -> dict:
    """Return a valid MessageRequest payload (camelCase, as the form posts it)."""
    return dict(SAMPLE_REQUEST)


@pytest.fixture
def client() -> TestClient:
    """FastAPI synchronous test client."""
    from typewise.main import app

    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def json_store(tmp_path):
    """A JSON-file history store isolated in a temp directory."""
    from typewise.models.history_store import JsonHistoryStore

    return JsonHistoryStore(tmp_path / "history.json")


@pytest.fixture
def signed_in(client, json_store):
    """Sign TEST_USER_ID in and route every history lookup to ``json_store``."""
    from typewise.main import app
    from typewise.auth.auth_adapter import UserSession, current_user
    from typewise.models.response_models import AuthUser

    app.dependency_overrides[current_user] = lambda: UserSession(
        user=AuthUser(id=TEST_USER_ID, email="student@example.com"),
        access_token="test-token",
    )
    with (
        patch("typewise.routers.history_router.get_history_store", return_value=json_store),
        patch("typewise.routers.message_router.get_history_store", return_value=json_store),
        patch("typewise.routers.page_router.get_history_store", return_value=json_store),
    ):
        yield json_store


def _make_llm(*contents: str) -> AsyncMock:
    """Build a mock chat model whose ``ainvoke`` returns each content in turn."""
    llm = AsyncMock()
    replies = [MagicMock(content=c) for c in contents]
    if len(replies) == 1:
        llm.ainvoke.return_value = replies[0]
    else:
        llm.ainvoke.side_effect = replies
    return llm


def _make_text_response(message: str = "Dear Hiring Team,\n\nThank you for your time.") -> str:
    """Helper to build a mock text-mode JSON response string."""
    return json.dumps({"message": message})


def _make_email_response(
    subject: str = "Internship Application – CS Student",
    body: str = "Dear Hiring Manager,\n\nI am a CS student applying for an internship.\n\nBest regards,\n[Your Name]",
) -> str:
    """Helper to build a mock structured-mode JSON response string."""
    return json.dumps({"subject": subject, "body": body})
