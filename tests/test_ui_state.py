"""View state: edit/preview toggle, busy flags, in-memory history list."""

from __future__ import annotations

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from tests.conftest import _make_email_response, _make_llm
from typewise.agents.output_parser import GenerationError
from typewise.models.request_models import MessageRequest, MessageType
from typewise.models.response_models import MessageResult
from typewise.ui.generation_session import (
    GENERATION_FAILED,
    SUGGESTION_FAILED,
    GenerationSession,
    SessionBusyError,
)
from typewise.ui.history_view import SAVE_FAILED, HistoryView
from typewise.ui.result_editor import EditorState, ResultEditor, render_preview

USER = "user-a"


def _request(**overrides) -> MessageRequest:
    data = {
        "goal": "ask for an internship",
        "keyPoints": "I am a CS student",
        "tone": "Professional & Formal",
    }
    data.update(overrides)
    return MessageRequest(**data)


# ── ResultEditor ─────────────────────────────────────────────────────────────


def test_editor_starts_in_preview():
    editor = ResultEditor("Hello")

    assert editor.state is EditorState.PREVIEW
    assert editor.draft is None


def test_editor_toggle_commits_draft():
    editor = ResultEditor("Hello")

    editor.toggle()
    assert editor.state is EditorState.EDITING
    editor.update_draft("Hello, world")
    editor.toggle()

    assert editor.state is EditorState.PREVIEW
    assert editor.text == "Hello, world"


def test_editor_cancel_discards_draft():
    editor = ResultEditor("Hello")
    editor.start_editing()
    editor.update_draft("Something else")

    editor.cancel()

    assert editor.state is EditorState.PREVIEW
    assert editor.text == "Hello"


def test_editor_rejects_draft_in_preview():
    with pytest.raises(RuntimeError):
        ResultEditor("Hello").update_draft("nope")


def test_preview_formats():
    email = MessageResult(
        message_type=MessageType.EMAIL,
        message="Subject: Hi\n\nBody",
        subject="Hi",
        body="Body",
    )
    bullet = MessageResult(message_type=MessageType.RESUME_BULLET_POINT, message="- Shipped X")
    plain = MessageResult(message="Plain text")

    assert render_preview(email) == "Subject: Hi\n\nBody"
    assert render_preview(bullet) == "• Shipped X"
    assert render_preview(plain) == "Plain text"


# ── GenerationSession ────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_session_submit_success_returns_to_ready():
    mock_llm = _make_llm(_make_email_response())

    with patch("typewise.agents.message_agent.ChatOpenAI", return_value=mock_llm):
        session = GenerationSession()
        result = await session.submit(_request(messageType="Email"))

    assert result.subject
    assert session.result is result
    assert session.editor.text == result.message
    assert session.busy is False
    assert session.last_error is None


@pytest.mark.asyncio
async def test_session_failure_records_single_error():
    mock_llm = _make_llm("garbage")

    with patch("typewise.agents.message_agent.ChatOpenAI", return_value=mock_llm):
        session = GenerationSession()
        result = await session.submit(_request())

    assert result is None
    assert session.result is None
    assert session.last_error == GENERATION_FAILED
    assert session.busy is False


@pytest.mark.asyncio
async def test_session_rejects_duplicate_submission():
    gate = asyncio.Event()
    agent = MagicMock()

    async def slow_generate(request):
        await gate.wait()
        return MessageResult(message="done")

    agent.generate = slow_generate
    session = GenerationSession(agent=agent)

    first = asyncio.create_task(session.submit(_request()))
    await asyncio.sleep(0)
    assert session.is_loading is True

    with pytest.raises(SessionBusyError):
        await session.submit(_request())
    with pytest.raises(SessionBusyError):
        await session.suggest()

    gate.set()
    assert (await first).message == "done"
    assert session.busy is False


@pytest.mark.asyncio
async def test_session_suggest_failure():
    suggestion_agent = MagicMock()
    suggestion_agent.suggest = AsyncMock(side_effect=GenerationError("bad output"))
    session = GenerationSession(agent=MagicMock(), suggestion_agent=suggestion_agent)

    assert await session.suggest() is None
    assert session.last_error == SUGGESTION_FAILED
    assert session.is_suggesting is False


@pytest.mark.asyncio
async def test_session_suggest_success():
    mock_llm = _make_llm(json.dumps({
        "goal": "Thank a mentor",
        "keyPoints": "Helped me land my first job",
        "tone": "Heartfelt",
    }))

    with patch("typewise.agents.suggestion_agent.ChatOpenAI", return_value=mock_llm):
        session = GenerationSession(agent=MagicMock())
        suggestion = await session.suggest()

    assert suggestion.goal == "Thank a mentor"
    assert session.is_suggesting is False


# ── HistoryView ──────────────────────────────────────────────────────────────


def test_history_view_delete_updates_list_immediately(json_store):
    a = json_store.create(USER, "first")
    b = json_store.create(USER, "second")
    view = HistoryView(json_store, USER)
    view.load()
    view.toggle_open(b.id)

    view.delete(b.id)

    assert [e.id for e in view.entries] == [a.id]
    assert view.open_id is None
    assert [e.id for e in json_store.list_for_user(USER)] == [a.id]


def test_history_view_save_edit(json_store):
    entry = json_store.create(USER, "draft one")
    view = HistoryView(json_store, USER)
    view.load()

    view.start_edit(entry.id)
    assert view.open_id == entry.id
    view.edit_value = "final version"
    view.save_edit()

    assert view.edit_id is None
    assert view.find(entry.id).message == "final version"
    assert view.load()[0].message == "final version"


def test_history_view_save_of_vanished_row_keeps_local_text(json_store):
    entry = json_store.create(USER, "original")
    view = HistoryView(json_store, USER)
    view.load()
    view.start_edit(entry.id)
    view.edit_value = "edited"
    json_store.delete(entry.id, USER)

    assert view.save_edit() is None

    assert [e.message for e in view.entries] == ["original"]
    assert view.edit_id == entry.id
    assert view.last_error == SAVE_FAILED


def test_history_view_cancel_edit_keeps_text(json_store):
    entry = json_store.create(USER, "unchanged")
    view = HistoryView(json_store, USER)
    view.load()

    view.start_edit(entry.id)
    view.edit_value = "discarded"
    view.cancel_edit()

    assert view.find(entry.id).message == "unchanged"
    assert json_store.get(entry.id, USER).message == "unchanged"


def test_history_view_toggle_is_locked_while_editing(json_store):
    a = json_store.create(USER, "a")
    b = json_store.create(USER, "b")
    view = HistoryView(json_store, USER)
    view.load()

    view.start_edit(a.id)
    view.toggle_open(b.id)

    assert view.open_id == a.id
