"""Message router — /api/v1 endpoints for generation and suggestions."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.concurrency import run_in_threadpool

from typewise.config import get_settings
from typewise.agents.message_agent import MessageAgent
from typewise.agents.output_parser import GenerationError
from typewise.agents.suggestion_agent import SuggestionAgent
from typewise.auth.auth_adapter import UserSession, current_user
from typewise.models.history_store import StoreError, get_history_store
from typewise.models.request_models import TONE_PRESETS, MessageRequest, MessageType
from typewise.models.response_models import (
    HealthResponse,
    LogEntry,
    MessageResult,
    MessageTypesResponse,
    SuggestionResult,
)
from typewise.prompts.message_prompt import compute_max_output_tokens
from typewise.ui.generation_session import GENERATION_FAILED, SUGGESTION_FAILED

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["messages"])


# ── Endpoints ─────────────────────────────────────────────────────────────────


@router.post("/generate", response_model=MessageResult)
async def generate_message(
    req: MessageRequest,
    session: Optional[UserSession] = Depends(current_user),
) -> MessageResult:
    """Generate a message; signed-in callers also get it saved to history."""
    try:
        result = await MessageAgent().generate(req)
    except GenerationError as exc:
        _log_event(req, status="failed", session=session)
        raise HTTPException(status_code=502, detail=GENERATION_FAILED) from exc

    if session is not None:
        # the store client is blocking
        result.history_id = await run_in_threadpool(_save_to_history, session, result.message)

    _log_event(req, status="generated", session=session, result=result)
    return result


@router.post("/suggest", response_model=SuggestionResult)
async def suggest_inputs() -> SuggestionResult:
    """Return example goal / key points / tone for the empty form."""
    try:
        return await SuggestionAgent().suggest()
    except GenerationError as exc:
        raise HTTPException(status_code=502, detail=SUGGESTION_FAILED) from exc


@router.get("/message-types", response_model=MessageTypesResponse)
async def list_message_types() -> MessageTypesResponse:
    """Choices for the message-type selector."""
    return MessageTypesResponse(
        message_types=[t.value for t in MessageType],
        tone_presets=TONE_PRESETS,
    )


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Simple liveness probe."""
    return HealthResponse()


@router.get("/logs", response_model=list[LogEntry])
async def get_logs(limit: int = Query(20, ge=1, le=200)) -> list[LogEntry]:
    """Return the most recent generation events (newest first)."""
    settings = get_settings()
    log_file = Path(settings.log_dir) / "events.jsonl"

    if not log_file.exists():
        return []

    entries: list[LogEntry] = []
    with open(log_file, "r", encoding="utf-8") as f:
        lines = f.readlines()

    for line in reversed(lines[-limit:]):
        try:
            entries.append(LogEntry(**json.loads(line.strip())))
        except (json.JSONDecodeError, TypeError, ValueError):
            continue

    return entries


# ── Helpers ───────────────────────────────────────────────────────────────────


def _save_to_history(session: UserSession, message: str) -> Optional[str]:
    """Persist a generated message; store failures never fail the generation."""
    try:
        store = get_history_store(session.access_token or None)
        return store.create(session.user.id, message).id
    except StoreError:
        logger.exception("Could not save generation to history for user %s", session.user.id)
        return None


def _log_event(
    req: MessageRequest,
    status: str,
    session: Optional[UserSession] = None,
    result: Optional[MessageResult] = None,
) -> None:
    """Persist a JSON log entry under logs/."""
    settings = get_settings()
    log_dir = Path(settings.log_dir)
    log_dir.mkdir(exist_ok=True)

    entry = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "message_type": req.message_type.value if req.message_type else None,
        "goal_preview": req.goal[:120],
        "tone": req.tone,
        "word_limit": req.word_limit,
        "max_output_tokens": compute_max_output_tokens(req.word_limit),
        "status": status,
        "user_id": session.user.id if session else None,
        "message_preview": result.message[:200] if result else "",
    }

    log_file = log_dir / "events.jsonl"
    with open(log_file, "a", encoding="utf-8") as f:
        f.write(json.dumps(entry, ensure_ascii=False) + "\n")

    logger.info("Event logged: type=%s status=%s", entry["message_type"] or "generic", status)
