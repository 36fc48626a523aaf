"""History router — /api/v1/history endpoints over the user's past generations."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response

from typewise.auth.auth_adapter import UserSession, require_user
from typewise.models.history_store import HistoryStore, StoreError, get_history_store
from typewise.models.request_models import HistoryUpdateRequest
from typewise.models.response_models import HistoryEntry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["history"])


def _store_for(session: UserSession) -> HistoryStore:
    return get_history_store(session.access_token or None)


def _store_failed(exc: StoreError) -> HTTPException:
    logger.error("History store error: %s", exc)
    return HTTPException(status_code=502, detail="History is temporarily unavailable")


@router.get("/history", response_model=list[HistoryEntry])
def list_history(session: UserSession = Depends(require_user)) -> list[HistoryEntry]:
    """List the caller's entries, newest first."""
    try:
        return _store_for(session).list_for_user(session.user.id)
    except StoreError as exc:
        raise _store_failed(exc) from exc


@router.get("/history/{entry_id}", response_model=HistoryEntry)
def get_history_entry(entry_id: str, session: UserSession = Depends(require_user)) -> HistoryEntry:
    """Get a single entry by ID."""
    try:
        item = _store_for(session).get(entry_id, session.user.id)
    except StoreError as exc:
        raise _store_failed(exc) from exc
    if item is None:
        raise HTTPException(status_code=404, detail=f"History entry '{entry_id}' not found")
    return item


@router.patch("/history/{entry_id}", response_model=HistoryEntry)
def update_history_entry(
    entry_id: str,
    req: HistoryUpdateRequest,
    session: UserSession = Depends(require_user),
) -> HistoryEntry:
    """Replace the message text of an entry."""
    try:
        updated = _store_for(session).update(entry_id, session.user.id, req.message)
    except StoreError as exc:
        raise _store_failed(exc) from exc
    if updated is None:
        raise HTTPException(status_code=404, detail=f"History entry '{entry_id}' not found")
    return updated


@router.delete("/history/{entry_id}", status_code=204)
def delete_history_entry(entry_id: str, session: UserSession = Depends(require_user)) -> Response:
    """Delete an entry."""
    try:
        deleted = _store_for(session).delete(entry_id, session.user.id)
    except StoreError as exc:
        raise _store_failed(exc) from exc
    if not deleted:
        raise HTTPException(status_code=404, detail=f"History entry '{entry_id}' not found")
    return Response(status_code=204)
