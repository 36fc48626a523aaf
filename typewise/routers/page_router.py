"""User-scoped page routes; anonymous visitors are sent to the login screen."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import RedirectResponse

from typewise.auth.auth_adapter import LOGIN_ROUTE, UserSession, current_user, user_route
from typewise.models.history_store import StoreError, get_history_store

router = APIRouter(prefix="/user", tags=["pages"])


def _check_owner(user_id: str, session: UserSession) -> None:
    if session.user.id != user_id:
        raise HTTPException(status_code=403, detail="This page belongs to another user")


@router.get("/{user_id}")
def user_home(user_id: str, session: Optional[UserSession] = Depends(current_user)):
    """Landing page after sign-in: the generator plus a link to history."""
    if session is None:
        return RedirectResponse(LOGIN_ROUTE, status_code=303)
    _check_owner(user_id, session)
    return {
        "user": session.user.model_dump(),
        "generate_url": "/api/v1/generate",
        "history_url": f"{user_route(user_id)}/profile",
    }


@router.get("/{user_id}/profile")
def user_profile(user_id: str, session: Optional[UserSession] = Depends(current_user)):
    """The user's message history page."""
    if session is None:
        return RedirectResponse(LOGIN_ROUTE, status_code=303)
    _check_owner(user_id, session)
    try:
        entries = get_history_store(session.access_token or None).list_for_user(user_id)
    except StoreError as exc:
        raise HTTPException(status_code=502, detail="History is temporarily unavailable") from exc
    return {
        "user": session.user.model_dump(),
        "history": [e.model_dump() for e in entries],
    }
