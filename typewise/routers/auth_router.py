"""Auth router — OAuth sign-in, callback and sign-out via Supabase Auth."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import RedirectResponse

from typewise.config import get_settings
from typewise.auth.auth_adapter import (
    LOGIN_ROUTE,
    AuthenticationError,
    UnsupportedProviderError,
    UserSession,
    current_user,
    get_auth_adapter,
    redirect_for_event,
    require_user,
)
from typewise.models.response_models import AuthUser

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _secure_cookies() -> bool:
    return get_settings().site_url.startswith("https://")


@router.get("")
def login_screen(session: Optional[UserSession] = Depends(current_user)):
    """Login screen data: enabled providers, or a redirect if already signed in."""
    if session is not None:
        return RedirectResponse(redirect_for_event("SIGNED_IN", session.user), status_code=303)
    providers = get_settings().auth_providers
    return {
        "providers": providers,
        "login_urls": {p: f"{LOGIN_ROUTE}/login/{p}" for p in providers},
    }


@router.get("/login/{provider}")
def login(provider: str) -> RedirectResponse:
    """Start the OAuth flow; the PKCE verifier rides along in a short-lived cookie."""
    settings = get_settings()
    try:
        flow = get_auth_adapter().sign_in_url(provider, redirect_to=f"{settings.site_url}/auth/callback")
    except UnsupportedProviderError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except AuthenticationError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc

    response = RedirectResponse(flow.url)
    response.set_cookie(
        settings.pkce_cookie_name,
        flow.code_verifier,
        max_age=settings.pkce_cookie_max_age,
        path=LOGIN_ROUTE,
        httponly=True,
        samesite="lax",
        secure=_secure_cookies(),
    )
    return response


@router.get("/callback")
def callback(code: str, request: Request) -> RedirectResponse:
    """Exchange the provider code for a session and send the user home."""
    settings = get_settings()
    verifier = request.cookies.get(settings.pkce_cookie_name)
    if not verifier:
        raise HTTPException(status_code=401, detail="Sign-in expired, please try again")
    try:
        session = get_auth_adapter().exchange_code(code, verifier)
    except AuthenticationError as exc:
        raise HTTPException(status_code=401, detail="Sign-in failed") from exc

    response = RedirectResponse(redirect_for_event("SIGNED_IN", session.user), status_code=303)
    response.delete_cookie(settings.pkce_cookie_name, path=LOGIN_ROUTE)
    response.set_cookie(
        settings.session_cookie_name,
        session.access_token,
        httponly=True,
        samesite="lax",
        secure=_secure_cookies(),
    )
    logger.info("User signed in: %s", session.user.id)
    return response


@router.post("/logout")
def logout(session: Optional[UserSession] = Depends(current_user)) -> RedirectResponse:
    """Sign out and return to the login screen."""
    settings = get_settings()
    if session is not None and session.access_token:
        try:
            get_auth_adapter().sign_out(session.access_token)
        except AuthenticationError as exc:
            # the cookie is cleared either way
            logger.warning("Provider sign-out failed: %s", exc)

    response = RedirectResponse(redirect_for_event("SIGNED_OUT", None), status_code=303)
    response.delete_cookie(settings.session_cookie_name)
    return response


@router.get("/me", response_model=AuthUser)
def me(session: UserSession = Depends(require_user)) -> AuthUser:
    """Return the signed-in user."""
    return session.user
