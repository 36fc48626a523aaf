"""Auth adapter — delegates identity to Supabase Auth.

Only the provider calls are wrapped here; sessions, token refresh and
OAuth consent all live with the hosted provider.  Locally we keep the
access token in a cookie and map provider auth events to redirects.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional

from fastapi import Depends, HTTPException, Request
from pydantic import BaseModel
from supabase import AuthError, Client
from supabase_auth import SyncMemoryStorage, SyncSupportedStorage

from typewise.config import get_settings
from typewise.models.response_models import AuthUser
from typewise.supabase_client import CODE_VERIFIER_KEY, create_supabase_client, get_auth_client

logger = logging.getLogger(__name__)

LOGIN_ROUTE = "/auth"

AuthCallback = Callable[[str, Optional[AuthUser]], None]
FlowClientFactory = Callable[[SyncSupportedStorage], Client]

_listeners: list[AuthCallback] = []
_listeners_lock = threading.Lock()


class AuthenticationError(Exception):
    """Raised when the provider rejects a code, token or sign-out."""


class UnsupportedProviderError(ValueError):
    """Raised for OAuth providers that are not enabled in settings."""


class UserSession(BaseModel):
    """The authenticated caller of a request."""

    user: AuthUser
    access_token: str = ""


class OAuthFlow(BaseModel):
    """A started sign-in: where to send the browser and the verifier it must bring back."""

    url: str
    code_verifier: str


def user_route(user_id: str) -> str:
    return f"/user/{user_id}"


def redirect_for_event(event: str, user: Optional[AuthUser]) -> Optional[str]:
    """Map a provider auth event to the route the browser should visit."""
    if event == "SIGNED_OUT":
        return LOGIN_ROUTE
    if event == "SIGNED_IN" and user is not None:
        return user_route(user.id)
    return None


class AuthAdapter:
    """Thin wrapper over the Supabase Auth client.

    Token lookups and sign-out go through a shared client.  Each OAuth step
    runs on a fresh client built by ``flow_client_factory`` so that PKCE
    verifiers and sessions never leak between concurrent visitors; the
    verifier travels with the browser instead.
    """

    def __init__(
        self,
        client: Client | None = None,
        flow_client_factory: FlowClientFactory | None = None,
    ) -> None:
        self._client = client or get_auth_client()
        self._new_flow_client = flow_client_factory or _new_flow_client
        self._providers = [p.lower() for p in get_settings().auth_providers]

    # ── Public API ────────────────────────────────────────────────────────

    def sign_in_url(self, provider: str, redirect_to: str) -> OAuthFlow:
        """Start an OAuth flow and return the consent URL with its PKCE verifier."""
        provider = provider.lower()
        if provider not in self._providers:
            raise UnsupportedProviderError(
                f"Provider '{provider}' is not enabled. Available: {self._providers}"
            )
        storage = SyncMemoryStorage()
        try:
            resp = self._new_flow_client(storage).auth.sign_in_with_oauth(
                {"provider": provider, "options": {"redirect_to": redirect_to}}
            )
        except AuthError as exc:
            raise AuthenticationError(str(exc)) from exc

        verifier = storage.get_item(CODE_VERIFIER_KEY)
        if not verifier:
            raise AuthenticationError("Provider did not start a PKCE flow")
        logger.info("OAuth sign-in started: provider=%s", provider)
        return OAuthFlow(url=resp.url, code_verifier=verifier)

    def exchange_code(self, code: str, code_verifier: str) -> UserSession:
        """Complete the OAuth flow started with ``code_verifier``."""
        client = self._new_flow_client(SyncMemoryStorage())
        try:
            resp = client.auth.exchange_code_for_session(
                {"auth_code": code, "code_verifier": code_verifier}
            )
        except AuthError as exc:
            logger.warning("OAuth code exchange failed: %s", exc)
            raise AuthenticationError(str(exc)) from exc

        if resp.session is None or resp.user is None:
            raise AuthenticationError("Provider returned no session")

        user = _to_auth_user(resp.user)
        _notify("SIGNED_IN", user)
        return UserSession(user=user, access_token=resp.session.access_token)

    def get_user(self, access_token: str) -> Optional[AuthUser]:
        """Resolve an access token to a user, or None when it is not valid."""
        try:
            resp = self._client.auth.get_user(access_token)
        except AuthError as exc:
            logger.info("Access token rejected: %s", exc)
            return None
        if resp is None or resp.user is None:
            return None
        return _to_auth_user(resp.user)

    def sign_out(self, access_token: str) -> None:
        """Revoke the session behind ``access_token``."""
        try:
            self._client.auth.admin.sign_out(access_token)
        except AuthError as exc:
            raise AuthenticationError(str(exc)) from exc
        _notify("SIGNED_OUT", None)

    def subscribe(self, callback: AuthCallback) -> Callable[[], None]:
        """Call ``callback(event, user)`` on SIGNED_IN / SIGNED_OUT; returns an unsubscribe function."""
        with _listeners_lock:
            _listeners.append(callback)

        def unsubscribe() -> None:
            with _listeners_lock:
                if callback in _listeners:
                    _listeners.remove(callback)

        return unsubscribe


def _new_flow_client(storage: SyncSupportedStorage) -> Client:
    return create_supabase_client(storage=storage)


def _notify(event: str, user: Optional[AuthUser]) -> None:
    logger.info("Auth event %s user=%s", event, user.id if user else None)
    with _listeners_lock:
        listeners = list(_listeners)
    for callback in listeners:
        callback(event, user)


def _to_auth_user(user: Any) -> AuthUser:
    return AuthUser(id=str(user.id), email=getattr(user, "email", None))


# ── FastAPI dependencies ──────────────────────────────────────────────────────


def get_auth_adapter() -> AuthAdapter:
    if not get_settings().supabase_enabled:
        raise HTTPException(status_code=503, detail="Authentication is not configured")
    return AuthAdapter()


def _extract_token(request: Request) -> Optional[str]:
    header = request.headers.get("Authorization", "")
    if header.lower().startswith("bearer "):
        return header[7:].strip() or None
    return request.cookies.get(get_settings().session_cookie_name)


def current_user(request: Request) -> Optional[UserSession]:
    """Return the caller's session, or None for anonymous requests."""
    settings = get_settings()
    if not settings.supabase_enabled:
        if settings.dev_user_id:
            return UserSession(user=AuthUser(id=settings.dev_user_id))
        return None

    token = _extract_token(request)
    if not token:
        return None
    user = get_auth_adapter().get_user(token)
    if user is None:
        return None
    return UserSession(user=user, access_token=token)


def require_user(session: Optional[UserSession] = Depends(current_user)) -> UserSession:
    """Reject anonymous API callers with 401."""
    if session is None:
        raise HTTPException(status_code=401, detail="Sign in to access your history")
    return session
