"""Supabase client factory shared by the auth adapter and the history store."""

from __future__ import annotations

import logging
from typing import Optional

from supabase import Client, ClientOptions, create_client
from supabase_auth import SyncMemoryStorage, SyncSupportedStorage
from supabase_auth.constants import STORAGE_KEY

from typewise.config import get_settings

logger = logging.getLogger(__name__)

# where supabase-auth keeps the PKCE verifier between sign-in and code exchange
CODE_VERIFIER_KEY = f"{STORAGE_KEY}-code-verifier"

_auth_client: Optional[Client] = None


def create_supabase_client(
    access_token: str | None = None,
    storage: SyncSupportedStorage | None = None,
) -> Client:
    """Create a new client; with ``access_token`` its table queries run as that user."""
    settings = get_settings()
    client = create_client(
        settings.supabase_url,
        settings.supabase_anon_key,
        options=ClientOptions(
            flow_type="pkce",
            auto_refresh_token=False,
            persist_session=False,
            storage=storage or SyncMemoryStorage(),
        ),
    )
    if access_token:
        client.postgrest.auth(access_token)
    return client


def get_auth_client() -> Client:
    """Return the shared client for stateless auth calls (token lookup, sign-out).

    OAuth flows never run on this client: each one gets its own client so
    no verifier or session is shared between visitors.
    """
    global _auth_client
    if _auth_client is None:
        _auth_client = create_supabase_client()
        logger.info("Supabase auth client initialized")
    return _auth_client
