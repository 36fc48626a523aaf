"""History store — user-scoped persistence of past generations.

Two backends share one interface:

* ``SupabaseHistoryStore`` talks to the hosted ``History`` table.  Row
  visibility is enforced by the table's row-level security, so the client
  is authenticated with the caller's access token.
* ``JsonHistoryStore`` keeps entries in memory backed by a JSON file and
  is used when Supabase is not configured (local development, demos).

Neither backend does optimistic locking: the last write wins.
"""

from __future__ import annotations

import json
import logging
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, Protocol

from supabase import Client, PostgrestAPIError

from typewise.config import get_settings
from typewise.models.response_models import HistoryEntry
from typewise.supabase_client import create_supabase_client

logger = logging.getLogger(__name__)

HISTORY_COLUMNS = "id, user_id, message, created_at"


class StoreError(Exception):
    """Raised when the history backend rejects or fails a request."""


class HistoryStore(Protocol):
    def list_for_user(self, user_id: str) -> list[HistoryEntry]: ...

    def get(self, entry_id: str, user_id: str) -> Optional[HistoryEntry]: ...

    def create(self, user_id: str, message: str) -> HistoryEntry: ...

    def update(self, entry_id: str, user_id: str, message: str) -> Optional[HistoryEntry]: ...

    def delete(self, entry_id: str, user_id: str) -> bool: ...


# ── Supabase backend ──────────────────────────────────────────────────────────


class SupabaseHistoryStore:
    """History table accessed through the Supabase PostgREST client."""

    def __init__(self, client: Client, table: str | None = None) -> None:
        self._client = client
        self._table = table or get_settings().history_table

    def list_for_user(self, user_id: str) -> list[HistoryEntry]:
        """Return the user's entries, newest first."""
        resp = self._execute(
            self._client.table(self._table)
            .select(HISTORY_COLUMNS)
            .eq("user_id", user_id)
            .order("created_at", desc=True)
        )
        return [_to_entry(row) for row in resp.data or []]

    def get(self, entry_id: str, user_id: str) -> Optional[HistoryEntry]:
        resp = self._execute(
            self._client.table(self._table)
            .select(HISTORY_COLUMNS)
            .eq("id", entry_id)
            .eq("user_id", user_id)
            .limit(1)
        )
        rows = resp.data or []
        return _to_entry(rows[0]) if rows else None

    def create(self, user_id: str, message: str) -> HistoryEntry:
        resp = self._execute(
            self._client.table(self._table).insert({"user_id": user_id, "message": message})
        )
        rows = resp.data or []
        if not rows:
            raise StoreError("Insert returned no row")
        entry = _to_entry(rows[0])
        logger.info("History entry created: id=%s user=%s", entry.id, user_id)
        return entry

    def update(self, entry_id: str, user_id: str, message: str) -> Optional[HistoryEntry]:
        """Replace the message text of one entry; None if no such row."""
        resp = self._execute(
            self._client.table(self._table)
            .update({"message": message})
            .eq("id", entry_id)
            .eq("user_id", user_id)
        )
        rows = resp.data or []
        if not rows:
            return None
        logger.info("History entry updated: id=%s", entry_id)
        return _to_entry(rows[0])

    def delete(self, entry_id: str, user_id: str) -> bool:
        resp = self._execute(
            self._client.table(self._table)
            .delete()
            .eq("id", entry_id)
            .eq("user_id", user_id)
        )
        deleted = bool(resp.data)
        if deleted:
            logger.info("History entry deleted: id=%s", entry_id)
        return deleted

    @staticmethod
    def _execute(query: Any) -> Any:
        try:
            return query.execute()
        except PostgrestAPIError as exc:
            logger.error("History query failed: %s", exc)
            raise StoreError(str(exc)) from exc


# ── JSON-file backend ─────────────────────────────────────────────────────────


class JsonHistoryStore:
    """In-memory store backed by a JSON file; safe to share across request threads."""

    def __init__(self, path: Path | str | None = None) -> None:
        self._path = Path(path) if path else Path(get_settings().data_dir) / "history.json"
        self._items: dict[str, HistoryEntry] = {}
        self._lock = threading.RLock()
        self._load()

    def list_for_user(self, user_id: str) -> list[HistoryEntry]:
        with self._lock:
            items = [i for i in self._items.values() if i.user_id == user_id]
        # newest first
        items.sort(key=lambda i: i.created_at, reverse=True)
        return items

    def get(self, entry_id: str, user_id: str) -> Optional[HistoryEntry]:
        with self._lock:
            item = self._items.get(entry_id)
        if item is None or item.user_id != user_id:
            return None
        return item

    def create(self, user_id: str, message: str) -> HistoryEntry:
        entry = HistoryEntry(
            id=uuid.uuid4().hex[:12],
            user_id=user_id,
            message=message,
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        with self._lock:
            self._items[entry.id] = entry
            self._save()
        logger.info("History entry created: id=%s user=%s", entry.id, user_id)
        return entry

    def update(self, entry_id: str, user_id: str, message: str) -> Optional[HistoryEntry]:
        with self._lock:
            item = self.get(entry_id, user_id)
            if item is None:
                return None
            item.message = message
            self._save()
        logger.info("History entry updated: id=%s", entry_id)
        return item

    def delete(self, entry_id: str, user_id: str) -> bool:
        with self._lock:
            if self.get(entry_id, user_id) is None:
                return False
            del self._items[entry_id]
            self._save()
        logger.info("History entry deleted: id=%s", entry_id)
        return True

    # ── Persistence helpers ───────────────────────────────────────────────

    def _load(self) -> None:
        """Load from JSON file if it exists."""
        if not self._path.exists():
            return
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise StoreError(f"Corrupt history file {self._path}: {exc}") from exc
        for entry in raw:
            item = HistoryEntry(**entry)
            self._items[item.id] = item
        logger.info("Loaded %d history entries from disk", len(self._items))

    def _save(self) -> None:
        """Persist current state to JSON file."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = [item.model_dump() for item in self._items.values()]
        try:
            self._path.write_text(
                json.dumps(payload, ensure_ascii=False, indent=2),
                encoding="utf-8",
            )
        except OSError as exc:
            raise StoreError(f"Could not write {self._path}: {exc}") from exc


def _to_entry(row: dict[str, Any]) -> HistoryEntry:
    return HistoryEntry(
        id=str(row["id"]),
        user_id=str(row.get("user_id", "")),
        message=row.get("message") or "",
        created_at=str(row.get("created_at", "")),
    )


# Module-level singleton for the JSON backend
_json_store: Optional[JsonHistoryStore] = None
_json_store_lock = threading.Lock()


def get_history_store(access_token: str | None = None) -> HistoryStore:
    """Return the configured history backend for the current caller."""
    settings = get_settings()
    if settings.supabase_enabled:
        return SupabaseHistoryStore(create_supabase_client(access_token))

    global _json_store
    with _json_store_lock:
        if _json_store is None:
            _json_store = JsonHistoryStore()
    return _json_store
