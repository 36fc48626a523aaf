"""History store — JSON fallback and Supabase table adapter."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock

import pytest
from supabase import PostgrestAPIError

from typewise.models.history_store import (
    JsonHistoryStore,
    StoreError,
    SupabaseHistoryStore,
)

USER = "user-a"
OTHER = "user-b"


# ── JSON backend ─────────────────────────────────────────────────────────────


def test_edit_then_list_returns_edited_text(json_store):
    entry = json_store.create(USER, "Subject: Hi\n\nOriginal body")

    json_store.update(entry.id, USER, "Subject: Hi\n\nEdited body ✓")

    listed = json_store.list_for_user(USER)
    assert [e.message for e in listed] == ["Subject: Hi\n\nEdited body ✓"]


def test_delete_removes_entry_from_listing(json_store):
    keep = json_store.create(USER, "keep me")
    gone = json_store.create(USER, "delete me")

    assert json_store.delete(gone.id, USER) is True

    assert [e.id for e in json_store.list_for_user(USER)] == [keep.id]
    assert json_store.get(gone.id, USER) is None
    assert json_store.delete(gone.id, USER) is False


def test_list_is_newest_first(json_store):
    first = json_store.create(USER, "first")
    second = json_store.create(USER, "second")
    # force a deterministic ordering independent of clock resolution
    first.created_at = "2024-01-01T00:00:00+00:00"
    second.created_at = "2024-06-01T00:00:00+00:00"

    assert [e.message for e in json_store.list_for_user(USER)] == ["second", "first"]


def test_entries_are_user_scoped(json_store):
    mine = json_store.create(USER, "mine")
    json_store.create(OTHER, "theirs")

    assert [e.message for e in json_store.list_for_user(USER)] == ["mine"]
    assert json_store.get(mine.id, OTHER) is None
    assert json_store.update(mine.id, OTHER, "hijacked") is None
    assert json_store.delete(mine.id, OTHER) is False
    assert json_store.get(mine.id, USER).message == "mine"


def test_entries_survive_reload(tmp_path):
    path = tmp_path / "history.json"
    store = JsonHistoryStore(path)
    entry = store.create(USER, "persist me")

    reloaded = JsonHistoryStore(path)

    found = reloaded.get(entry.id, USER)
    assert found is not None
    assert found.message == "persist me"


def test_corrupt_file_raises_store_error(tmp_path):
    path = tmp_path / "history.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(StoreError):
        JsonHistoryStore(path)


def test_concurrent_creates_are_all_persisted(tmp_path):
    store = JsonHistoryStore(tmp_path / "history.json")

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(lambda i: store.create(USER, f"message {i}"), range(40)))

    assert len(store.list_for_user(USER)) == 40
    assert len(JsonHistoryStore(tmp_path / "history.json").list_for_user(USER)) == 40


# ── Supabase backend ─────────────────────────────────────────────────────────


def _table_mock(data):
    """A chainable query-builder mock whose execute() returns ``data``."""
    query = MagicMock()
    for method in ("select", "insert", "update", "delete", "eq", "order", "limit"):
        getattr(query, method).return_value = query
    query.execute.return_value = MagicMock(data=data)
    client = MagicMock()
    client.table.return_value = query
    return client, query


def test_supabase_list_orders_by_created_at_desc():
    rows = [
        {"id": 2, "user_id": USER, "message": "newer", "created_at": "2024-06-01T00:00:00+00:00"},
        {"id": 1, "user_id": USER, "message": "older", "created_at": "2024-01-01T00:00:00+00:00"},
    ]
    client, query = _table_mock(rows)

    entries = SupabaseHistoryStore(client, table="History").list_for_user(USER)

    client.table.assert_called_with("History")
    query.select.assert_called_with("id, user_id, message, created_at")
    query.eq.assert_called_with("user_id", USER)
    query.order.assert_called_with("created_at", desc=True)
    assert [e.id for e in entries] == ["2", "1"]
    assert entries[0].message == "newer"


def test_supabase_update_filters_by_exact_id():
    row = {"id": "abc", "user_id": USER, "message": "edited", "created_at": "2024-01-01T00:00:00+00:00"}
    client, query = _table_mock([row])

    updated = SupabaseHistoryStore(client).update("abc", USER, "edited")

    query.update.assert_called_with({"message": "edited"})
    query.eq.assert_any_call("id", "abc")
    query.eq.assert_any_call("user_id", USER)
    assert updated.message == "edited"


def test_supabase_update_missing_row_returns_none():
    client, _ = _table_mock([])

    assert SupabaseHistoryStore(client).update("nope", USER, "x") is None


def test_supabase_delete():
    client, query = _table_mock([{"id": "abc"}])

    assert SupabaseHistoryStore(client).delete("abc", USER) is True
    query.delete.assert_called_once()
    query.eq.assert_any_call("id", "abc")


def test_supabase_create_inserts_user_row():
    row = {"id": 7, "user_id": USER, "message": "hello", "created_at": "2024-01-01T00:00:00+00:00"}
    client, query = _table_mock([row])

    entry = SupabaseHistoryStore(client).create(USER, "hello")

    query.insert.assert_called_with({"user_id": USER, "message": "hello"})
    assert entry.id == "7"


def test_supabase_api_error_becomes_store_error():
    client, query = _table_mock([])
    query.execute.side_effect = PostgrestAPIError(
        {"message": "permission denied for table History", "code": "42501", "hint": None, "details": None}
    )

    with pytest.raises(StoreError):
        SupabaseHistoryStore(client).list_for_user(USER)
