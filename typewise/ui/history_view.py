"""In-memory view of a user's history list."""

from __future__ import annotations

from typing import Optional

from typewise.models.history_store import HistoryStore
from typewise.models.response_models import HistoryEntry

SAVE_FAILED = "Could not save your changes. The message may have been deleted."


class HistoryView:
    """Mirrors the history screen: loaded entries, expanded row, inline editor."""

    def __init__(self, store: HistoryStore, user_id: str) -> None:
        self._store = store
        self._user_id = user_id
        self.entries: list[HistoryEntry] = []
        self.open_id: Optional[str] = None
        self.edit_id: Optional[str] = None
        self.edit_value = ""
        self.last_error: Optional[str] = None

    def load(self) -> list[HistoryEntry]:
        self.entries = self._store.list_for_user(self._user_id)
        return self.entries

    def find(self, entry_id: str) -> Optional[HistoryEntry]:
        return next((e for e in self.entries if e.id == entry_id), None)

    def toggle_open(self, entry_id: str) -> None:
        # rows being edited stay expanded
        if self.edit_id is not None:
            return
        self.open_id = None if self.open_id == entry_id else entry_id

    def start_edit(self, entry_id: str) -> None:
        entry = self.find(entry_id)
        if entry is None:
            raise KeyError(entry_id)
        self.edit_id = entry_id
        self.edit_value = entry.message
        self.open_id = entry_id

    def cancel_edit(self) -> None:
        self.edit_id = None
        self.edit_value = ""

    def save_edit(self) -> Optional[HistoryEntry]:
        """Write the edited text to the store, then to the local list.

        When the store has no such row the list is left alone, the editor
        stays open and ``last_error`` is set.
        """
        if self.edit_id is None:
            return None
        entry_id, message = self.edit_id, self.edit_value
        updated = self._store.update(entry_id, self._user_id, message)
        if updated is None:
            self.last_error = SAVE_FAILED
            return None
        self.entries = [updated if e.id == entry_id else e for e in self.entries]
        self.last_error = None
        self.cancel_edit()
        return updated

    def delete(self, entry_id: str) -> None:
        """Delete from the store, then drop the row locally right away."""
        self._store.delete(entry_id, self._user_id)
        self.entries = [e for e in self.entries if e.id != entry_id]
        if self.open_id == entry_id:
            self.open_id = None
        if self.edit_id == entry_id:
            self.cancel_edit()
