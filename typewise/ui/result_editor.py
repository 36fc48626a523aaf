"""Edit/preview state for a displayed result."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from typewise.models.request_models import MessageType
from typewise.models.response_models import MessageResult

BULLET = "•"


class EditorState(str, Enum):
    PREVIEW = "preview"
    EDITING = "editing"


class ResultEditor:
    """Two-state toggle: Preview <-> Editing.

    The draft only replaces ``text`` when editing ends through ``save`` or
    ``toggle``; ``cancel`` throws it away.
    """

    def __init__(self, text: str = "") -> None:
        self.text = text
        self.draft: Optional[str] = None
        self.state = EditorState.PREVIEW

    @property
    def is_editing(self) -> bool:
        return self.state is EditorState.EDITING

    def start_editing(self) -> None:
        if self.is_editing:
            return
        self.draft = self.text
        self.state = EditorState.EDITING

    def update_draft(self, value: str) -> None:
        if not self.is_editing:
            raise RuntimeError("Not in editing mode")
        self.draft = value

    def save(self) -> str:
        if self.is_editing and self.draft is not None:
            self.text = self.draft
        self._to_preview()
        return self.text

    def cancel(self) -> None:
        self._to_preview()

    def toggle(self) -> None:
        if self.is_editing:
            self.save()
        else:
            self.start_editing()

    def _to_preview(self) -> None:
        self.draft = None
        self.state = EditorState.PREVIEW


def render_preview(result: MessageResult) -> str:
    """Format-specific preview text for a generated result."""
    if result.is_structured:
        return f"Subject: {result.subject}\n\n{result.body}"
    if result.message_type is MessageType.RESUME_BULLET_POINT:
        text = result.message.lstrip()
        if text.startswith((BULLET, "-", "*")):
            text = text[1:].lstrip()
        return f"{BULLET} {text}"
    return result.message
