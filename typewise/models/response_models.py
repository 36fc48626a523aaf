"""Response models for the TypeWise API."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from typewise.models.request_models import MessageType


class TextMessageOutput(BaseModel):
    """Raw LLM output in plain-text mode."""

    message: str = Field(..., min_length=1, description="The generated message")


class EmailMessageOutput(BaseModel):
    """Raw LLM output in structured (subject + body) mode."""

    subject: str = Field(..., min_length=1, description="Email subject line")
    body: str = Field(..., min_length=1, description="Email body")


class MessageResult(BaseModel):
    """Response returned by POST /api/v1/generate."""

    message_type: Optional[MessageType] = Field(default=None, description="Format the message was written for")
    message: str = Field(..., description="Full message text, ready to copy")
    subject: Optional[str] = Field(default=None, description="Subject line (Email / Cold Outreach only)")
    body: Optional[str] = Field(default=None, description="Body (Email / Cold Outreach only)")
    history_id: Optional[str] = Field(
        default=None,
        description="ID of the saved history entry when the caller is signed in",
    )

    @property
    def is_structured(self) -> bool:
        return self.subject is not None and self.body is not None

    @classmethod
    def from_text(cls, output: TextMessageOutput, message_type: Optional[MessageType] = None) -> "MessageResult":
        return cls(message_type=message_type, message=output.message.strip())

    @classmethod
    def from_email(cls, output: EmailMessageOutput, message_type: Optional[MessageType] = None) -> "MessageResult":
        subject = output.subject.strip()
        body = output.body.strip()
        return cls(
            message_type=message_type,
            message=f"Subject: {subject}\n\n{body}",
            subject=subject,
            body=body,
        )


class SuggestionResult(BaseModel):
    """Example form values returned by POST /api/v1/suggest."""

    model_config = ConfigDict(populate_by_name=True)

    goal: str = Field(..., min_length=1, description="An example goal")
    key_points: str = Field(..., alias="keyPoints", min_length=1, description="Example key points")
    tone: str = Field(..., min_length=1, description="An example tone")


class HistoryEntry(BaseModel):
    """A persisted past generation, scoped to its owning user."""

    id: str
    user_id: str
    message: str
    created_at: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(),
    )


class AuthUser(BaseModel):
    """Identity of the signed-in user as reported by the auth provider."""

    id: str
    email: Optional[str] = None


class MessageTypesResponse(BaseModel):
    """Choices for the message-type selector and tone field."""

    message_types: list[str]
    tone_presets: list[str]


class HealthResponse(BaseModel):
    """Health-check response."""

    status: str = "ok"
    version: str = "1.0.0"


class LogEntry(BaseModel):
    """Single log entry for the /api/v1/logs endpoint."""

    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    message_type: Optional[str] = None
    goal_preview: str = ""
    tone: str = ""
    word_limit: Optional[int] = None
    max_output_tokens: int = 0
    status: str = ""
    user_id: Optional[str] = None
    message_preview: str = ""
