"""Request models for the TypeWise API."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MessageType(str, Enum):
    """Target formats that select format-specific generation rules."""

    EMAIL = "Email"
    LINKEDIN_MESSAGE = "LinkedIn Message"
    RESUME_BULLET_POINT = "Resume Bullet Point"
    COVER_LETTER_PARAGRAPH = "Cover Letter Paragraph"
    COLD_OUTREACH = "Cold Outreach"

    @property
    def is_structured(self) -> bool:
        """Whether the output is a subject + body pair instead of plain text."""
        return self in (MessageType.EMAIL, MessageType.COLD_OUTREACH)


TONE_PRESETS: list[str] = [
    "Professional & Formal",
    "Friendly & Approachable",
    "Confident & Persuasive",
    "Concise & Direct",
    "Enthusiastic",
]


class MessageRequest(BaseModel):
    """User input for a single message generation."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    goal: str = Field(
        ...,
        min_length=10,
        description="What the message should achieve",
        examples=["Ask for an internship"],
    )
    key_points: str = Field(
        ...,
        alias="keyPoints",
        min_length=10,
        description="Details that must appear in the message",
        examples=["I am a CS student with two Python projects"],
    )
    tone: str = Field(
        ...,
        min_length=3,
        description="Desired tone, free text or one of the presets",
        examples=["Professional & Formal"],
    )
    message_type: Optional[MessageType] = Field(
        default=None,
        alias="messageType",
        description="Target format; omit for generic text",
    )
    recipient: Optional[str] = Field(default=None, description="Who the message is for")
    your_name: Optional[str] = Field(default=None, alias="yourName", description="Sender name")
    signature: Optional[str] = Field(default=None, description="Sign-off, e.g. 'Best regards'")
    word_limit: Optional[int] = Field(
        default=None,
        alias="wordLimit",
        gt=0,
        le=1000,
        description="Approximate word limit",
    )

    @field_validator("message_type", "recipient", "your_name", "signature", "word_limit", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        # HTML forms post empty strings for untouched optional inputs
        if isinstance(value, str) and not value.strip():
            return None
        return value


class HistoryUpdateRequest(BaseModel):
    """Body for PATCH /api/v1/history/{id}."""

    message: str = Field(
        ...,
        min_length=1,
        description="The edited message text",
    )


class ExportRequest(BaseModel):
    """Body for the export endpoints."""

    text: str = Field(
        ...,
        min_length=1,
        description="Message text to export",
    )
