"""Chat schemas for request/response serialization."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field, field_validator

from .base import BaseSchema, RequestSchema


class ChatCreate(RequestSchema):
    """Schema for creating a chat."""

    title: str | None = Field(None, max_length=255, description="Chat title")
    folder_id: str | None = Field(None, alias="folderId", description="Containing folder")


class ChatSummaryResponse(BaseSchema):
    """Schema for a chat in the sidebar listing."""

    id: str
    title: str
    folder_id: str | None = None
    created_at: datetime


class ChatSettingsResponse(ChatSummaryResponse):
    """Schema for the full chat settings record."""

    system_prompt: str | None = None
    api_key: str | None = None


class ChatSettingsUpdate(RequestSchema):
    """Schema for updating chat settings.

    ``folderId`` is applied whenever the key is present, so an explicit null
    moves the chat to the root.
    """

    title: str | None = Field(None, max_length=255)
    folder_id: str | None = Field(None, alias="folderId")
    system_prompt: str | None = Field(None, alias="systemPrompt")
    regenerate_api_key: bool = Field(False, alias="regenerateApiKey")


class MessageResponse(BaseSchema):
    """Schema for a stored chat message."""

    id: int
    role: str
    content: str
    created_at: datetime


class SendMessageRequest(RequestSchema):
    """Schema for sending a message from the console."""

    message: str = Field(..., min_length=1, description="User message")


class ReplyResponse(BaseSchema):
    """Schema for the model reply."""

    reply: str


EXTERNAL_ATTACHMENT_DEFAULTS = {"filename": "file", "mime": "application/octet-stream", "base64": ""}


def _text_or_default(value, default: str) -> str:
    """Falsy values take the default; anything else is rendered as text."""
    if not value:
        return default
    if isinstance(value, bool):
        return "true"
    return value if isinstance(value, str) else str(value)


class ExternalAttachment(RequestSchema):
    """Attachment carried inline by an automation request."""

    filename: str = Field(default=EXTERNAL_ATTACHMENT_DEFAULTS["filename"])
    mime: str = Field(default=EXTERNAL_ATTACHMENT_DEFAULTS["mime"])
    base64: str = Field(default=EXTERNAL_ATTACHMENT_DEFAULTS["base64"])

    @field_validator("filename", "mime", "base64", mode="before")
    @classmethod
    def coerce_text(cls, v, info):
        return _text_or_default(v, EXTERNAL_ATTACHMENT_DEFAULTS[info.field_name])


class ExternalMessageRequest(RequestSchema):
    """Schema for the automation endpoint body.

    Automation clients are loosely typed: nulls fall back to the defaults,
    scalars are read as text and a non-list ``attachments`` means none.
    """

    message: str = Field(default="")
    attachments: list[ExternalAttachment] = Field(default_factory=list)

    @field_validator("message", mode="before")
    @classmethod
    def coerce_message(cls, v):
        return _text_or_default(v, "")

    @field_validator("attachments", mode="before")
    @classmethod
    def coerce_attachments(cls, v):
        if not isinstance(v, list):
            return []
        return [item if isinstance(item, (dict, ExternalAttachment)) else {} for item in v]


class ChatDeletionResponse(BaseSchema):
    """Schema for the chat deletion report."""

    ok: bool = True
    deleted_messages: int = Field(0, serialization_alias="deletedMessages")
    deleted_attachments: int = Field(0, serialization_alias="deletedAttachments")
    failed_blob_keys: list[str] = Field(default_factory=list, serialization_alias="failedBlobKeys")
