"""Attachment schemas."""

from datetime import datetime

from .base import BaseSchema


class AttachmentResponse(BaseSchema):
    """Schema for attachment metadata."""

    id: int
    chat_id: str
    name: str
    mime_type: str
    blob_key: str
    created_at: datetime
