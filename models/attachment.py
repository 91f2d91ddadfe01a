"""
Attachment metadata model. The file bytes live in the blob store under
``blob_key``.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from .base import Base, utcnow


class Attachment(Base):
    """
    Represents a file attached to a chat.
    """

    __tablename__ = "attachments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    chat_id = Column(String(36), ForeignKey("chats.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    mime_type = Column(String(255), nullable=False)
    blob_key = Column(String(1024), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    @property
    def is_image(self) -> bool:
        return (self.mime_type or "").startswith("image/")
