"""
Chat message model.
"""

import enum

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text

from .base import Base, utcnow


class MessageRole(str, enum.Enum):
    """Author of a stored message."""

    USER = "user"
    MODEL = "model"

    @classmethod
    def from_stored(cls, value: str | None) -> "MessageRole":
        """Map a stored role string; only an exact ``"model"`` is the model."""
        if value == cls.MODEL.value:
            return cls.MODEL
        return cls.USER


class Message(Base):
    """
    Represents one entry of a chat's append-only message log.
    """

    __tablename__ = "messages"
    __table_args__ = (Index("idx_messages_chat_created", "chat_id", "created_at"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    chat_id = Column(String(36), ForeignKey("chats.id"), nullable=False)
    role = Column(String(16), nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
