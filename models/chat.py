"""
Chat model: one conversation thread.
"""

from sqlalchemy import Column, ForeignKey, String, Text

from .base import BaseModel

DEFAULT_CHAT_TITLE = "Untitled chat"


class Chat(BaseModel):
    """
    Represents a chat with its own history, attachments and optional
    automation key.

    :ivar title: Display title.
    :type title: str
    :ivar folder_id: Containing folder, ``None`` for the root.
    :type folder_id: str
    :ivar system_prompt: Instructions prepended to every model request.
    :type system_prompt: str
    :ivar api_key: Automation key accepted by the external endpoint.
    :type api_key: str
    """

    __tablename__ = "chats"

    title = Column(String(255), nullable=False, default=DEFAULT_CHAT_TITLE)
    folder_id = Column(String(36), ForeignKey("folders.id"), nullable=True, index=True)
    system_prompt = Column(Text, nullable=True)
    api_key = Column(String(64), nullable=True, unique=True)
