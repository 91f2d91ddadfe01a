"""
Models package initialization.
"""

from .attachment import Attachment
from .base import Base, BaseModel
from .chat import Chat
from .folder import Folder
from .message import Message, MessageRole
from .session import AuthSession
from .setting import Setting

__all__ = [
    "Base",
    "BaseModel",
    "AuthSession",
    "Setting",
    "Folder",
    "Chat",
    "Message",
    "MessageRole",
    "Attachment",
]
