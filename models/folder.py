"""
Folder model for organizing chats.
"""

from sqlalchemy import Column, ForeignKey, String

from .base import BaseModel


class Folder(BaseModel):
    """
    Represents a folder; folders nest through ``parent_id``.

    Deleting a folder moves its chats and child folders to the root instead of
    deleting them.
    """

    __tablename__ = "folders"

    name = Column(String(255), nullable=False)
    parent_id = Column(String(36), ForeignKey("folders.id"), nullable=True, index=True)
