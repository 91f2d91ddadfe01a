"""
Key/value setting model for operator-managed secrets.
"""

from sqlalchemy import Column, DateTime, String, Text

from .base import Base, utcnow


class Setting(Base):
    """
    Represents a single global setting, e.g. the Gemini API key.
    """

    __tablename__ = "settings"

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
