"""
Operator session model.
"""

from sqlalchemy import Column, DateTime, String

from .base import Base, utcnow


class AuthSession(Base):
    """
    An opaque bearer token issued on successful login.

    Sessions never expire and are never revoked; presence of a row is the
    whole authorization check.
    """

    __tablename__ = "sessions"

    token = Column(String(128), primary_key=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
