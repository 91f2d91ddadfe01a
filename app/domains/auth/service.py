"""Password login and session lookup."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings
from app.core.security import generate_session_token, secrets_match
from app.exceptions.base import AuthenticationError, ConfigurationError
from models import AuthSession

logger = logging.getLogger(__name__)


class AuthService:
    """Service for the single shared operator password and its sessions."""

    def __init__(self, db: AsyncSession, settings: Settings):
        """Initialize service with a database session and app settings."""
        self.db = db
        self.settings = settings

    async def login(self, password: str) -> str:
        """
        Exchange the operator password for a new session token.

        Args:
            password: Password presented by the caller

        Returns:
            str: Newly issued session token

        Raises:
            ConfigurationError: If no operator password is configured
            AuthenticationError: If the password does not match
            SQLAlchemyError: If the session row cannot be written
        """
        if not self.settings.master_password:
            logger.error("Login attempted but MASTER_PASSWORD is not configured")
            raise ConfigurationError("MASTER_PASSWORD is not set in environment")

        if not secrets_match(password, self.settings.master_password):
            logger.info("Rejected login with invalid password")
            raise AuthenticationError("Invalid password")

        token = generate_session_token()
        try:
            self.db.add(AuthSession(token=token))
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise

        logger.info("Issued new operator session")
        return token

    async def is_valid_session(self, token: str | None) -> bool:
        """Return whether ``token`` belongs to an issued session."""
        if not token:
            return False
        result = await self.db.execute(select(AuthSession.token).where(AuthSession.token == token))
        return result.scalar_one_or_none() is not None
