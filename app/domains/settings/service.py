# app/domains/settings/service.py
"""Settings service for operator-managed secrets."""

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings
from app.exceptions.base import ConfigurationError
from models import Setting

GEMINI_API_KEY = "gemini_api_key"
AUTOMATION_API_KEY = "automation_api_key"


class SettingsService:
    """Service for the global key/value settings store."""

    def __init__(self, db: AsyncSession):
        """Initialize service with a database session."""
        self.db = db

    async def get(self, key: str) -> str | None:
        """
        Get a setting value.

        Args:
            key: Setting key

        Returns:
            The stored value, or None if the key was never set
        """
        result = await self.db.execute(select(Setting.value).where(Setting.key == key))
        return result.scalar_one_or_none()

    async def set(self, key: str, value: str) -> None:
        """
        Insert or update a setting. Concurrent writers race last-write-wins.

        Raises:
            SQLAlchemyError: If database operation fails
        """
        result = await self.db.execute(select(Setting).where(Setting.key == key))
        setting = result.scalar_one_or_none()

        try:
            if setting is None:
                self.db.add(Setting(key=key, value=value))
            else:
                setting.value = value
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise e

    async def get_status(self) -> dict[str, bool]:
        """Report which secrets are set without exposing them."""
        return {
            "gemini_api_key_set": bool(await self.get(GEMINI_API_KEY)),
            "automation_api_key_set": bool(await self.get(AUTOMATION_API_KEY)),
        }

    async def update_secrets(
        self,
        gemini_api_key: str | None = None,
        automation_api_key: str | None = None,
    ) -> None:
        """Store the provided secrets; blank values leave the current one untouched."""
        if gemini_api_key and gemini_api_key.strip():
            await self.set(GEMINI_API_KEY, gemini_api_key.strip())
        if automation_api_key and automation_api_key.strip():
            await self.set(AUTOMATION_API_KEY, automation_api_key.strip())

    async def resolve_model_api_key(self, settings: Settings) -> str:
        """
        Gemini key for outbound calls: the stored value, else the environment.

        Raises:
            ConfigurationError: If neither is configured
        """
        api_key = await self.get(GEMINI_API_KEY) or settings.gemini_api_key
        if not api_key:
            raise ConfigurationError("Gemini API key not set. Configure it in the UI.")
        return api_key
