# ruff: noqa: SIM117
"""
Unit tests for SettingsService.

Covers the key/value store, secret updates and model key resolution.
"""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import SQLAlchemyError

from app.domains.settings.service import AUTOMATION_API_KEY, GEMINI_API_KEY, SettingsService
from app.exceptions.base import ConfigurationError


class TestSettingsService:
    """Test cases for SettingsService."""

    @pytest.mark.asyncio
    async def test_get_missing_key(self, test_db):
        assert await SettingsService(test_db).get("missing") is None

    @pytest.mark.asyncio
    async def test_set_inserts_then_updates(self, test_db):
        service = SettingsService(test_db)

        await service.set(GEMINI_API_KEY, "first")
        await service.set(GEMINI_API_KEY, "second")

        assert await service.get(GEMINI_API_KEY) == "second"

    @pytest.mark.asyncio
    async def test_set_database_error(self, test_db):
        service = SettingsService(test_db)

        with patch.object(test_db, "commit", side_effect=SQLAlchemyError("Database error")):
            with patch.object(test_db, "rollback") as mock_rollback:
                with pytest.raises(SQLAlchemyError):
                    await service.set(GEMINI_API_KEY, "value")
                mock_rollback.assert_called_once()

    @pytest.mark.asyncio
    async def test_status_reports_presence_only(self, test_db):
        service = SettingsService(test_db)
        assert await service.get_status() == {
            "gemini_api_key_set": False,
            "automation_api_key_set": False,
        }

        await service.set(AUTOMATION_API_KEY, "auto")

        assert await service.get_status() == {
            "gemini_api_key_set": False,
            "automation_api_key_set": True,
        }

    @pytest.mark.asyncio
    async def test_update_secrets_trims_and_ignores_blank(self, test_db):
        service = SettingsService(test_db)
        await service.set(AUTOMATION_API_KEY, "kept")

        await service.update_secrets(gemini_api_key="  gm-key  ", automation_api_key="   ")

        assert await service.get(GEMINI_API_KEY) == "gm-key"
        assert await service.get(AUTOMATION_API_KEY) == "kept"

    @pytest.mark.asyncio
    async def test_resolve_prefers_stored_key(self, test_db, test_settings):
        service = SettingsService(test_db)
        await service.set(GEMINI_API_KEY, "stored-key")

        assert await service.resolve_model_api_key(test_settings) == "stored-key"

    @pytest.mark.asyncio
    async def test_resolve_falls_back_to_environment(self, test_db, test_settings):
        result = await SettingsService(test_db).resolve_model_api_key(test_settings)

        assert result == test_settings.gemini_api_key

    @pytest.mark.asyncio
    async def test_resolve_without_any_key(self, test_db, test_settings):
        settings = test_settings.model_copy(update={"gemini_api_key": None})

        with pytest.raises(ConfigurationError) as exc_info:
            await SettingsService(test_db).resolve_model_api_key(settings)

        assert "Gemini API key not set" in exc_info.value.message
