"""Unit tests for AuthService."""

from unittest.mock import patch

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from app.domains.auth.service import AuthService
from app.exceptions.base import AuthenticationError, ConfigurationError
from models import AuthSession


async def count_sessions(db) -> int:
    return (await db.execute(select(func.count()).select_from(AuthSession))).scalar_one()


class TestAuthService:
    """Test cases for AuthService."""

    @pytest.mark.asyncio
    async def test_login_issues_session(self, test_db, test_settings):
        service = AuthService(test_db, test_settings)

        token = await service.login(test_settings.master_password)

        assert token
        assert await service.is_valid_session(token) is True
        assert await count_sessions(test_db) == 1

    @pytest.mark.asyncio
    async def test_each_login_gets_a_new_token(self, test_db, test_settings):
        service = AuthService(test_db, test_settings)

        first = await service.login(test_settings.master_password)
        second = await service.login(test_settings.master_password)

        assert first != second
        assert await service.is_valid_session(first) is True

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, test_db, test_settings):
        service = AuthService(test_db, test_settings)

        with pytest.raises(AuthenticationError) as exc_info:
            await service.login("wrong")

        assert exc_info.value.status_code == 401
        assert await count_sessions(test_db) == 0

    @pytest.mark.asyncio
    async def test_login_without_configured_password(self, test_db, test_settings):
        settings = test_settings.model_copy(update={"master_password": None})

        with pytest.raises(ConfigurationError) as exc_info:
            await AuthService(test_db, settings).login("")

        assert exc_info.value.status_code == 500
        assert await count_sessions(test_db) == 0

    @pytest.mark.asyncio
    async def test_login_database_error_rolls_back(self, test_db, test_settings):
        service = AuthService(test_db, test_settings)

        with patch.object(test_db, "commit", side_effect=SQLAlchemyError("Database error")):
            with patch.object(test_db, "rollback") as mock_rollback:
                with pytest.raises(SQLAlchemyError):
                    await service.login(test_settings.master_password)
                mock_rollback.assert_called_once()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", [None, "", "never-issued"])
    async def test_unknown_session_is_invalid(self, test_db, test_settings, token):
        assert await AuthService(test_db, test_settings).is_valid_session(token) is False
