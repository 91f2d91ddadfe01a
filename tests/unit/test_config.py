"""
Unit tests for Configuration module.

Covers defaults, environment aliases, validators and computed properties.
"""

from unittest.mock import patch

import pytest
from pydantic import ValidationError

from app.core.config import EnvironmentEnum, LogLevelEnum, Settings, get_config_summary


def make_settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


class TestSettings:
    """Test cases for Settings configuration."""

    def test_default_settings(self):
        with patch.dict("os.environ", {}, clear=True):
            settings = make_settings()

        assert settings.app_name == "Private Chat Console API"
        assert settings.environment == EnvironmentEnum.development
        assert settings.master_password is None
        assert settings.database_url.startswith("sqlite+aiosqlite://")
        assert settings.gemini_model == "gemini-2.5-flash"
        assert settings.max_upload_bytes == 15 * 1024 * 1024
        assert settings.chat_history_limit == 40
        assert settings.max_inline_images == 3
        assert settings.message_list_limit == 200
        assert settings.log_level == LogLevelEnum.INFO

    def test_reads_environment(self):
        env = {"MASTER_PASSWORD": "from-env", "GEMINI_MODEL": "gemini-other", "PORT": "9000"}
        with patch.dict("os.environ", env, clear=True):
            settings = make_settings()

        assert settings.master_password == "from-env"
        assert settings.has_master_password is True
        assert settings.gemini_model == "gemini-other"
        assert settings.port == 9000

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("dev", EnvironmentEnum.development),
            ("PROD", EnvironmentEnum.production),
            ("Testing", EnvironmentEnum.testing),
        ],
    )
    def test_environment_aliases(self, value, expected):
        assert make_settings(environment=value).environment == expected

    def test_environment_flags(self):
        assert make_settings(environment="production").is_production is True
        assert make_settings(environment="development").is_development is True

    def test_invalid_environment(self):
        with pytest.raises(ValidationError):
            make_settings(environment="moon")

    @pytest.mark.parametrize("value", [0, -1, 101 * 1024 * 1024])
    def test_upload_size_bounds(self, value):
        with pytest.raises(ValidationError):
            make_settings(max_upload_bytes=value)

    def test_negative_limits_rejected(self):
        with pytest.raises(ValidationError):
            make_settings(chat_history_limit=-1)

    def test_allowed_origins_list(self):
        settings = make_settings(allowed_origins=" http://a.test , ,http://b.test")

        assert settings.allowed_origins_list == ["http://a.test", "http://b.test"]

    def test_config_summary_has_no_secrets(self):
        settings = make_settings(master_password="hunter2", gemini_api_key="secret-key")

        summary = get_config_summary(settings)

        assert summary["password_configured"] is True
        assert "hunter2" not in str(summary)
        assert "secret-key" not in str(summary)
