# python
# app/core/config.py
"""Configuration settings for the Private Chat Console API.

Uses Pydantic BaseSettings for environment variable management. A single
``Settings`` instance is built at process start and handed to ``create_app``.
"""
from enum import Enum

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentEnum(str, Enum):
    development = "development"
    testing = "testing"
    staging = "staging"
    production = "production"


class LogLevelEnum(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class Settings(BaseSettings):
    # Pydantic v2 settings configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ===== Application Settings =====
    app_name: str = Field(default="Private Chat Console API", description="Application name")
    environment: EnvironmentEnum = Field(
        default=EnvironmentEnum.development, description="Environment type"
    )
    debug: bool = Field(default=False, description="Debug mode")
    version: str = Field(default="1.0.0", description="Application version")

    # ===== Security Settings =====
    master_password: str | None = Field(
        default=None, description="Operator password required to open a session"
    )

    # ===== Database Settings =====
    database_url: str = Field(
        default="sqlite+aiosqlite:///./chat_console.db", description="Database connection URL"
    )

    # ===== AI Service (Gemini) =====
    gemini_api_key: str | None = Field(
        default=None,
        description="Fallback Gemini API key, used when none is stored through /api/settings",
    )
    gemini_model: str = Field(default="gemini-2.5-flash", description="Gemini model to use")
    gemini_api_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Gemini REST API base URL",
    )
    ai_request_timeout: int = Field(default=60, description="AI request timeout in seconds")

    # ===== File Storage Settings =====
    blob_storage_path: str = Field(
        default="./data/blobs", description="Directory holding attachment blobs"
    )

    # ===== Application Limits =====
    max_upload_bytes: int = Field(
        default=15 * 1024 * 1024, description="Maximum attachment size in bytes (15MB)"
    )
    chat_history_limit: int = Field(
        default=40, description="Stored messages sent to the model per request"
    )
    max_inline_images: int = Field(
        default=3, description="Image attachments inlined into each model request"
    )
    message_list_limit: int = Field(
        default=200, description="Messages returned by the history endpoint"
    )

    # ===== CORS Settings =====
    allowed_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173,http://127.0.0.1:5173",
        description="Allowed CORS origins (comma-separated)",
    )

    @property
    def allowed_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    # ===== Monitoring & Logging =====
    log_level: LogLevelEnum = Field(default=LogLevelEnum.INFO, description="Logging level")

    # ===== Server Settings =====
    host: str = Field(default="127.0.0.1", description="Host to bind the server")
    port: int = Field(default=8000, description="Port to bind the server")

    # ===== Computed Properties =====
    @property
    def is_development(self) -> bool:
        return self.environment == EnvironmentEnum.development

    @property
    def is_production(self) -> bool:
        return self.environment == EnvironmentEnum.production

    @property
    def has_master_password(self) -> bool:
        return bool(self.master_password)

    # ===== Validation Methods =====
    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v):
        if v and isinstance(v, str):
            lv = v.lower()
            if lv in ["dev", "develop"]:
                return "development"
            if lv in ["prod"]:
                return "production"
            return lv
        return v

    @field_validator("max_upload_bytes")
    @classmethod
    def validate_upload_size(cls, v):
        if v <= 0:
            raise ValueError("Maximum upload size must be positive")
        if v > 100 * 1024 * 1024:
            raise ValueError("Maximum upload size cannot exceed 100MB")
        return v

    @field_validator("chat_history_limit", "max_inline_images", "message_list_limit")
    @classmethod
    def validate_non_negative(cls, v):
        if v < 0:
            raise ValueError("Limits cannot be negative")
        return v


def get_config_summary(settings: Settings) -> dict:
    """Non-secret configuration overview for health reporting."""
    return {
        "app_name": settings.app_name,
        "version": settings.version,
        "environment": settings.environment,
        "debug": settings.debug,
        "password_configured": settings.has_master_password,
        "gemini_model": settings.gemini_model,
        "database_configured": bool(settings.database_url),
    }


__all__ = [
    "Settings",
    "get_config_summary",
    "EnvironmentEnum",
    "LogLevelEnum",
]
