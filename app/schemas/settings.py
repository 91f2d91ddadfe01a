"""Global settings schemas."""

from pydantic import Field

from .base import BaseSchema, RequestSchema


class GlobalSettingsStatus(BaseSchema):
    """Which secrets are configured. Values themselves are never returned."""

    gemini_api_key_set: bool = Field(serialization_alias="geminiApiKeySet")
    automation_api_key_set: bool = Field(serialization_alias="automationApiKeySet")


class GlobalSettingsUpdate(RequestSchema):
    """Schema for storing secrets; blank values are ignored."""

    gemini_api_key: str | None = Field(None, alias="geminiApiKey")
    automation_api_key: str | None = Field(None, alias="automationApiKey")
