"""Folder schemas."""

from datetime import datetime

from pydantic import Field

from .base import BaseSchema, RequestSchema


class FolderCreate(RequestSchema):
    """Schema for creating a folder."""

    name: str | None = Field(None, max_length=255)
    parent_id: str | None = Field(None, alias="parentId")


class FolderRename(RequestSchema):
    """Schema for renaming a folder."""

    name: str = Field(default="", max_length=255)


class FolderResponse(BaseSchema):
    """Schema for folder response data."""

    id: str
    name: str
    parent_id: str | None = None
    created_at: datetime
