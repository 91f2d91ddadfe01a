"""Base schemas for the application."""

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Base schema class with common configuration."""
    model_config = ConfigDict(from_attributes=True)


class RequestSchema(BaseModel):
    """Base schema for request bodies.

    Clients send camelCase keys; fields declare them as aliases while the
    snake_case names stay usable in code.
    """
    model_config = ConfigDict(populate_by_name=True)


class OkResponse(BaseSchema):
    """Plain acknowledgement body."""
    ok: bool = True
