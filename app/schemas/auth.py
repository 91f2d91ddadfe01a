"""Authentication schemas."""

from pydantic import Field

from .base import BaseSchema, RequestSchema


class LoginRequest(RequestSchema):
    """Schema for the password login request."""

    password: str = Field(default="", description="Operator password")


class TokenResponse(BaseSchema):
    """Schema for a newly issued session token."""

    token: str
