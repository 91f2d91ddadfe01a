"""Schemas for the turn sequence sent to the generation API."""

from enum import Enum

from pydantic import Field

from .base import BaseSchema


class TurnRole(str, Enum):
    """Role of an assembled turn."""

    SYSTEM = "system"
    USER = "user"
    MODEL = "model"


class InlineData(BaseSchema):
    """Binary payload carried inline, base64 encoded."""

    mime_type: str
    data: str


class Part(BaseSchema):
    """One content segment of a turn: either text or inline data."""

    text: str | None = None
    inline_data: InlineData | None = None

    @classmethod
    def from_text(cls, text: str) -> "Part":
        return cls(text=text)


class Turn(BaseSchema):
    """One entry of the request sent to the generation API."""

    role: TurnRole
    parts: list[Part] = Field(default_factory=list)

    @classmethod
    def text(cls, role: TurnRole, text: str) -> "Turn":
        return cls(role=role, parts=[Part.from_text(text)])
