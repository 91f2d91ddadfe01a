"""Security related functions."""

import secrets
import uuid

CHAT_API_KEY_PREFIX = "chat_"


def generate_session_token() -> str:
    """Create an opaque, unguessable session token."""
    return secrets.token_urlsafe(32)


def generate_chat_api_key() -> str:
    """Create a per-chat automation key, e.g. ``chat_3f2c...`` (32 hex chars)."""
    return CHAT_API_KEY_PREFIX + uuid.uuid4().hex


def secrets_match(presented: str | None, expected: str | None) -> bool:
    """
    Compare a presented secret against the expected one in constant time.

    An unset expected value never matches, even an empty presented value.

    :param presented: Value supplied by the caller.
    :param expected: Configured or stored value.
    :return: ``True`` when both are set and equal.
    """
    if not expected or presented is None:
        return False
    return secrets.compare_digest(presented.encode("utf-8"), expected.encode("utf-8"))
