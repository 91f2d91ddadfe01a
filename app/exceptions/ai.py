# ruff: noqa: D107
"""Generation gateway exceptions."""

from typing import Any

from .base import BaseAppException


class UpstreamError(BaseAppException):
    """Exception raised when the generation API call fails.

    Covers transport failures, non-success statuses and unreadable response
    bodies alike. For a non-success status the upstream body is embedded in
    the message.
    """

    def __init__(
        self,
        message: str = "Generation failed",
        upstream_status: int | None = None,
        upstream_body: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.upstream_status = upstream_status
        self.upstream_body = upstream_body
        if details is None:
            details = {}
        if upstream_status is not None:
            details["upstream_status"] = upstream_status
        super().__init__(
            message=message,
            status_code=500,
            error_code="UPSTREAM_ERROR",
            details=details,
        )
