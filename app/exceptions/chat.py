"""Chat, folder and attachment exceptions."""

from .base import NotFoundError, ValidationError


class ChatNotFoundError(NotFoundError):
    """Raised when a chat is not found."""

    def __init__(self, message: str = "Chat not found"):
        super().__init__(message=message, error_code="CHAT_NOT_FOUND")


class FolderNotFoundError(NotFoundError):
    """Raised when a folder is not found."""

    def __init__(self, message: str = "Folder not found"):
        super().__init__(message=message, error_code="FOLDER_NOT_FOUND")


class FileTooLargeError(ValidationError):
    """Raised when an attachment exceeds the upload ceiling."""

    def __init__(self, max_bytes: int):
        super().__init__(
            message=f"File too large (max {max_bytes // (1024 * 1024)}MB)",
            details={"max_bytes": max_bytes},
            error_code="FILE_TOO_LARGE",
        )
