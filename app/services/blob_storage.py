"""Blob storage for chat attachments."""

import asyncio
import logging
import re
import secrets
import time
from functools import partial
from pathlib import Path

from app.exceptions.base import StorageError

logger = logging.getLogger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def build_blob_key(chat_id: str, filename: str, prefix: str = "") -> str:
    """Build ``"<chat_id>/<unique suffix>-<filename>"``.

    The suffix is the epoch time in milliseconds plus a random token, so two
    uploads of the same name never collide. The filename is reduced to a
    path-safe form for the key only; the attachment row keeps the original.
    """
    safe_name = _UNSAFE_KEY_CHARS.sub("_", Path(filename).name).strip("._") or "file"
    suffix = f"{int(time.time() * 1000)}-{secrets.token_hex(4)}"
    return f"{chat_id}/{prefix}{suffix}-{safe_name}"


class LocalBlobStore:
    """Key-addressed blob storage on the local filesystem.

    Keys map to paths below ``root``. File I/O runs in the default executor
    so request handling is not blocked. Failures surface as ``StorageError``.
    """

    def __init__(self, root: str | Path):
        """Initialize the store rooted at ``root`` (created on demand)."""
        self.root = Path(root).resolve()

    def _path_for(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if self.root not in path.parents:
            raise StorageError("Invalid blob key", details={"key": key})
        return path

    async def _run(self, func, *args):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(func, *args))

    @staticmethod
    def _write(path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

    @staticmethod
    def _read(path: Path) -> bytes | None:
        if not path.is_file():
            return None
        return path.read_bytes()

    @staticmethod
    def _remove(path: Path) -> None:
        path.unlink(missing_ok=True)

    async def put(self, key: str, data: bytes) -> None:
        """Store ``data`` under ``key``, replacing any previous blob."""
        path = self._path_for(key)
        try:
            await self._run(self._write, path, data)
        except OSError as e:
            logger.error(f"Failed to write blob {key}: {str(e)}")
            raise StorageError("Failed to store attachment") from e

    async def get(self, key: str) -> bytes | None:
        """Return the blob stored under ``key``, or ``None`` when absent."""
        path = self._path_for(key)
        try:
            return await self._run(self._read, path)
        except OSError as e:
            logger.error(f"Failed to read blob {key}: {str(e)}")
            raise StorageError("Failed to read attachment") from e

    async def delete(self, key: str) -> None:
        """Delete the blob under ``key``; deleting a missing key is a no-op."""
        path = self._path_for(key)
        try:
            await self._run(self._remove, path)
        except OSError as e:
            logger.error(f"Failed to delete blob {key}: {str(e)}")
            raise StorageError("Failed to delete attachment") from e
