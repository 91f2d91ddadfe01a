"""Unit tests for the local blob store and blob key construction."""

import re
from unittest.mock import patch

import pytest

from app.exceptions.base import StorageError
from app.services.blob_storage import LocalBlobStore, build_blob_key


class TestBuildBlobKey:
    """Test cases for build_blob_key."""

    def test_key_layout(self):
        key = build_blob_key("chat-1", "report.pdf")

        assert re.fullmatch(r"chat-1/\d{13}-[0-9a-f]{8}-report\.pdf", key)

    def test_prefix(self):
        key = build_blob_key("chat-1", "photo.png", prefix="api-")

        assert re.fullmatch(r"chat-1/api-\d{13}-[0-9a-f]{8}-photo\.png", key)

    def test_same_name_never_collides(self):
        assert build_blob_key("c", "a.txt") != build_blob_key("c", "a.txt")

    @pytest.mark.parametrize(
        "filename,suffix",
        [
            ("../../etc/passwd", "-passwd"),
            ("my file (1).png", "-my_file_1_.png"),
            ("...", "-file"),
        ],
    )
    def test_filename_is_sanitized(self, filename, suffix):
        key = build_blob_key("c", filename)

        assert key.startswith("c/")
        assert key.endswith(suffix)
        assert ".." not in key


class TestLocalBlobStore:
    """Test cases for LocalBlobStore."""

    @pytest.mark.asyncio
    async def test_put_get_delete(self, tmp_path):
        store = LocalBlobStore(tmp_path)

        await store.put("chat/1-a.txt", b"hello")
        assert (tmp_path / "chat" / "1-a.txt").read_bytes() == b"hello"
        assert await store.get("chat/1-a.txt") == b"hello"

        await store.delete("chat/1-a.txt")
        assert await store.get("chat/1-a.txt") is None

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, tmp_path):
        assert await LocalBlobStore(tmp_path).get("nope/missing.bin") is None

    @pytest.mark.asyncio
    async def test_delete_missing_is_noop(self, tmp_path):
        await LocalBlobStore(tmp_path).delete("nope/missing.bin")

    @pytest.mark.asyncio
    async def test_rejects_keys_outside_root(self, tmp_path):
        store = LocalBlobStore(tmp_path / "blobs")

        with pytest.raises(StorageError):
            await store.put("../escape.txt", b"x")
        assert not (tmp_path / "escape.txt").exists()

    @pytest.mark.asyncio
    async def test_write_failure_raises_storage_error(self, tmp_path):
        store = LocalBlobStore(tmp_path)

        with patch.object(LocalBlobStore, "_write", side_effect=OSError("disk full")):
            with pytest.raises(StorageError) as exc_info:
                await store.put("chat/a.txt", b"x")

        assert exc_info.value.error_code == "STORAGE_ERROR"
        assert "disk full" not in exc_info.value.message

    @pytest.mark.asyncio
    async def test_delete_failure_raises_storage_error(self, tmp_path):
        store = LocalBlobStore(tmp_path)

        with patch.object(LocalBlobStore, "_remove", side_effect=PermissionError("denied")):
            with pytest.raises(StorageError):
                await store.delete("chat/a.txt")
