"""Attachment service: metadata rows plus blobs."""

import base64
import binascii
import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions.base import StorageError, ValidationError
from app.exceptions.chat import FileTooLargeError
from app.schemas.chat import ExternalAttachment
from app.services.blob_storage import LocalBlobStore, build_blob_key
from models import Attachment

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"
DEFAULT_FILENAME = "file"


def decode_attachment_payload(payload: str) -> bytes:
    """Decode base64 the way browsers' ``atob`` does.

    ASCII whitespace (MIME line wrapping) is dropped and missing ``=``
    padding is restored before the strict decode.

    Raises:
        binascii.Error: If the payload holds characters outside the alphabet
    """
    compact = "".join(payload.split())
    compact += "=" * (-len(compact) % 4)
    return base64.b64decode(compact, validate=True)


class AttachmentService:
    """Service class for chat attachments."""

    def __init__(self, db: AsyncSession, blob_store: LocalBlobStore, max_upload_bytes: int):
        """Initialize attachment service.

        Args:
            db: Async database session for metadata rows.
            blob_store: Store holding the file bytes.
            max_upload_bytes: Size ceiling applied to every new attachment.
        """
        self.db = db
        self.blob_store = blob_store
        self.max_upload_bytes = max_upload_bytes

    async def list_attachments(self, chat_id: str) -> list[Attachment]:
        """Attachment metadata for a chat, oldest first."""
        query = (
            select(Attachment)
            .where(Attachment.chat_id == chat_id)
            .order_by(Attachment.created_at, Attachment.id)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    def check_size(self, size: int | None) -> None:
        """Reject content above the upload ceiling.

        Raises:
            FileTooLargeError: If ``size`` exceeds the ceiling
        """
        if size is not None and size > self.max_upload_bytes:
            raise FileTooLargeError(self.max_upload_bytes)

    async def save(
        self,
        chat_id: str,
        name: str | None,
        mime_type: str | None,
        data: bytes,
        key_prefix: str = "",
    ) -> Attachment:
        """Write the blob, then its metadata row.

        The size check happens before anything is written. When the row insert
        fails the blob is removed again.

        Raises:
            FileTooLargeError: If the data exceeds the ceiling
            StorageError: If the blob cannot be written
            SQLAlchemyError: If the row cannot be inserted
        """
        self.check_size(len(data))

        name = name or DEFAULT_FILENAME
        mime_type = mime_type or DEFAULT_MIME_TYPE
        key = build_blob_key(chat_id, name, prefix=key_prefix)

        await self.blob_store.put(key, data)

        attachment = Attachment(chat_id=chat_id, name=name, mime_type=mime_type, blob_key=key)
        try:
            self.db.add(attachment)
            await self.db.commit()
            await self.db.refresh(attachment)
        except SQLAlchemyError:
            await self.db.rollback()
            logger.error(f"Failed to record attachment {key}; removing blob")
            try:
                await self.blob_store.delete(key)
            except StorageError:
                logger.error(f"Orphaned blob left behind: {key}")
            raise

        logger.info(f"Stored attachment {attachment.id} ({mime_type}, {len(data)} bytes) for chat {chat_id}")
        return attachment

    async def save_from_api(self, chat_id: str, items: list[ExternalAttachment]) -> list[Attachment]:
        """Decode and store base64 attachments sent to the automation endpoint.

        Items without a payload are skipped. All items are decoded and
        size-checked before any of them is written.

        Raises:
            ValidationError: If a payload is not valid base64
            FileTooLargeError: If a decoded payload exceeds the ceiling
        """
        decoded: list[tuple[ExternalAttachment, bytes]] = []
        for item in items:
            if not item.base64:
                continue
            try:
                data = decode_attachment_payload(item.base64)
            except (binascii.Error, ValueError) as e:
                raise ValidationError(
                    f"Attachment '{item.filename}' is not valid base64",
                    details={"filename": item.filename},
                ) from e
            self.check_size(len(data))
            decoded.append((item, data))

        saved = []
        for item, data in decoded:
            saved.append(await self.save(chat_id, item.filename, item.mime, data, key_prefix="api-"))
        return saved
