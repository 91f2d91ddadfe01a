"""Attachment API controller."""

import logging

from fastapi import APIRouter, Depends, File, Path, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings
from app.core.dependencies import get_app_settings, get_blob_store, require_session
from app.database import get_db
from app.domains.attachment.service import AttachmentService
from app.domains.chat.service import ChatService
from app.schemas.attachment import AttachmentResponse
from app.services.blob_storage import LocalBlobStore

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/chats",
    tags=["Attachments"],
    dependencies=[Depends(require_session)],
)


def get_attachment_service(
    db: AsyncSession = Depends(get_db),
    blob_store: LocalBlobStore = Depends(get_blob_store),
    settings: Settings = Depends(get_app_settings),
) -> AttachmentService:
    return AttachmentService(db, blob_store, settings.max_upload_bytes)


@router.get("/{chat_id}/attachments", response_model=list[AttachmentResponse])
async def list_attachments(
    chat_id: str = Path(..., description="Chat ID"),
    db: AsyncSession = Depends(get_db),
    service: AttachmentService = Depends(get_attachment_service),
):
    """List attachment metadata for a chat."""
    await ChatService(db).get_chat(chat_id)
    return await service.list_attachments(chat_id)


@router.post("/{chat_id}/attachments", response_model=AttachmentResponse)
async def upload_attachment(
    chat_id: str = Path(..., description="Chat ID"),
    file: UploadFile = File(..., description="File to attach"),
    db: AsyncSession = Depends(get_db),
    service: AttachmentService = Depends(get_attachment_service),
):
    """Upload a file to a chat (multipart field ``file``)."""
    await ChatService(db).get_chat(chat_id)

    # Reject on the declared size before reading the body into memory
    service.check_size(file.size)
    data = await file.read()

    return await service.save(chat_id, file.filename, file.content_type, data)
