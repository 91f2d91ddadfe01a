"""Chat API controller with FastAPI endpoints."""

import logging

from fastapi import APIRouter, Body, Depends, Header, Path
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings
from app.core.dependencies import (
    get_app_settings,
    get_blob_store,
    get_generation_gateway,
    require_session,
)
from app.database import get_db
from app.domains.chat.service import ChatService
from app.schemas.chat import (
    ChatCreate,
    ChatDeletionResponse,
    ChatSettingsResponse,
    ChatSettingsUpdate,
    ChatSummaryResponse,
    ExternalMessageRequest,
    MessageResponse,
    ReplyResponse,
    SendMessageRequest,
)
from app.services.blob_storage import LocalBlobStore
from app.services.gemini_gateway import GeminiGateway

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/chats",
    tags=["chat"],
    dependencies=[Depends(require_session)],
)

# Authenticated by the per-chat automation key instead of a session
external_router = APIRouter(prefix="/api/chats", tags=["chat"])


def get_chat_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    blob_store: LocalBlobStore = Depends(get_blob_store),
    gateway: GeminiGateway = Depends(get_generation_gateway),
) -> ChatService:
    return ChatService(db, settings=settings, blob_store=blob_store, gateway=gateway)


@router.get("", response_model=list[ChatSummaryResponse])
async def list_chats(service: ChatService = Depends(get_chat_service)):
    """List all chats, newest first."""
    return await service.list_chats()


@router.post("", response_model=ChatSummaryResponse)
async def create_chat(
    body: ChatCreate | None = Body(None),
    service: ChatService = Depends(get_chat_service),
):
    """Create a chat.

    Args:
        body: Optional title and folder

    Returns:
        The new chat
    """
    body = body or ChatCreate()
    return await service.create_chat(title=body.title, folder_id=body.folder_id)


@router.post("/{chat_id}/delete", response_model=ChatDeletionResponse)
async def delete_chat(
    chat_id: str = Path(..., description="Chat ID"),
    service: ChatService = Depends(get_chat_service),
):
    """Delete a chat with its messages and attachments.

    Blobs that could not be removed are listed in ``failedBlobKeys``.
    """
    report = await service.delete_chat(chat_id)
    return ChatDeletionResponse(
        ok=True,
        deleted_messages=report.deleted_messages,
        deleted_attachments=report.deleted_attachments,
        failed_blob_keys=report.failed_blob_keys,
    )


@router.get("/{chat_id}/messages", response_model=list[MessageResponse])
async def get_messages(
    chat_id: str = Path(..., description="Chat ID"),
    service: ChatService = Depends(get_chat_service),
):
    """Get the chat history, oldest first."""
    return await service.list_messages(chat_id)


@router.post("/{chat_id}/messages", response_model=ReplyResponse)
async def send_message(
    body: SendMessageRequest,
    chat_id: str = Path(..., description="Chat ID"),
    service: ChatService = Depends(get_chat_service),
):
    """Send a message and return the model reply.

    Args:
        body: The new user message
        chat_id: Chat ID

    Returns:
        The model reply
    """
    reply = await service.send_message(chat_id, body.message)
    return ReplyResponse(reply=reply)


@router.get("/{chat_id}/settings", response_model=ChatSettingsResponse)
async def get_chat_settings(
    chat_id: str = Path(..., description="Chat ID"),
    service: ChatService = Depends(get_chat_service),
):
    """Get title, folder, system prompt and automation key of a chat."""
    return await service.get_chat(chat_id)


@router.post("/{chat_id}/settings", response_model=ChatSettingsResponse)
async def update_chat_settings(
    body: ChatSettingsUpdate,
    chat_id: str = Path(..., description="Chat ID"),
    service: ChatService = Depends(get_chat_service),
):
    """Update chat settings; ``regenerateApiKey: true`` rotates the automation key."""
    return await service.update_settings(chat_id, body)


@external_router.post("/{chat_id}/external", response_model=ReplyResponse)
async def external_message(
    body: ExternalMessageRequest,
    chat_id: str = Path(..., description="Chat ID"),
    x_chat_api_key: str | None = Header(None, description="Per-chat automation key"),
    service: ChatService = Depends(get_chat_service),
):
    """Automation entry point authenticated by the chat's API key.

    Attachments in the body are stored with the chat before the request is
    assembled, so they are visible to this and later requests.
    """
    reply = await service.send_external_message(chat_id, x_chat_api_key, body)
    return ReplyResponse(reply=reply)
