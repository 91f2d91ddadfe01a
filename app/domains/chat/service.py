"""Chat service layer with Gemini generation."""

import logging
from dataclasses import dataclass, field

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings
from app.core.security import generate_chat_api_key, secrets_match
from app.domains.attachment.service import AttachmentService
from app.domains.chat.assembler import ConversationAssembler
from app.domains.folder.service import FolderService
from app.domains.settings.service import SettingsService
from app.exceptions.base import AuthenticationError, NotFoundError, StorageError, ValidationError
from app.exceptions.chat import ChatNotFoundError
from app.schemas.chat import ChatSettingsUpdate, ExternalMessageRequest
from app.services.blob_storage import LocalBlobStore
from app.services.gemini_gateway import GeminiGateway
from models import Attachment, Chat, Message, MessageRole
from models.chat import DEFAULT_CHAT_TITLE

logger = logging.getLogger(__name__)


@dataclass
class ChatDeletionReport:
    """Outcome of a cascading chat delete.

    Blob deletions that failed are listed instead of aborting the cascade;
    the chat, its messages and its attachment rows are gone either way.
    """

    chat_id: str
    deleted_messages: int = 0
    deleted_attachments: int = 0
    failed_blob_keys: list[str] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.failed_blob_keys


class ChatService:
    """Service class for chats, their message log and generation."""

    def __init__(
        self,
        db: AsyncSession,
        settings: Settings | None = None,
        blob_store: LocalBlobStore | None = None,
        gateway: GeminiGateway | None = None,
    ):
        """Initialize chat service.

        Args:
            db: Async database session for data operations.
            settings: Application settings; required for generation and uploads.
            blob_store: Attachment blob store; required for generation and deletes.
            gateway: Generation gateway; required for generation.
        """
        self.db = db
        self.settings = settings
        self.blob_store = blob_store
        self.gateway = gateway

    # Chat registry

    async def list_chats(self) -> list[Chat]:
        """All chats, newest first."""
        result = await self.db.execute(select(Chat).order_by(Chat.created_at.desc()))
        return list(result.scalars().all())

    async def get_chat(self, chat_id: str) -> Chat:
        """Get a chat by ID.

        Raises:
            ChatNotFoundError: If the chat does not exist
        """
        chat = await self.db.get(Chat, chat_id)
        if chat is None:
            raise ChatNotFoundError()
        return chat

    async def create_chat(self, title: str | None = None, folder_id: str | None = None) -> Chat:
        """Create a chat, optionally inside a folder."""
        if folder_id:
            await FolderService(self.db).get_folder(folder_id)

        chat = Chat(title=(title or "").strip() or DEFAULT_CHAT_TITLE, folder_id=folder_id or None)
        try:
            self.db.add(chat)
            await self.db.commit()
            await self.db.refresh(chat)
        except SQLAlchemyError:
            await self.db.rollback()
            raise

        logger.info(f"Created chat {chat.id}")
        return chat

    async def update_settings(self, chat_id: str, update: ChatSettingsUpdate) -> Chat:
        """Apply a settings update to a chat.

        Regenerating the automation key replaces the previous key at once.

        Raises:
            ChatNotFoundError: If the chat does not exist
            FolderNotFoundError: If the target folder does not exist
            ValidationError: If the update carries no change
        """
        chat = await self.get_chat(chat_id)
        provided = update.model_fields_set
        changed = False

        if "title" in provided and update.title is not None:
            chat.title = update.title.strip() or DEFAULT_CHAT_TITLE
            changed = True

        if "folder_id" in provided:
            if update.folder_id:
                await FolderService(self.db).get_folder(update.folder_id)
            chat.folder_id = update.folder_id or None
            changed = True

        if "system_prompt" in provided and update.system_prompt is not None:
            chat.system_prompt = update.system_prompt.strip() or None
            changed = True

        if update.regenerate_api_key:
            chat.api_key = generate_chat_api_key()
            logger.info(f"Rotated automation key for chat {chat_id}")
            changed = True

        if not changed:
            raise ValidationError("Nothing to update")

        try:
            await self.db.commit()
            await self.db.refresh(chat)
        except SQLAlchemyError:
            await self.db.rollback()
            raise
        return chat

    async def delete_chat(self, chat_id: str) -> ChatDeletionReport:
        """Delete a chat with all of its messages, attachment rows and blobs.

        A blob that cannot be deleted is logged and reported; the rest of the
        cascade still runs.
        """
        chat = await self.get_chat(chat_id)
        report = ChatDeletionReport(chat_id=chat_id)

        result = await self.db.execute(select(Attachment).where(Attachment.chat_id == chat_id))
        attachments = result.scalars().all()

        for attachment in attachments:
            try:
                await self._require_blob_store().delete(attachment.blob_key)
            except StorageError as e:
                logger.error(f"Failed to delete blob {attachment.blob_key}: {e.message}")
                report.failed_blob_keys.append(attachment.blob_key)

        try:
            messages_result = await self.db.execute(delete(Message).where(Message.chat_id == chat_id))
            attachments_result = await self.db.execute(
                delete(Attachment).where(Attachment.chat_id == chat_id)
            )
            await self.db.delete(chat)
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise

        report.deleted_messages = messages_result.rowcount or 0
        report.deleted_attachments = attachments_result.rowcount or 0

        if report.complete:
            logger.info(f"Deleted chat {chat_id}")
        else:
            logger.warning(
                f"Deleted chat {chat_id} with {len(report.failed_blob_keys)} "
                f"of {len(attachments)} blobs left behind"
            )
        return report

    # Message log

    async def list_messages(self, chat_id: str, limit: int | None = None) -> list[Message]:
        """Most recent messages of a chat, oldest first."""
        await self.get_chat(chat_id)
        if limit is None:
            limit = self.settings.message_list_limit if self.settings else 200

        query = (
            select(Message)
            .where(Message.chat_id == chat_id)
            .order_by(Message.created_at.desc(), Message.id.desc())
            .limit(limit)
        )
        result = await self.db.execute(query)
        return list(reversed(result.scalars().all()))

    async def append_message(self, chat_id: str, role: MessageRole, content: str) -> Message:
        """Append one entry to the chat's message log and commit it."""
        message = Message(chat_id=chat_id, role=role.value, content=content)
        try:
            self.db.add(message)
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise
        return message

    # Generation

    async def send_message(self, chat_id: str, text: str) -> str:
        """Send a message to the model within a chat and return the reply.

        The user message is committed before the outbound call, so it stays
        in the log even if generation fails. The reply is stored only on
        success.

        Raises:
            ChatNotFoundError: If the chat does not exist
            ConfigurationError: If no Gemini API key is configured
            UpstreamError: If the generation call fails
        """
        if not text:
            raise ValidationError("Message is required")

        chat = await self.get_chat(chat_id)
        return await self._generate_reply(chat, text)

    async def authenticate_external(self, chat_id: str, presented_key: str | None) -> Chat:
        """Resolve a chat for the automation endpoint by its API key.

        Raises:
            NotFoundError: If the chat does not exist or has no key
            AuthenticationError: If the presented key does not match
        """
        chat = await self.db.get(Chat, chat_id)
        if chat is None or not chat.api_key:
            raise NotFoundError("Chat or API key not found", error_code="CHAT_NOT_FOUND")

        if not secrets_match(presented_key, chat.api_key):
            logger.info(f"Rejected automation request for chat {chat_id}: invalid API key")
            raise AuthenticationError("Invalid API key")
        return chat

    async def send_external_message(
        self, chat_id: str, presented_key: str | None, request: ExternalMessageRequest
    ) -> str:
        """Handle an automation request: store attachments, then generate.

        Raises:
            NotFoundError: If the chat does not exist or has no key
            AuthenticationError: If the presented key does not match
            ValidationError: If the message is empty or an attachment is invalid
        """
        chat = await self.authenticate_external(chat_id, presented_key)

        if not request.message:
            raise ValidationError("Message is required")

        if request.attachments:
            attachments = AttachmentService(
                self.db, self._require_blob_store(), self._require_settings().max_upload_bytes
            )
            saved = await attachments.save_from_api(chat.id, request.attachments)
            if saved:
                logger.info(f"Stored {len(saved)} attachment(s) from automation request for chat {chat.id}")

        return await self._generate_reply(chat, request.message)

    async def _generate_reply(self, chat: Chat, text: str) -> str:
        settings = self._require_settings()
        assembler = ConversationAssembler(
            self.db,
            self._require_blob_store(),
            history_limit=settings.chat_history_limit,
            max_inline_images=settings.max_inline_images,
        )
        turns = await assembler.assemble(chat, text)

        await self.append_message(chat.id, MessageRole.USER, text)

        api_key = await SettingsService(self.db).resolve_model_api_key(settings)
        if self.gateway is None:
            raise RuntimeError("ChatService was created without a generation gateway")
        reply = await self.gateway.generate(turns, api_key)

        await self.append_message(chat.id, MessageRole.MODEL, reply)
        return reply

    def _require_settings(self) -> Settings:
        if self.settings is None:
            raise RuntimeError("ChatService was created without settings")
        return self.settings

    def _require_blob_store(self) -> LocalBlobStore:
        if self.blob_store is None:
            raise RuntimeError("ChatService was created without a blob store")
        return self.blob_store
