"""Conversation assembly for generation requests.

Turns a chat's stored history and attachments into the ordered turn list sent
to the model:

    [system?] -> [history...] -> [image turns...] -> [file summary?] -> [new message]
"""

import base64
import logging
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions.base import StorageError
from app.schemas.generation import InlineData, Part, Turn, TurnRole
from app.services.blob_storage import LocalBlobStore
from models import Attachment, Chat, Message, MessageRole

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 40
DEFAULT_MAX_INLINE_IMAGES = 3

IMAGE_LABEL = "Reference image: {name}"
FILES_SUMMARY_PREFIX = "Files attached to this chat, consider their content if relevant: "


def history_turn(message: Message) -> Turn:
    """Map a stored message to a turn with a normalized role."""
    if MessageRole.from_stored(message.role) == MessageRole.MODEL:
        role = TurnRole.MODEL
    else:
        role = TurnRole.USER
    return Turn.text(role, message.content)


def image_turn(attachment: Attachment, data: bytes) -> Turn:
    return Turn(
        role=TurnRole.USER,
        parts=[
            Part.from_text(IMAGE_LABEL.format(name=attachment.name)),
            Part(
                inline_data=InlineData(
                    mime_type=attachment.mime_type,
                    data=base64.b64encode(data).decode("ascii"),
                )
            ),
        ],
    )


def files_summary_turn(attachments: Sequence[Attachment]) -> Turn | None:
    """One user turn listing non-image files as ``name (mime)``, or None."""
    if not attachments:
        return None
    listing = ", ".join(f"{a.name} ({a.mime_type})" for a in attachments)
    return Turn.text(TurnRole.USER, FILES_SUMMARY_PREFIX + listing)


class ConversationAssembler:
    """Builds the turn sequence for one generation request."""

    def __init__(
        self,
        db: AsyncSession,
        blob_store: LocalBlobStore,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        max_inline_images: int = DEFAULT_MAX_INLINE_IMAGES,
    ):
        self.db = db
        self.blob_store = blob_store
        self.history_limit = history_limit
        self.max_inline_images = max_inline_images

    async def assemble(self, chat: Chat, new_message: str) -> list[Turn]:
        """Assemble the full turn list for ``chat`` followed by ``new_message``.

        Does not persist anything; the caller stores the new message.
        """
        turns: list[Turn] = []

        history = await self.recent_messages(chat.id)
        turns.extend(history_turn(message) for message in history)

        turns.extend(await self.attachment_turns(chat.id))

        system_prompt = (chat.system_prompt or "").strip()
        if system_prompt:
            turns.insert(0, Turn.text(TurnRole.SYSTEM, system_prompt))

        turns.append(Turn.text(TurnRole.USER, new_message))
        return turns

    async def recent_messages(self, chat_id: str) -> list[Message]:
        """Most recent messages of the chat, oldest first."""
        if self.history_limit <= 0:
            return []
        query = (
            select(Message)
            .where(Message.chat_id == chat_id)
            .order_by(Message.created_at.desc(), Message.id.desc())
            .limit(self.history_limit)
        )
        result = await self.db.execute(query)
        return list(reversed(result.scalars().all()))

    async def attachment_turns(self, chat_id: str) -> list[Turn]:
        """Inline image turns for the oldest images, then one file summary turn."""
        query = (
            select(Attachment)
            .where(Attachment.chat_id == chat_id)
            .order_by(Attachment.created_at, Attachment.id)
        )
        result = await self.db.execute(query)
        attachments = result.scalars().all()
        if not attachments:
            return []

        images = [a for a in attachments if a.is_image]
        others = [a for a in attachments if not a.is_image]

        turns: list[Turn] = []
        for image in images[: self.max_inline_images]:
            data = await self._read_blob(image)
            if data:
                turns.append(image_turn(image, data))

        summary = files_summary_turn(others)
        if summary is not None:
            turns.append(summary)
        return turns

    async def _read_blob(self, attachment: Attachment) -> bytes | None:
        """Read an image blob; a failed or empty read drops only that image."""
        try:
            data = await self.blob_store.get(attachment.blob_key)
        except StorageError as e:
            logger.warning(f"Skipping image {attachment.blob_key}: {e.message}")
            return None
        if not data:
            logger.warning(f"Skipping image {attachment.blob_key}: blob is missing or empty")
            return None
        return data
