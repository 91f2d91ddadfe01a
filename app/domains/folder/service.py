"""Folder service: create, rename and delete-with-reparent."""

import logging

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions.base import ValidationError
from app.exceptions.chat import FolderNotFoundError
from models import Chat, Folder

logger = logging.getLogger(__name__)

DEFAULT_FOLDER_NAME = "New folder"


class FolderService:
    """Service class for folder operations."""

    def __init__(self, db: AsyncSession):
        """Initialize folder service with database session."""
        self.db = db

    async def list_folders(self) -> list[Folder]:
        result = await self.db.execute(select(Folder).order_by(Folder.created_at, Folder.name))
        return list(result.scalars().all())

    async def get_folder(self, folder_id: str) -> Folder:
        """Get a folder by ID.

        Raises:
            FolderNotFoundError: If the folder does not exist
        """
        folder = await self.db.get(Folder, folder_id)
        if folder is None:
            raise FolderNotFoundError()
        return folder

    async def create_folder(self, name: str | None = None, parent_id: str | None = None) -> Folder:
        """Create a folder, optionally nested under ``parent_id``."""
        if parent_id:
            await self.get_folder(parent_id)

        folder = Folder(name=(name or "").strip() or DEFAULT_FOLDER_NAME, parent_id=parent_id or None)
        try:
            self.db.add(folder)
            await self.db.commit()
            await self.db.refresh(folder)
        except SQLAlchemyError:
            await self.db.rollback()
            raise
        return folder

    async def rename_folder(self, folder_id: str, name: str) -> Folder:
        """Rename a folder.

        Raises:
            ValidationError: If the trimmed name is empty
            FolderNotFoundError: If the folder does not exist
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Folder name required")

        folder = await self.get_folder(folder_id)
        try:
            folder.name = name
            await self.db.commit()
            await self.db.refresh(folder)
        except SQLAlchemyError:
            await self.db.rollback()
            raise
        return folder

    async def delete_folder(self, folder_id: str) -> None:
        """Delete a folder, moving its chats and child folders to the root.

        Chats and messages are never deleted here.
        """
        folder = await self.get_folder(folder_id)
        try:
            await self.db.execute(update(Chat).where(Chat.folder_id == folder_id).values(folder_id=None))
            await self.db.execute(
                update(Folder).where(Folder.parent_id == folder_id).values(parent_id=None)
            )
            await self.db.delete(folder)
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise
        logger.info(f"Deleted folder {folder_id}; contents moved to root")
