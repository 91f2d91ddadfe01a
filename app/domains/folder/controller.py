"""Folder API controller."""

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import require_session
from app.database import get_db
from app.domains.folder.service import FolderService
from app.schemas.base import OkResponse
from app.schemas.folder import FolderCreate, FolderRename, FolderResponse

router = APIRouter(
    prefix="/api/folders",
    tags=["Folders"],
    dependencies=[Depends(require_session)],
)


@router.get("", response_model=list[FolderResponse])
async def list_folders(db: AsyncSession = Depends(get_db)):
    """List all folders; the client builds the tree from ``parent_id``."""
    return await FolderService(db).list_folders()


@router.post("", response_model=FolderResponse)
async def create_folder(body: FolderCreate, db: AsyncSession = Depends(get_db)):
    """Create a folder."""
    return await FolderService(db).create_folder(name=body.name, parent_id=body.parent_id)


@router.get("/{folder_id}", response_model=FolderResponse)
async def get_folder(
    folder_id: str = Path(..., description="Folder ID"),
    db: AsyncSession = Depends(get_db),
):
    return await FolderService(db).get_folder(folder_id)


@router.patch("/{folder_id}", response_model=OkResponse)
async def rename_folder(
    body: FolderRename,
    folder_id: str = Path(..., description="Folder ID"),
    db: AsyncSession = Depends(get_db),
):
    """Rename a folder."""
    await FolderService(db).rename_folder(folder_id, body.name)
    return OkResponse(ok=True)


@router.delete("/{folder_id}", response_model=OkResponse)
async def delete_folder(
    folder_id: str = Path(..., description="Folder ID"),
    db: AsyncSession = Depends(get_db),
):
    """Delete a folder; its chats and subfolders move to the root."""
    await FolderService(db).delete_folder(folder_id)
    return OkResponse(ok=True)
