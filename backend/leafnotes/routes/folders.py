"""
LeafNotes Backend — Folder Route Handlers
===========================================

What:  GET/POST /api/folders and PATCH/DELETE /api/folders/{id}.
How:   Thin handlers: parse the request, delegate to FolderService, return
       the response model. Errors are mapped by the global handlers.
"""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from leafnotes.database import get_db_session
from leafnotes.schemas.common import ErrorResponse, SuccessResponse, resolve_id
from leafnotes.schemas.folder import FolderCreate, FolderRename, FolderResponse
from leafnotes.services.folder_service import folder_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/folders", tags=["Folders"])


def folder_path_id(folder_id: str = Path(description="Folder ID")) -> UUID:
    """Path id of a folder; a non-UUID is an unknown folder (404)."""
    return resolve_id(folder_id, "folder")


@router.get(
    "",
    response_model=List[FolderResponse],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List folders with note counts",
)
async def list_folders(db: AsyncSession = Depends(get_db_session)) -> List[FolderResponse]:
    """All folders sorted by name, each with `noteCount`."""
    return await folder_service.list_folders(db)


@router.post(
    "",
    response_model=FolderResponse,
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="Create a folder",
)
async def create_folder(
    body: Optional[FolderCreate] = None,
    db: AsyncSession = Depends(get_db_session),
) -> FolderResponse:
    """Creates a folder; the name defaults to "New Folder"."""
    return await folder_service.create_folder(db, name=body.name if body else None)


@router.patch(
    "/{folder_id}",
    response_model=FolderResponse,
    responses={
        404: {"description": "Folder not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Rename a folder",
)
async def rename_folder(
    body: FolderRename,
    folder_id: UUID = Depends(folder_path_id),
    db: AsyncSession = Depends(get_db_session),
) -> FolderResponse:
    return await folder_service.rename_folder(db, folder_id, body.name)


@router.delete(
    "/{folder_id}",
    response_model=SuccessResponse,
    responses={
        404: {"description": "Folder not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Delete a folder (its notes become unfiled)",
)
async def delete_folder(
    folder_id: UUID = Depends(folder_path_id),
    db: AsyncSession = Depends(get_db_session),
) -> SuccessResponse:
    return await folder_service.delete_folder(db, folder_id)
