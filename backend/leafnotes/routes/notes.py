"""
LeafNotes Backend — Notes Route Handlers
==========================================

What:  CRUD, search and share-link endpoints for notes.
How:   Extracts query parameters and bodies, delegates to NoteService /
       ShareService, returns JSON (camelCase).
Who:   Called by the Python client (NotesApi) and any other frontend.

Endpoints:
    GET    /api/notes?search=&folderId=   list (updatedAt desc)
    POST   /api/notes                     create
    GET    /api/notes/{id}                detail
    PATCH  /api/notes/{id}                partial update
    DELETE /api/notes/{id}                delete
    POST   /api/notes/{id}/share          issue (or return) share token
    DELETE /api/notes/{id}/share          revoke share token

Caching:
    Notes are mutable and edited continuously by autosave, so every response
    is sent with Cache-Control: no-store.
"""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from leafnotes.database import get_db_session
from leafnotes.schemas.common import ErrorResponse, SuccessResponse, resolve_id
from leafnotes.schemas.note import NoteCreate, NoteResponse, NoteUpdate, ShareTokenResponse
from leafnotes.services.note_service import note_service
from leafnotes.services.share_service import share_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/notes", tags=["Notes"])

NOT_FOUND = {404: {"description": "Note not found", "model": ErrorResponse}}
SERVER_ERROR = {500: {"description": "Server error", "model": ErrorResponse}}


def note_path_id(note_id: str = Path(description="Note ID")) -> UUID:
    """Path id of a note; a non-UUID is an unknown note (404)."""
    return resolve_id(note_id, "note")


@router.get(
    "",
    response_model=List[NoteResponse],
    responses={**SERVER_ERROR},
    summary="List notes, optionally searched and filtered by folder",
    description=(
        "Returns every matching note, most recently updated first, each with its "
        "folder. `search` matches title or content (case-insensitive substring); "
        "`folderId` restricts to one folder. Both filters combine with AND."
    ),
)
async def list_notes(
    response: Response,
    search: Optional[str] = Query(
        default=None,
        description="Substring to look for in title or content",
    ),
    folder_id: Optional[str] = Query(
        default=None,
        alias="folderId",
        description="Only notes filed in this folder",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> List[NoteResponse]:
    notes = await note_service.list_notes(db, search=search, folder_id=folder_id)

    response.headers["X-Total-Count"] = str(len(notes))
    response.headers["Cache-Control"] = "no-store"
    return notes


@router.post(
    "",
    response_model=NoteResponse,
    responses={**SERVER_ERROR},
    summary="Create a note",
)
async def create_note(
    body: Optional[NoteCreate] = None,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    """Creates a note; title defaults to "Untitled", content to "", folder to none."""
    body = body or NoteCreate()
    return await note_service.create_note(
        db,
        title=body.title,
        content=body.content,
        folder_id=body.target_folder_id(),
    )


@router.get(
    "/{note_id}",
    response_model=NoteResponse,
    responses={**NOT_FOUND, **SERVER_ERROR},
    summary="Get a single note by ID",
)
async def get_note(
    response: Response,
    note_id: UUID = Depends(note_path_id),
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    result = await note_service.get_note(db, note_id)
    response.headers["Cache-Control"] = "no-store"
    return result


@router.patch(
    "/{note_id}",
    response_model=NoteResponse,
    responses={**NOT_FOUND, **SERVER_ERROR},
    summary="Update title, content and/or folder of a note",
    description=(
        "Only the keys present in the body are changed. `folderId: null` moves the "
        "note out of its folder. `updatedAt` is refreshed."
    ),
)
async def update_note(
    body: NoteUpdate,
    note_id: UUID = Depends(note_path_id),
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.update_note(db, note_id, body.to_changes())


@router.delete(
    "/{note_id}",
    response_model=SuccessResponse,
    responses={**NOT_FOUND, **SERVER_ERROR},
    summary="Delete a note",
)
async def delete_note(
    note_id: UUID = Depends(note_path_id),
    db: AsyncSession = Depends(get_db_session),
) -> SuccessResponse:
    return await note_service.delete_note(db, note_id)


@router.post(
    "/{note_id}/share",
    response_model=ShareTokenResponse,
    responses={**NOT_FOUND, **SERVER_ERROR},
    summary="Create (or return the existing) public share link token",
)
async def share_note(
    note_id: UUID = Depends(note_path_id),
    db: AsyncSession = Depends(get_db_session),
) -> ShareTokenResponse:
    return await share_service.issue_share_token(db, note_id)


@router.delete(
    "/{note_id}/share",
    response_model=SuccessResponse,
    responses={**NOT_FOUND, **SERVER_ERROR},
    summary="Revoke the public share link",
)
async def unshare_note(
    note_id: UUID = Depends(note_path_id),
    db: AsyncSession = Depends(get_db_session),
) -> SuccessResponse:
    return await share_service.revoke_share_token(db, note_id)
