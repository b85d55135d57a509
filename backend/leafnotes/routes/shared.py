"""
LeafNotes Backend — Shared Note Route
=======================================

What:  GET /api/shared/{token}: the unauthenticated, read-only path to a
       note published with a share link.
How:   Delegates to ShareService.resolve_shared_note(); the response model
       exposes only id, title, content, createdAt and updatedAt.
"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from leafnotes.database import get_db_session
from leafnotes.schemas.common import ErrorResponse
from leafnotes.schemas.note import SharedNoteResponse
from leafnotes.services.share_service import share_service

router = APIRouter(prefix="/api/shared", tags=["Shared"])


@router.get(
    "/{token}",
    response_model=SharedNoteResponse,
    responses={
        404: {"description": "No note is shared under this token", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Read a shared note",
)
async def get_shared_note(
    token: str,
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> SharedNoteResponse:
    result = await share_service.resolve_shared_note(db, token)
    # Revocation must take effect immediately for every reader
    response.headers["Cache-Control"] = "no-store"
    return result
