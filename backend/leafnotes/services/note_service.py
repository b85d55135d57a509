"""
LeafNotes Backend — Note Service
==================================

What:  CRUD and search over notes.
How:   Stateless methods receiving the request's AsyncSession. Writes are
       flushed here; the transaction is committed by get_db_session().
Who:   Called by the /api/notes route handlers.

Timestamps:
    updated_at is assigned explicitly whenever title, content or folder
    changes. There is no ORM `onupdate` hook: share and unshare
    (ShareService) leave updated_at untouched.

Search:
    Substring match on title OR content, case-insensitive on every backend
    (ILIKE on PostgreSQL, lower() LIKE on SQLite), with LIKE wildcards in the
    search text escaped so "%" and "_" match literally.
"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import desc, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from leafnotes.database import utcnow
from leafnotes.exceptions import DatabaseError, NotFoundError
from leafnotes.models.note import DEFAULT_NOTE_TITLE, Note
from leafnotes.schemas.common import SuccessResponse
from leafnotes.schemas.folder import FolderSummary
from leafnotes.schemas.note import NoteChanges, NoteResponse

logger = logging.getLogger(__name__)


def note_response(note: Note) -> NoteResponse:
    """Builds the API representation of a note whose folder relation is loaded."""
    folder = None
    if note.folder is not None:
        folder = FolderSummary(
            id=note.folder.id,
            name=note.folder.name,
            created_at=note.folder.created_at,
            updated_at=note.folder.updated_at,
        )
    return NoteResponse(
        id=note.id,
        title=note.title,
        content=note.content,
        folder_id=note.folder_id,
        folder=folder,
        share_token=note.share_token,
        created_at=note.created_at,
        updated_at=note.updated_at,
    )


def _parse_folder_filter(folder_id: str) -> UUID:
    """UUID for a folder filter; raises ValueError for a malformed id."""
    return UUID(folder_id.strip())


class NoteService:
    """
    Business logic layer for note operations.

    Responsibilities:
        - list_notes():  filtered listing, most recently updated first
        - get_note():    single note with not-found handling
        - create_note(): defaults for missing fields
        - update_note(): three-state partial update
        - delete_note(): removal with not-found handling
    """

    async def load_note(self, db: AsyncSession, note_id: UUID) -> Note:
        """
        Fetches the ORM row or raises NotFoundError.

        Shared with ShareService, which needs the row rather than a response model.
        """
        result = await db.execute(select(Note).where(Note.id == note_id))
        note = result.scalar_one_or_none()
        if note is None:
            raise NotFoundError(resource="note", resource_id=str(note_id))
        return note

    async def list_notes(
        self,
        db: AsyncSession,
        search: Optional[str] = None,
        folder_id: Optional[str] = None,
    ) -> List[NoteResponse]:
        """
        List notes ordered by updated_at DESC, each with its folder.

        Filters (combined with AND, empty values ignored):
            search:    title or content contains the text (case-insensitive)
            folder_id: only notes filed in that folder; a malformed id
                       matches nothing

        Query plan (both filters):
            SELECT * FROM notes
            WHERE (title ILIKE :pattern OR content ILIKE :pattern)
              AND folder_id = :folder_id
            ORDER BY updated_at DESC, created_at DESC
        """
        query = select(Note)

        if folder_id:
            try:
                query = query.where(Note.folder_id == _parse_folder_filter(folder_id))
            except ValueError:
                logger.info("Ignoring listing for malformed folder id %r", folder_id)
                return []

        if search:
            query = query.where(
                or_(
                    Note.title.icontains(search, autoescape=True),
                    Note.content.icontains(search, autoescape=True),
                )
            )

        query = query.order_by(desc(Note.updated_at), desc(Note.created_at))

        try:
            result = await db.execute(query)
            notes = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing notes: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve notes. Please try again.",
                context={"error_type": type(e).__name__},
            )

        return [note_response(note) for note in notes]

    async def get_note(self, db: AsyncSession, note_id: UUID) -> NoteResponse:
        """
        Retrieve a single note by ID.

        Raises:
            NotFoundError: Note with given ID does not exist (→ 404)
            DatabaseError: Query execution failed (→ 500)
        """
        try:
            note = await self.load_note(db, note_id)
            return note_response(note)
        except NotFoundError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error fetching note %s: %s", note_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the note. Please try again.",
                context={"note_id": str(note_id)},
            )

    async def create_note(
        self,
        db: AsyncSession,
        title: Optional[str] = None,
        content: Optional[str] = None,
        folder_id: Optional[UUID] = None,
    ) -> NoteResponse:
        """
        Create a note. Empty title → "Untitled", empty content → "", no folder → unfiled.

        The response embeds the folder record when the note is filed.
        """
        try:
            now = utcnow()
            note = Note(
                title=title or DEFAULT_NOTE_TITLE,
                content=content or "",
                folder_id=folder_id or None,
                created_at=now,
                updated_at=now,
            )
            db.add(note)
            await db.flush()
            await db.refresh(note, attribute_names=["folder"])
            logger.info("Note created: %s (folder=%s)", note.id, note.folder_id)
            return note_response(note)
        except SQLAlchemyError as e:
            logger.error("Database error creating note: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the note. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def update_note(
        self,
        db: AsyncSession,
        note_id: UUID,
        changes: NoteChanges,
    ) -> NoteResponse:
        """
        Apply the specified fields of `changes` and refresh updated_at.

        Unspecified fields are left as they are; folder_id=None unfiles.

        Raises:
            NotFoundError: Note does not exist (→ 404)
        """
        try:
            note = await self.load_note(db, note_id)
            applied = changes.specified()
            for name, value in applied.items():
                setattr(note, name, value)
            note.updated_at = utcnow()
            await db.flush()
            if "folder_id" in applied:
                await db.refresh(note, attribute_names=["folder"])
            logger.info("Note updated: %s (fields=%s)", note_id, sorted(applied))
            return note_response(note)
        except NotFoundError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error updating note %s: %s", note_id, str(e))
            raise DatabaseError(
                message="Could not save the note. Please try again.",
                context={"note_id": str(note_id)},
            )

    async def delete_note(self, db: AsyncSession, note_id: UUID) -> SuccessResponse:
        """
        Delete a note.

        Raises:
            NotFoundError: Note does not exist (→ 404)
        """
        try:
            note = await self.load_note(db, note_id)
            await db.delete(note)
            await db.flush()
            logger.info("Note deleted: %s", note_id)
            return SuccessResponse(success=True)
        except NotFoundError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error deleting note %s: %s", note_id, str(e))
            raise DatabaseError(
                message="Could not delete the note. Please try again.",
                context={"note_id": str(note_id)},
            )


# ── Singleton Instance ────────────────────────────────────────────────────
note_service = NoteService()
