"""
LeafNotes Backend — Folder Service
====================================

What:  Business logic for listing, creating, renaming and deleting folders.
How:   Stateless methods receiving the request's AsyncSession; every folder
       returned carries a note count computed by a correlated subquery.
Who:   Called by the /api/folders route handlers.

Deletion policy:
    Notes are never deleted with their folder. delete_folder() first unfiles
    every note of the folder (folder_id = NULL) and then removes the folder
    row, in the same transaction. The FK's ON DELETE SET NULL gives the same
    result for deletes issued outside this service.
"""

import logging
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from leafnotes.database import utcnow
from leafnotes.exceptions import DatabaseError, NotFoundError
from leafnotes.models.folder import DEFAULT_FOLDER_NAME, Folder
from leafnotes.models.note import Note
from leafnotes.schemas.common import SuccessResponse
from leafnotes.schemas.folder import FolderResponse

logger = logging.getLogger(__name__)


def _note_count_column():
    return (
        select(func.count(Note.id))
        .where(Note.folder_id == Folder.id)
        .correlate(Folder)
        .scalar_subquery()
        .label("note_count")
    )


def _is_blank(name: Optional[str]) -> bool:
    return name is None or not name.strip()


def _folder_response(folder: Folder, note_count: int) -> FolderResponse:
    return FolderResponse(
        id=folder.id,
        name=folder.name,
        created_at=folder.created_at,
        updated_at=folder.updated_at,
        note_count=note_count or 0,
    )


class FolderService:
    """
    Business logic layer for folder operations.

    Error Handling Strategy:
        Missing rows raise NotFoundError. SQLAlchemy failures are logged and
        wrapped in DatabaseError so no driver detail reaches the client.
    """

    async def _get_folder(self, db: AsyncSession, folder_id: UUID) -> Folder:
        result = await db.execute(select(Folder).where(Folder.id == folder_id))
        folder = result.scalar_one_or_none()
        if folder is None:
            raise NotFoundError(resource="folder", resource_id=str(folder_id))
        return folder

    async def _with_count(self, db: AsyncSession, folder_id: UUID) -> Tuple[Folder, int]:
        result = await db.execute(
            select(Folder, _note_count_column()).where(Folder.id == folder_id)
        )
        row = result.one_or_none()
        if row is None:
            raise NotFoundError(resource="folder", resource_id=str(folder_id))
        return row[0], row[1]

    async def list_folders(self, db: AsyncSession) -> List[FolderResponse]:
        """
        All folders ordered by name ascending, each with its note count.

        Query plan:
            SELECT folders.*, (SELECT count(notes.id) FROM notes
                               WHERE notes.folder_id = folders.id) AS note_count
            FROM folders ORDER BY folders.name ASC
        """
        try:
            result = await db.execute(
                select(Folder, _note_count_column()).order_by(Folder.name.asc())
            )
            return [_folder_response(folder, count) for folder, count in result.all()]
        except SQLAlchemyError as e:
            logger.error("Database error listing folders: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve folders. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def create_folder(self, db: AsyncSession, name: Optional[str] = None) -> FolderResponse:
        """Creates a folder named `name`, or "New Folder" when name is missing or blank."""
        try:
            now = utcnow()
            folder = Folder(
                name=DEFAULT_FOLDER_NAME if _is_blank(name) else name,
                created_at=now,
                updated_at=now,
            )
            db.add(folder)
            await db.flush()
            logger.info("Folder created: %s (%s)", folder.id, folder.name)
            return _folder_response(folder, 0)
        except SQLAlchemyError as e:
            logger.error("Database error creating folder: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the folder. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def rename_folder(
        self,
        db: AsyncSession,
        folder_id: UUID,
        name: Optional[str],
    ) -> FolderResponse:
        """
        Renames a folder and refreshes its updated_at.

        A missing or blank name keeps the current name; updated_at still moves.

        Raises:
            NotFoundError: Folder does not exist (→ 404)
        """
        try:
            folder = await self._get_folder(db, folder_id)
            if not _is_blank(name):
                folder.name = name
            folder.updated_at = utcnow()
            await db.flush()
            folder, count = await self._with_count(db, folder_id)
            logger.info("Folder renamed: %s → %s", folder_id, folder.name)
            return _folder_response(folder, count)
        except NotFoundError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error renaming folder %s: %s", folder_id, str(e))
            raise DatabaseError(
                message="Could not rename the folder. Please try again.",
                context={"folder_id": str(folder_id)},
            )

    async def delete_folder(self, db: AsyncSession, folder_id: UUID) -> SuccessResponse:
        """
        Deletes a folder, leaving its notes in place as unfiled.

        The notes' updated_at is not touched: being unfiled by a folder
        deletion is not an edit of the note.

        Raises:
            NotFoundError: Folder does not exist (→ 404)
        """
        try:
            await self._get_folder(db, folder_id)
            unfiled = await db.execute(
                update(Note)
                .where(Note.folder_id == folder_id)
                .values(folder_id=None)
                .execution_options(synchronize_session=False)
            )
            await db.execute(delete(Folder).where(Folder.id == folder_id))
            # Drop identity-map copies so later reads see the unfiled rows
            db.expire_all()
            logger.info(
                "Folder deleted: %s (%d notes unfiled)",
                folder_id,
                unfiled.rowcount or 0,
            )
            return SuccessResponse(success=True)
        except NotFoundError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error deleting folder %s: %s", folder_id, str(e))
            raise DatabaseError(
                message="Could not delete the folder. Please try again.",
                context={"folder_id": str(folder_id)},
            )


# ── Singleton Instance ────────────────────────────────────────────────────
folder_service = FolderService()
