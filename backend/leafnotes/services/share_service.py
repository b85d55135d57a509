"""
LeafNotes Backend — Share Service (Public Read-Only Links)
============================================================

What:  Issues, revokes and resolves the opaque tokens behind public note links.
How:   A token is `secrets.token_urlsafe(share_token_bytes)`: at least 128 bits
       of randomness in the URL-safe base64 alphabet. It is stored in the
       UNIQUE notes.share_token column.
Who:   Called by POST/DELETE /api/notes/{id}/share and GET /api/shared/{token}.

Token lifecycle:
    issue   → returns the existing token if the note is already shared,
              otherwise generates and stores a new one
    revoke  → clears the token (idempotent)
    resolve → exact match on the token, read-only projection

    No expiry and no scoping beyond reading one note. Issuing and revoking
    never change the note's updated_at.

Collisions:
    Each new token is written inside a SAVEPOINT. If the unique constraint
    rejects it, the savepoint is rolled back and tenacity retries with a fresh
    token, up to settings.share_token_max_attempts. Running out of attempts
    raises DatabaseError; a collision never fails silently.
"""

import logging
import secrets
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from tenacity import (
    AsyncRetrying,
    RetryError,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
)

from leafnotes.config import settings
from leafnotes.exceptions import DatabaseError, NotFoundError, ShareTokenCollisionError
from leafnotes.models.note import Note
from leafnotes.schemas.common import SuccessResponse
from leafnotes.schemas.note import SharedNoteResponse, ShareTokenResponse
from leafnotes.services.note_service import note_service

logger = logging.getLogger(__name__)


def generate_share_token() -> str:
    """New random URL-safe token."""
    return secrets.token_urlsafe(settings.share_token_bytes)


class ShareService:
    """Share-link operations over the notes table."""

    async def _store_new_token(self, db: AsyncSession, note: Note) -> str:
        token = generate_share_token()
        try:
            async with db.begin_nested():
                note.share_token = token
                await db.flush()
        except IntegrityError:
            # The savepoint rollback expired the note; reload it before the next attempt
            await db.refresh(note)
            logger.warning("Share token collision for note %s, regenerating", note.id)
            raise ShareTokenCollisionError(note_id=str(note.id))
        return token

    async def issue_share_token(self, db: AsyncSession, note_id: UUID) -> ShareTokenResponse:
        """
        Returns the note's share token, creating one if the note is not shared yet.

        Idempotent: while a note stays shared, every call returns the same token.

        Raises:
            NotFoundError: Note does not exist (→ 404)
            DatabaseError: Store failure, or collisions on every attempt (→ 500)
        """
        try:
            note = await note_service.load_note(db, note_id)
            if note.share_token:
                return ShareTokenResponse(share_token=note.share_token)

            async for attempt in AsyncRetrying(
                retry=retry_if_exception_type(ShareTokenCollisionError),
                stop=stop_after_attempt(settings.share_token_max_attempts),
                before_sleep=before_sleep_log(logger, logging.WARNING),
            ):
                with attempt:
                    token = await self._store_new_token(db, note)

            logger.info("Note %s shared", note_id)
            return ShareTokenResponse(share_token=token)
        except RetryError:
            logger.error(
                "Could not generate a unique share token for note %s after %d attempts",
                note_id,
                settings.share_token_max_attempts,
            )
            raise DatabaseError(
                message="Could not create a share link. Please try again.",
                context={"note_id": str(note_id), "attempts": settings.share_token_max_attempts},
            )
        except NotFoundError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error sharing note %s: %s", note_id, str(e))
            raise DatabaseError(
                message="Could not create a share link. Please try again.",
                context={"note_id": str(note_id)},
            )

    async def revoke_share_token(self, db: AsyncSession, note_id: UUID) -> SuccessResponse:
        """
        Clears the note's share token. Revoking an unshared note succeeds.

        Raises:
            NotFoundError: Note does not exist (→ 404)
        """
        try:
            note = await note_service.load_note(db, note_id)
            if note.share_token is not None:
                note.share_token = None
                await db.flush()
                logger.info("Note %s unshared", note_id)
            return SuccessResponse(success=True)
        except NotFoundError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error unsharing note %s: %s", note_id, str(e))
            raise DatabaseError(
                message="Could not remove the share link. Please try again.",
                context={"note_id": str(note_id)},
            )

    async def resolve_shared_note(self, db: AsyncSession, token: str) -> SharedNoteResponse:
        """
        Looks up the note shared under `token` (exact match).

        Returns only id, title, content, createdAt and updatedAt.

        Raises:
            NotFoundError: No note is shared under this token (→ 404)
        """
        try:
            result = await db.execute(select(Note).where(Note.share_token == token))
            note = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error resolving share token: %s", str(e))
            raise DatabaseError(message="Could not load the shared note. Please try again.")

        if note is None:
            # Never log the token itself: it is a bearer secret
            raise NotFoundError(resource="shared note", message="Shared note not found")

        return SharedNoteResponse(
            id=note.id,
            title=note.title,
            content=note.content,
            created_at=note.created_at,
            updated_at=note.updated_at,
        )


# ── Singleton Instance ────────────────────────────────────────────────────
share_service = ShareService()
