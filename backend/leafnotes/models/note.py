"""
LeafNotes Backend — Note SQLAlchemy Model
===========================================

What:  ORM model representing the `notes` table.
How:   Inherits from the shared DeclarativeBase; Alembic reads this for migrations.
Who:   Used by NoteService and ShareService, and by Alembic.

Table Design:
    - UUID primary key generated in Python
    - title: "Untitled" when empty on creation
    - content: opaque HTML produced by the client's rich-text editor
    - folder_id: nullable FK, ON DELETE SET NULL (a folder never owns notes)
    - share_token: nullable and UNIQUE; non-null makes the note publicly
      readable through GET /api/shared/{token}
    - updated_at: set explicitly by NoteService on title/content/folder
      changes only; share and unshare leave it alone, so there is no
      ORM-level onupdate hook

Indexes:
    idx_notes_updated_at:  listing order (most recently edited first)
    idx_notes_folder_id:   folder filter and per-folder note counts
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from leafnotes.database import Base, UTCDateTime, utcnow

if TYPE_CHECKING:
    from leafnotes.models.folder import Folder

DEFAULT_NOTE_TITLE = "Untitled"


class Note(Base):
    """
    A titled unit of rich-text content, optionally filed into a folder.

    Lifecycle:
        1. Created unfiled or inside a folder
        2. Title/content/folder edited in place (autosave), updated_at bumped
        3. Optionally shared (token issued) and unshared (token cleared)
        4. Deleted explicitly; deleting its folder only unfiles it
    """

    __tablename__ = "notes"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique identifier, immutable",
    )

    title: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default=DEFAULT_NOTE_TITLE,
        comment="Note title",
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        comment="Rich-text HTML produced by the editor",
    )

    folder_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("folders.id", ondelete="SET NULL"),
        nullable=True,
        default=None,
        comment="Owning folder; NULL means unfiled",
    )

    share_token: Mapped[Optional[str]] = mapped_column(
        String(128),
        nullable=True,
        unique=True,
        default=None,
        comment="Public read-only link secret; NULL when not shared",
    )

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        default=utcnow,
        comment="When this note was created (UTC)",
    )

    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        default=utcnow,
        comment="Last title/content/folder change (UTC)",
    )

    # Loaded with every SELECT of notes so responses can embed the folder
    folder: Mapped[Optional["Folder"]] = relationship("Folder", lazy="selectin")

    def __repr__(self) -> str:
        return (
            f"<Note(id={self.id}, title='{self.title}', "
            f"folder_id={self.folder_id}, shared={self.share_token is not None})>"
        )


Index("idx_notes_updated_at", Note.updated_at.desc())
Index("idx_notes_folder_id", Note.folder_id)
