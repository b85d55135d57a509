"""
LeafNotes Backend — Folder SQLAlchemy Model
=============================================

What:  ORM model representing the `folders` table.
Who:   Used by FolderService for CRUD and by Alembic for schema management.

Table Design:
    - UUID primary key generated in Python (works on PostgreSQL and SQLite)
    - name: display string, never empty ("New Folder" when omitted)
    - note counts are derived per query from notes.folder_id, never stored
    - A folder does not own its notes: there is no ORM collection and no
      cascade. Deleting a folder unfiles its notes (see FolderService).
"""

import uuid
from datetime import datetime

from sqlalchemy import String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from leafnotes.database import Base, UTCDateTime, utcnow

DEFAULT_FOLDER_NAME = "New Folder"


class Folder(Base):
    """A named grouping container for notes."""

    __tablename__ = "folders"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique identifier, immutable",
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default=DEFAULT_FOLDER_NAME,
        comment="Display name, sorted ascending in listings",
    )

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        default=utcnow,
        comment="When this folder was created (UTC)",
    )

    # Refreshed explicitly by FolderService on every rename
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        default=utcnow,
        comment="Last rename (UTC)",
    )

    def __repr__(self) -> str:
        return f"<Folder(id={self.id}, name='{self.name}')>"
