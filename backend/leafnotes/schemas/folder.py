"""
LeafNotes Backend — Folder Schemas
====================================

What:  Request bodies and response models for the /api/folders endpoints.
Who:   FolderService builds the responses; NotesApi parses them client-side.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import Field

from leafnotes.schemas.common import CamelModel


class FolderSummary(CamelModel):
    """
    Folder as embedded in a note (`note.folder`).

    Carries no note count; counts are only computed by folder endpoints.
    """
    id: uuid.UUID = Field(description="Unique folder identifier")
    name: str = Field(description="Display name")
    created_at: datetime = Field(description="Creation timestamp (UTC)")
    updated_at: datetime = Field(description="Last rename (UTC)")


class FolderResponse(FolderSummary):
    """Folder annotated with the number of notes currently filed in it."""
    note_count: int = Field(default=0, ge=0, description="Notes whose folderId is this folder")


class FolderCreate(CamelModel):
    """Body of POST /api/folders. A missing or blank name becomes "New Folder"."""
    name: Optional[str] = Field(default=None, description="Folder name")


class FolderRename(CamelModel):
    """Body of PATCH /api/folders/{id}. A missing or blank name keeps the current one."""
    name: Optional[str] = Field(default=None, description="New folder name")
