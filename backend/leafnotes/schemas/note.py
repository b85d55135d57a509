"""
LeafNotes Backend — Note Schemas
==================================

What:  Pydantic models defining the note API contract, plus the three-state
       partial update structure shared by the service layer and the client.
How:   FastAPI validates request bodies with these models and serializes
       responses through them (camelCase on the wire).

Partial updates:
    PATCH /api/notes/{id} distinguishes three states per field:
        absent from the body   → leave unchanged     (UNSET)
        present with a value   → set to that value
        present as null        → set to null (folderId only: unfile)
    NoteUpdate.to_changes() turns the validated body into a NoteChanges,
    reading pydantic's `model_fields_set` to tell "absent" from "null".
"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Union

from pydantic import Field, field_validator

from leafnotes.schemas.common import CamelModel, resolve_id
from leafnotes.schemas.folder import FolderSummary


# ══════════════════════════════════════════════════════════════════════════
# Three-state partial update
# ══════════════════════════════════════════════════════════════════════════


class Unset:
    """Sentinel type for "field not specified"."""

    _instance: Optional["Unset"] = None

    def __new__(cls) -> "Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = Unset()


@dataclass(frozen=True)
class NoteChanges:
    """
    Explicit partial update of a note.

    Each field is UNSET (leave unchanged), a value, or, for folder_id only,
    None (unfile the note).

    Example:
        NoteChanges(title="Plan")          # rename only
        NoteChanges(folder_id=None)        # move to unfiled
    """

    title: Union[str, Unset] = UNSET
    content: Union[str, Unset] = UNSET
    folder_id: Union[uuid.UUID, None, Unset] = UNSET

    FIELDS = ("title", "content", "folder_id")

    def specified(self) -> Dict[str, Any]:
        """The fields that carry a change, keyed by attribute name."""
        changes = {}
        for name in self.FIELDS:
            value = getattr(self, name)
            if value is not UNSET:
                changes[name] = value
        return changes

    def is_empty(self) -> bool:
        return not self.specified()

    def to_payload(self) -> Dict[str, Any]:
        """JSON body for PATCH /api/notes/{id}; absent fields are omitted."""
        payload: Dict[str, Any] = {}
        for name, value in self.specified().items():
            if name == "folder_id":
                payload["folderId"] = str(value) if value is not None else None
            else:
                payload[name] = value
        return payload


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _resolve_folder(folder_id: Optional[str]) -> Optional[uuid.UUID]:
    if folder_id is None:
        return None
    return resolve_id(folder_id, "folder")


class NoteCreate(CamelModel):
    """
    Body of POST /api/notes.

    Defaults: title "Untitled", content "", unfiled. Empty strings are
    treated like omitted fields. A folderId that is not a UUID fails with
    NotFoundError when resolved, like any other unknown folder id.
    """
    title: Optional[str] = Field(default=None, description="Note title")
    content: Optional[str] = Field(default=None, description="Rich-text HTML")
    folder_id: Optional[str] = Field(default=None, description="Folder to file the note in")

    @field_validator("folder_id", mode="before")
    @classmethod
    def empty_folder_is_unfiled(cls, v: Any) -> Any:
        return _blank_to_none(v)

    def target_folder_id(self) -> Optional[uuid.UUID]:
        return _resolve_folder(self.folder_id)


class NoteUpdate(CamelModel):
    """
    Body of PATCH /api/notes/{id}.

    Only keys present in the body are applied. `folderId: null` unfiles the
    note; `title: null` and `content: null` are ignored. A malformed
    folderId raises NotFoundError from to_changes().
    """
    title: Optional[str] = Field(default=None, description="New title")
    content: Optional[str] = Field(default=None, description="New rich-text HTML")
    folder_id: Optional[str] = Field(default=None, description="New folder, or null to unfile")

    @field_validator("folder_id", mode="before")
    @classmethod
    def empty_folder_is_unfiled(cls, v: Any) -> Any:
        return _blank_to_none(v)

    def to_changes(self) -> NoteChanges:
        sent = self.model_fields_set
        return NoteChanges(
            title=self.title if "title" in sent and self.title is not None else UNSET,
            content=self.content if "content" in sent and self.content is not None else UNSET,
            folder_id=_resolve_folder(self.folder_id) if "folder_id" in sent else UNSET,
        )


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(CamelModel):
    """
    Full representation of a note, including its folder (or null).

    Returned by every note endpoint except the public shared-note route.
    """
    id: uuid.UUID = Field(description="Unique note identifier")
    title: str = Field(description="Note title")
    content: str = Field(description="Rich-text HTML")
    folder_id: Optional[uuid.UUID] = Field(default=None, description="Owning folder, null when unfiled")
    folder: Optional[FolderSummary] = Field(default=None, description="Owning folder record")
    share_token: Optional[str] = Field(default=None, description="Public link token, null when not shared")
    created_at: datetime = Field(description="Creation timestamp (UTC)")
    updated_at: datetime = Field(description="Last title/content/folder change (UTC)")


class ShareTokenResponse(CamelModel):
    """Returned by POST /api/notes/{id}/share."""
    share_token: str = Field(description="Opaque URL-safe token for the public link")


class SharedNoteResponse(CamelModel):
    """
    Read-only projection served to anonymous readers of a share link.

    Deliberately limited to these five fields: folderId, folder and
    shareToken are never part of this model.
    """
    id: uuid.UUID = Field(description="Note identifier")
    title: str = Field(description="Note title")
    content: str = Field(description="Rich-text HTML")
    created_at: datetime = Field(description="Creation timestamp (UTC)")
    updated_at: datetime = Field(description="Last edit (UTC)")
