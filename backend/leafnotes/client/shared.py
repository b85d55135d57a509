"""
LeafNotes Client — Shared Note Viewer
=======================================

What:  Loads a publicly shared note for the read-only page behind a share
       link. Does not go through NotesStore: a reader of a shared link has
       no session, folders or note list.
How:   load_shared_note() never raises for request failures; it returns a
       SharedNoteView holding either the note or a message to display.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from leafnotes.client.api import NotesApi
from leafnotes.exceptions import ApiRequestError, NotFoundError
from leafnotes.schemas.note import SharedNoteResponse

logger = logging.getLogger(__name__)

NOT_SHARED_MESSAGE = "This note doesn't exist or is no longer shared."
LOAD_FAILED_MESSAGE = "Something went wrong loading this note."
NETWORK_FAILED_MESSAGE = "Failed to load note. Please try again."


@dataclass(frozen=True)
class SharedNoteView:
    """Exactly one of `note` and `error` is set."""

    note: Optional[SharedNoteResponse] = None
    error: Optional[str] = None


async def load_shared_note(api: NotesApi, token: str) -> SharedNoteView:
    """
    Resolves `token` to its note.

    Error messages:
        404 (unknown or revoked token) → NOT_SHARED_MESSAGE
        any other HTTP error           → LOAD_FAILED_MESSAGE
        server unreachable             → NETWORK_FAILED_MESSAGE
    """
    if not token:
        return SharedNoteView(error=NOT_SHARED_MESSAGE)

    try:
        note = await api.get_shared_note(token)
    except NotFoundError:
        return SharedNoteView(error=NOT_SHARED_MESSAGE)
    except ApiRequestError as e:
        if e.status_code == 0:
            return SharedNoteView(error=NETWORK_FAILED_MESSAGE)
        logger.warning("Shared note request failed with status %d", e.status_code)
        return SharedNoteView(error=LOAD_FAILED_MESSAGE)

    return SharedNoteView(note=note)
