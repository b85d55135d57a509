# Client package init
"""
LeafNotes — Python Client
===========================

What:  Everything a UI needs to drive the notes service.

Module Inventory:
    - api.py:    NotesApi, an httpx.AsyncClient wrapper for the /api routes
    - store.py:  NotesStore, the client state controller (lists, selection,
                 filters, loading and error state)
    - editor.py: EditorAdapter and Debouncer, debounced autosave for an
                 external rich-text widget
    - shared.py: load_shared_note(), the public read-only note view
"""

from leafnotes.client.api import NotesApi
from leafnotes.client.editor import Debouncer, EditorAdapter, EditorWidget
from leafnotes.client.shared import SharedNoteView, load_shared_note
from leafnotes.client.store import NotesStore

__all__ = [
    "Debouncer",
    "EditorAdapter",
    "EditorWidget",
    "NotesApi",
    "NotesStore",
    "SharedNoteView",
    "load_shared_note",
]
