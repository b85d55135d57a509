"""
LeafNotes — Personal Notes Service
====================================

What: A single-user notes application: notes, folders, search, autosave and
      read-only public share links.
Who:  Imported by uvicorn (leafnotes.main:app), Alembic, pytest and the
      Python client in leafnotes.client.

Architecture:

    ┌─────────────────────────────────────┐
    │   client (NotesApi, NotesStore,     │  ← HTTP client + UI state
    │   EditorAdapter, load_shared_note)  │
    ├─────────────────────────────────────┤
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← defaults, search, share tokens
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
