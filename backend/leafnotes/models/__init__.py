# Models package init
"""
LeafNotes Backend — ORM Models
================================

Importing this package registers every table with `Base.metadata`
(Alembic's env.py relies on it for --autogenerate).
"""

from leafnotes.models.folder import Folder
from leafnotes.models.note import Note

__all__ = ["Folder", "Note"]
