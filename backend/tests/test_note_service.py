"""
LeafNotes Backend — Note Service Tests
========================================

What:  Tests for NoteService: defaults, partial updates, search, folder
       filtering, ordering and error translation.
How:   Real SQLite database per test (db_session); mock sessions for the
       database failure paths.

What we test:
    ✅ create_note defaults and folder embedding
    ✅ three-state update (absent / value / explicit null folder)
    ✅ search is case-insensitive, on title OR content, with literal wildcards
    ✅ folder filter, AND composition, malformed folder id
    ✅ NotFoundError and DatabaseError translation
"""

import asyncio
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from leafnotes.exceptions import DatabaseError, NotFoundError
from leafnotes.schemas.note import NoteChanges
from leafnotes.services.folder_service import FolderService
from leafnotes.services.note_service import NoteService


class TestNoteServiceCreate:
    """Tests for create_note defaults."""

    def setup_method(self):
        self.service = NoteService()
        self.folders = FolderService()

    @pytest.mark.asyncio
    async def test_create_note_defaults(self, db_session):
        """Missing fields become "Untitled", "" and unfiled."""
        note = await self.service.create_note(db_session)

        assert note.title == "Untitled"
        assert note.content == ""
        assert note.folder_id is None
        assert note.folder is None
        assert note.share_token is None
        assert note.created_at == note.updated_at
        assert note.created_at.tzinfo is not None

    @pytest.mark.asyncio
    async def test_create_note_empty_title_defaults(self, db_session):
        note = await self.service.create_note(db_session, title="", content="")
        assert note.title == "Untitled"

    @pytest.mark.asyncio
    async def test_create_note_in_folder_embeds_folder(self, db_session):
        folder = await self.folders.create_folder(db_session, "Work")

        note = await self.service.create_note(
            db_session, title="Plan", content="<p>steps</p>", folder_id=folder.id
        )

        assert note.folder_id == folder.id
        assert note.folder is not None
        assert note.folder.id == folder.id
        assert note.folder.name == "Work"


class TestNoteServiceGet:
    """Tests for get_note retrieval."""

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_get_note_found(self, db_session):
        created = await self.service.create_note(db_session, title="Draft")
        await db_session.commit()

        note = await self.service.get_note(db_session, created.id)

        assert note.id == created.id
        assert note.title == "Draft"

    @pytest.mark.asyncio
    async def test_get_note_not_found(self, db_session):
        """Non-existent note should raise NotFoundError."""
        with pytest.raises(NotFoundError):
            await self.service.get_note(db_session, uuid4())

    @pytest.mark.asyncio
    async def test_get_note_not_found_with_mock(self, mock_db_session):
        mock_result = MagicMock()
        mock_result.scalar_one_or_none.return_value = None
        mock_db_session.execute.return_value = mock_result

        with pytest.raises(NotFoundError):
            await self.service.get_note(mock_db_session, uuid4())


class TestNoteServiceUpdate:
    """Tests for the three-state partial update."""

    def setup_method(self):
        self.service = NoteService()
        self.folders = FolderService()

    @pytest.mark.asyncio
    async def test_update_title_only_leaves_other_fields(self, db_session):
        folder = await self.folders.create_folder(db_session, "Work")
        created = await self.service.create_note(
            db_session, title="Old", content="<p>body</p>", folder_id=folder.id
        )
        await db_session.commit()
        await asyncio.sleep(0.01)

        updated = await self.service.update_note(db_session, created.id, NoteChanges(title="X"))
        await db_session.commit()
        fetched = await self.service.get_note(db_session, created.id)

        assert updated.title == "X"
        assert fetched.title == "X"
        assert fetched.content == "<p>body</p>"
        assert fetched.folder_id == folder.id
        assert fetched.updated_at > created.updated_at
        assert fetched.created_at == created.created_at

    @pytest.mark.asyncio
    async def test_update_folder_none_unfiles(self, db_session):
        folder = await self.folders.create_folder(db_session, "Work")
        created = await self.service.create_note(db_session, folder_id=folder.id)

        updated = await self.service.update_note(db_session, created.id, NoteChanges(folder_id=None))

        assert updated.folder_id is None
        assert updated.folder is None

    @pytest.mark.asyncio
    async def test_update_moves_note_between_folders(self, db_session):
        work = await self.folders.create_folder(db_session, "Work")
        home = await self.folders.create_folder(db_session, "Home")
        created = await self.service.create_note(db_session, folder_id=work.id)

        updated = await self.service.update_note(db_session, created.id, NoteChanges(folder_id=home.id))

        assert updated.folder_id == home.id
        assert updated.folder.name == "Home"

    @pytest.mark.asyncio
    async def test_empty_update_still_refreshes_updated_at(self, db_session):
        created = await self.service.create_note(db_session, title="Same")
        await asyncio.sleep(0.01)

        updated = await self.service.update_note(db_session, created.id, NoteChanges())

        assert updated.title == "Same"
        assert updated.updated_at > created.updated_at

    @pytest.mark.asyncio
    async def test_update_missing_note(self, db_session):
        with pytest.raises(NotFoundError):
            await self.service.update_note(db_session, uuid4(), NoteChanges(title="X"))


class TestNoteServiceDelete:

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_delete_note(self, db_session):
        created = await self.service.create_note(db_session)

        result = await self.service.delete_note(db_session, created.id)

        assert result.success is True
        with pytest.raises(NotFoundError):
            await self.service.get_note(db_session, created.id)

    @pytest.mark.asyncio
    async def test_delete_missing_note(self, db_session):
        with pytest.raises(NotFoundError):
            await self.service.delete_note(db_session, uuid4())


class TestNoteServiceList:
    """Tests for list_notes search, filtering and ordering."""

    def setup_method(self):
        self.service = NoteService()
        self.folders = FolderService()

    @pytest.mark.asyncio
    async def test_list_notes_empty(self, db_session):
        assert await self.service.list_notes(db_session) == []

    @pytest.mark.asyncio
    async def test_list_orders_by_updated_at_desc(self, db_session):
        first = await self.service.create_note(db_session, title="first")
        await asyncio.sleep(0.01)
        second = await self.service.create_note(db_session, title="second")
        await asyncio.sleep(0.01)
        await self.service.update_note(db_session, first.id, NoteChanges(content="edited"))

        notes = await self.service.list_notes(db_session)

        assert [note.id for note in notes] == [first.id, second.id]

    @pytest.mark.asyncio
    async def test_search_matches_title_or_content_case_insensitive(self, db_session):
        by_title = await self.service.create_note(db_session, title="My Plan")
        by_content = await self.service.create_note(
            db_session, title="Notes", content="<p>the plan is simple</p>"
        )
        await self.service.create_note(db_session, title="Other", content="<p>unrelated</p>")

        notes = await self.service.list_notes(db_session, search="plan")

        assert {note.id for note in notes} == {by_title.id, by_content.id}

    @pytest.mark.asyncio
    async def test_search_treats_wildcards_literally(self, db_session):
        percent = await self.service.create_note(db_session, title="100% done")
        await self.service.create_note(db_session, title="100 done")

        notes = await self.service.list_notes(db_session, search="100%")

        assert [note.id for note in notes] == [percent.id]

    @pytest.mark.asyncio
    async def test_folder_filter(self, db_session):
        work = await self.folders.create_folder(db_session, "Work")
        filed = await self.service.create_note(db_session, title="Plan", folder_id=work.id)
        await self.service.create_note(db_session, title="Plan elsewhere")

        notes = await self.service.list_notes(db_session, folder_id=str(work.id))

        assert [note.id for note in notes] == [filed.id]
        assert notes[0].folder.name == "Work"

    @pytest.mark.asyncio
    async def test_filters_compose_with_and(self, db_session):
        work = await self.folders.create_folder(db_session, "Work")
        match = await self.service.create_note(db_session, title="Plan", folder_id=work.id)
        await self.service.create_note(db_session, title="Budget", folder_id=work.id)
        await self.service.create_note(db_session, title="Plan")

        notes = await self.service.list_notes(db_session, search="plan", folder_id=str(work.id))

        assert [note.id for note in notes] == [match.id]

    @pytest.mark.asyncio
    async def test_malformed_folder_filter_matches_nothing(self, db_session):
        await self.service.create_note(db_session, title="Plan")

        assert await self.service.list_notes(db_session, folder_id="not-a-uuid") == []

    @pytest.mark.asyncio
    async def test_list_notes_database_failure(self, mock_db_session):
        """SQLAlchemy errors are wrapped so no driver detail reaches the client."""
        mock_db_session.execute.side_effect = OperationalError("SELECT", {}, Exception("gone"))

        with pytest.raises(DatabaseError):
            await self.service.list_notes(mock_db_session)

    @pytest.mark.asyncio
    async def test_create_note_database_failure(self, mock_db_session):
        mock_db_session.flush.side_effect = OperationalError("INSERT", {}, Exception("gone"))

        with pytest.raises(DatabaseError):
            await self.service.create_note(mock_db_session, title="x")
