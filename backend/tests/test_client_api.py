"""
LeafNotes Client — NotesApi Tests
===================================

What:  NotesApi against the real application (in-process) plus error
       mapping for non-2xx and transport failures.
"""

import httpx
import pytest

from leafnotes.client.api import NotesApi
from leafnotes.exceptions import ApiRequestError, NotFoundError
from leafnotes.schemas.note import NoteChanges


class TestNotesApiRoundTrips:

    @pytest.mark.asyncio
    async def test_note_lifecycle(self, api):
        folder = await api.create_folder("Work")
        note = await api.create_note(title="Plan", content="", folder_id=folder.id)

        assert note.folder_id == folder.id
        assert note.folder.name == "Work"

        updated = await api.update_note(note.id, NoteChanges(content="<p>go</p>"))
        assert updated.content == "<p>go</p>"
        assert updated.title == "Plan"

        listed = await api.list_notes(folder_id=folder.id)
        assert [n.id for n in listed] == [note.id]

        await api.delete_note(note.id)
        with pytest.raises(NotFoundError):
            await api.get_note(note.id)

    @pytest.mark.asyncio
    async def test_folders(self, api):
        await api.create_folder("b")
        a = await api.create_folder("a")
        renamed = await api.rename_folder(a.id, "c")

        assert renamed.name == "c"
        assert [f.name for f in await api.list_folders()] == ["b", "c"]

        await api.delete_folder(a.id)
        assert [f.name for f in await api.list_folders()] == ["b"]

    @pytest.mark.asyncio
    async def test_default_folder_name(self, api):
        folder = await api.create_folder()
        assert folder.name == "New Folder"

    @pytest.mark.asyncio
    async def test_share_and_resolve(self, api):
        note = await api.create_note(title="Draft")

        token = await api.share_note(note.id)
        shared = await api.get_shared_note(token)
        assert shared.title == "Draft"

        await api.unshare_note(note.id)
        with pytest.raises(NotFoundError):
            await api.get_shared_note(token)

    @pytest.mark.asyncio
    async def test_search_is_sent_as_query(self, api):
        await api.create_note(title="My Plan")
        await api.create_note(title="Other")

        assert [n.title for n in await api.list_notes(search="plan")] == ["My Plan"]


class TestNotesApiErrors:

    @pytest.mark.asyncio
    async def test_server_error_maps_to_api_request_error(self):
        def handler(request):
            return httpx.Response(
                500,
                json={"error": "server_error", "message": "An internal error occurred.", "request_id": "abc"},
            )

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://test")
        async with NotesApi(client=client) as api:
            with pytest.raises(ApiRequestError) as excinfo:
                await api.list_notes()
        await client.aclose()

        assert excinfo.value.status_code == 500
        assert excinfo.value.error == "server_error"
        assert excinfo.value.context["request_id"] == "abc"

    @pytest.mark.asyncio
    async def test_non_json_error_body(self):
        client = httpx.AsyncClient(
            transport=httpx.MockTransport(lambda request: httpx.Response(502, text="Bad Gateway")),
            base_url="http://test",
        )
        api = NotesApi(client=client)

        with pytest.raises(ApiRequestError) as excinfo:
            await api.list_folders()
        await client.aclose()

        assert excinfo.value.status_code == 502
        assert excinfo.value.message == "Something went wrong"

    @pytest.mark.asyncio
    async def test_transport_error_has_status_zero(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://test")
        api = NotesApi(client=client)

        with pytest.raises(ApiRequestError) as excinfo:
            await api.get_note("00000000-0000-0000-0000-000000000000")
        await client.aclose()

        assert excinfo.value.status_code == 0
