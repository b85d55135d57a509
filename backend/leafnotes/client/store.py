"""
LeafNotes Client — State Controller
=====================================

What:  Holds the client-side view of the notes service: note list, folder
       list, selected note, folder filter, search text, loading flag and the
       last error message.
How:   State is read through properties; the async methods below are the
       only way to change it. Every change notifies the subscribers.
       Cached records are always the server's representation of a response,
       never a locally guessed one.
Who:   Driven by a UI (sidebar, editor, search box) and by EditorAdapter.

Failure handling:
    mount() never raises: a failed initial load is reported through `error`.
    Every other method sets `error` and re-raises, so the caller can decide
    whether to show a toast or an inline message. A successful request
    clears `error`.
"""

import asyncio
import logging
from typing import Callable, List, Optional, Union
from uuid import UUID

from leafnotes.client.api import IdLike, NotesApi
from leafnotes.exceptions import LeafNotesError
from leafnotes.models.note import DEFAULT_NOTE_TITLE
from leafnotes.schemas.folder import FolderResponse
from leafnotes.schemas.note import UNSET, NoteChanges, NoteResponse, Unset

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


def _as_uuid(value: IdLike) -> UUID:
    return value if isinstance(value, UUID) else UUID(str(value))


def _sorted_by_name(folders: List[FolderResponse]) -> List[FolderResponse]:
    return sorted(folders, key=lambda folder: folder.name)


class NotesStore:
    """
    Client state controller for one user session.

    Example:
        store = NotesStore(api)
        store.subscribe(render)
        await store.mount()
        note = await store.create_note()
        await store.update_note(note.id, NoteChanges(title="Plan"))
    """

    def __init__(self, api: NotesApi):
        self._api = api
        self._notes: List[NoteResponse] = []
        self._folders: List[FolderResponse] = []
        self._selected_note: Optional[NoteResponse] = None
        self._selected_folder_id: Optional[UUID] = None
        self._search_query = ""
        self._loading = True
        self._error: Optional[str] = None
        self._listeners: List[Listener] = []
        # Incremented per list request; only the newest response is applied
        self._notes_request = 0

    # ── Read-only state ───────────────────────────────────────────────────

    @property
    def notes(self) -> List[NoteResponse]:
        return list(self._notes)

    @property
    def folders(self) -> List[FolderResponse]:
        return list(self._folders)

    @property
    def selected_note(self) -> Optional[NoteResponse]:
        return self._selected_note

    @property
    def selected_folder_id(self) -> Optional[UUID]:
        return self._selected_folder_id

    @property
    def search_query(self) -> str:
        return self._search_query

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def unfiled_notes(self) -> List[NoteResponse]:
        """Cached notes without a folder."""
        return [note for note in self._notes if note.folder_id is None]

    def notes_in_folder(self, folder_id: IdLike) -> List[NoteResponse]:
        """Cached notes filed in `folder_id`."""
        wanted = _as_uuid(folder_id)
        return [note for note in self._notes if note.folder_id == wanted]

    # ── Subscriptions ─────────────────────────────────────────────────────

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Registers `listener`; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()

    def _fail(self, exc: LeafNotesError) -> None:
        self._error = exc.message
        logger.warning("Request failed: %s", exc.message)
        self._notify()

    # ── Loading ───────────────────────────────────────────────────────────

    async def _fetch_notes(self) -> None:
        self._notes_request += 1
        request = self._notes_request
        notes = await self._api.list_notes(
            search=self._search_query or None,
            folder_id=self._selected_folder_id,
        )
        if request == self._notes_request:
            self._notes = notes
        else:
            logger.debug("Dropping stale note list response (%d < %d)", request, self._notes_request)

    async def _fetch_folders(self) -> None:
        self._folders = _sorted_by_name(await self._api.list_folders())

    async def mount(self) -> None:
        """
        Initial load: notes and folders requested concurrently.

        `loading` stays True until both requests have finished, whether
        they succeeded or not.
        """
        self._loading = True
        self._error = None
        self._notify()

        results = await asyncio.gather(
            self._fetch_notes(),
            self._fetch_folders(),
            return_exceptions=True,
        )
        self._loading = False
        failures = [result for result in results if isinstance(result, BaseException)]
        for failure in failures:
            if not isinstance(failure, LeafNotesError):
                self._notify()
                raise failure

        if failures:
            self._fail(failures[0])
        else:
            self._notify()

    async def refresh_notes(self) -> None:
        """Re-requests the note list with the current search and folder filter."""
        try:
            await self._fetch_notes()
        except LeafNotesError as e:
            self._fail(e)
            raise
        self._error = None
        self._notify()

    async def set_search_query(self, query: str) -> None:
        self._search_query = query
        self._notify()
        await self.refresh_notes()

    async def select_folder(self, folder_id: Optional[IdLike]) -> None:
        """Sets the folder filter (None shows every note) and reloads the list."""
        self._selected_folder_id = _as_uuid(folder_id) if folder_id else None
        self._notify()
        await self.refresh_notes()

    def select_note(self, note: Optional[NoteResponse]) -> None:
        self._selected_note = note
        self._notify()

    # ── Notes ─────────────────────────────────────────────────────────────

    def _replace_note(self, note: NoteResponse) -> None:
        self._notes = [note if cached.id == note.id else cached for cached in self._notes]
        if self._selected_note is not None and self._selected_note.id == note.id:
            self._selected_note = note

    async def create_note(
        self,
        folder_id: Union[IdLike, None, Unset] = UNSET,
    ) -> NoteResponse:
        """
        Creates an "Untitled" note, puts it first in the list and selects it.

        Without `folder_id` the note goes into the current folder filter
        (unfiled when no filter is set); None files it nowhere.
        """
        target = self._selected_folder_id if folder_id is UNSET else folder_id
        try:
            note = await self._api.create_note(
                title=DEFAULT_NOTE_TITLE,
                content="",
                folder_id=target,
            )
        except LeafNotesError as e:
            self._fail(e)
            raise

        self._notes = [note] + self._notes
        self._selected_note = note
        self._error = None
        self._notify()
        return note

    async def update_note(self, note_id: IdLike, changes: NoteChanges) -> NoteResponse:
        try:
            note = await self._api.update_note(note_id, changes)
        except LeafNotesError as e:
            self._fail(e)
            raise

        self._replace_note(note)
        self._error = None
        self._notify()
        return note

    async def delete_note(self, note_id: IdLike) -> None:
        wanted = _as_uuid(note_id)
        try:
            await self._api.delete_note(wanted)
        except LeafNotesError as e:
            self._fail(e)
            raise

        self._notes = [note for note in self._notes if note.id != wanted]
        if self._selected_note is not None and self._selected_note.id == wanted:
            self._selected_note = None
        self._error = None
        self._notify()

    async def share_note(self, note_id: IdLike) -> str:
        """Publishes the note; returns the share token."""
        wanted = _as_uuid(note_id)
        try:
            token = await self._api.share_note(wanted)
        except LeafNotesError as e:
            self._fail(e)
            raise

        self._set_share_token(wanted, token)
        self._error = None
        self._notify()
        return token

    async def unshare_note(self, note_id: IdLike) -> None:
        wanted = _as_uuid(note_id)
        try:
            await self._api.unshare_note(wanted)
        except LeafNotesError as e:
            self._fail(e)
            raise

        self._set_share_token(wanted, None)
        self._error = None
        self._notify()

    def _set_share_token(self, note_id: UUID, token: Optional[str]) -> None:
        # Share and unshare return no note, so the cached copy is patched in place
        for note in self._notes:
            if note.id == note_id:
                self._replace_note(note.model_copy(update={"share_token": token}))
                return
        if self._selected_note is not None and self._selected_note.id == note_id:
            self._selected_note = self._selected_note.model_copy(update={"share_token": token})

    # ── Folders ───────────────────────────────────────────────────────────

    async def create_folder(self, name: Optional[str] = None) -> FolderResponse:
        try:
            folder = await self._api.create_folder(name)
        except LeafNotesError as e:
            self._fail(e)
            raise

        self._folders = _sorted_by_name(self._folders + [folder])
        self._error = None
        self._notify()
        return folder

    async def rename_folder(self, folder_id: IdLike, name: str) -> FolderResponse:
        try:
            folder = await self._api.rename_folder(folder_id, name)
        except LeafNotesError as e:
            self._fail(e)
            raise

        self._folders = _sorted_by_name(
            [folder if cached.id == folder.id else cached for cached in self._folders]
        )
        self._error = None
        self._notify()
        return folder

    async def delete_folder(self, folder_id: IdLike) -> None:
        """
        Deletes the folder; its notes become unfiled on the server.

        Clears the folder filter if it pointed at this folder, then reloads
        the note list in every case, since cached notes still reference the
        deleted folder.
        """
        wanted = _as_uuid(folder_id)
        try:
            await self._api.delete_folder(wanted)
        except LeafNotesError as e:
            self._fail(e)
            raise

        self._folders = [folder for folder in self._folders if folder.id != wanted]
        if self._selected_folder_id == wanted:
            self._selected_folder_id = None
        self._notify()
        await self.refresh_notes()
