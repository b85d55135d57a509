"""
LeafNotes Client — HTTP API Wrapper
=====================================

What:  Typed async access to every /api endpoint of the notes service.
How:   One httpx.AsyncClient per NotesApi. Responses are parsed into the
       same pydantic models the server serializes, so client and server
       share one contract.
Who:   Used by NotesStore and load_shared_note().

Error mapping:
    404                 → NotFoundError (message taken from the response body)
    other non-2xx       → ApiRequestError(status_code, message, error)
    transport failure   → ApiRequestError(status_code=0)

Usage:
    async with NotesApi("http://localhost:8000") as api:
        note = await api.create_note(title="Plan")
        await api.update_note(note.id, NoteChanges(content="<p>hi</p>"))
"""

import logging
from typing import Any, Dict, List, Optional, Union
from uuid import UUID

import httpx

from leafnotes.exceptions import ApiRequestError, NotFoundError
from leafnotes.schemas.folder import FolderResponse
from leafnotes.schemas.note import NoteChanges, NoteResponse, SharedNoteResponse

logger = logging.getLogger(__name__)

IdLike = Union[UUID, str]

DEFAULT_TIMEOUT = 10.0


def _error_body(response: httpx.Response) -> Dict[str, Any]:
    """Parsed JSON error body, or {} when the body is not a JSON object."""
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


class NotesApi:
    """
    Async client for the notes service.

    Pass `client` to reuse an existing httpx.AsyncClient (tests hand in one
    bound to the ASGI app); otherwise one is created for `base_url` and
    closed by aclose().
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "NotesApi":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # ── Transport ─────────────────────────────────────────────────────────

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, str]] = None,
    ) -> Any:
        try:
            response = await self._client.request(method, path, json=json, params=params)
        except httpx.RequestError as e:
            logger.warning("%s %s failed: %s", method, path, str(e))
            raise ApiRequestError(
                status_code=0,
                message="Could not reach the server. Please try again.",
                context={"method": method, "path": path, "error_type": type(e).__name__},
            ) from e

        if response.status_code == 404:
            body = _error_body(response)
            raise NotFoundError(
                message=body.get("message") or "Not found",
                context={"method": method, "path": path},
            )

        if response.is_error:
            body = _error_body(response)
            logger.warning("%s %s returned %d", method, path, response.status_code)
            raise ApiRequestError(
                status_code=response.status_code,
                message=body.get("message") or "Something went wrong",
                error=body.get("error"),
                context={
                    "method": method,
                    "path": path,
                    "request_id": body.get("request_id") or response.headers.get("X-Request-ID"),
                },
            )

        return response.json()

    # ── Folders ───────────────────────────────────────────────────────────

    async def list_folders(self) -> List[FolderResponse]:
        data = await self._request("GET", "/api/folders")
        return [FolderResponse.model_validate(item) for item in data]

    async def create_folder(self, name: Optional[str] = None) -> FolderResponse:
        body = {"name": name} if name is not None else {}
        data = await self._request("POST", "/api/folders", json=body)
        return FolderResponse.model_validate(data)

    async def rename_folder(self, folder_id: IdLike, name: str) -> FolderResponse:
        data = await self._request("PATCH", f"/api/folders/{folder_id}", json={"name": name})
        return FolderResponse.model_validate(data)

    async def delete_folder(self, folder_id: IdLike) -> None:
        await self._request("DELETE", f"/api/folders/{folder_id}")

    # ── Notes ─────────────────────────────────────────────────────────────

    async def list_notes(
        self,
        search: Optional[str] = None,
        folder_id: Optional[IdLike] = None,
    ) -> List[NoteResponse]:
        """Empty filters are left out of the query string."""
        params = {}
        if search:
            params["search"] = search
        if folder_id:
            params["folderId"] = str(folder_id)
        data = await self._request("GET", "/api/notes", params=params)
        return [NoteResponse.model_validate(item) for item in data]

    async def get_note(self, note_id: IdLike) -> NoteResponse:
        data = await self._request("GET", f"/api/notes/{note_id}")
        return NoteResponse.model_validate(data)

    async def create_note(
        self,
        title: Optional[str] = None,
        content: Optional[str] = None,
        folder_id: Optional[IdLike] = None,
    ) -> NoteResponse:
        body: Dict[str, Any] = {
            "folderId": str(folder_id) if folder_id is not None else None,
        }
        if title is not None:
            body["title"] = title
        if content is not None:
            body["content"] = content
        data = await self._request("POST", "/api/notes", json=body)
        return NoteResponse.model_validate(data)

    async def update_note(self, note_id: IdLike, changes: NoteChanges) -> NoteResponse:
        data = await self._request("PATCH", f"/api/notes/{note_id}", json=changes.to_payload())
        return NoteResponse.model_validate(data)

    async def delete_note(self, note_id: IdLike) -> None:
        await self._request("DELETE", f"/api/notes/{note_id}")

    # ── Share links ───────────────────────────────────────────────────────

    async def share_note(self, note_id: IdLike) -> str:
        """Returns the note's share token, creating it on first call."""
        data = await self._request("POST", f"/api/notes/{note_id}/share")
        return data["shareToken"]

    async def unshare_note(self, note_id: IdLike) -> None:
        await self._request("DELETE", f"/api/notes/{note_id}/share")

    async def get_shared_note(self, token: str) -> SharedNoteResponse:
        data = await self._request("GET", f"/api/shared/{token}")
        return SharedNoteResponse.model_validate(data)
