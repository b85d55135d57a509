"""
LeafNotes Client — Editor Adapter (Debounced Autosave)
========================================================

What:  Connects an external rich-text widget to NotesStore.update_note().
How:   Every content or title change restarts a 0.5 s timer. The save runs
       once the user has paused for the whole delay. Content and title have
       separate timers, keyed (note_id, "content") and (note_id, "title").
Who:   Instantiated by the UI once per editor pane.

Timer rules:
    - a new change for the same key cancels the pending save and starts over
    - showing a different note cancels every pending save of the previous one
    - close() cancels everything; later change events are ignored
    - a save that has started firing runs to completion
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Hashable, Optional, Protocol

from leafnotes.client.store import NotesStore
from leafnotes.schemas.note import NoteChanges, NoteResponse

logger = logging.getLogger(__name__)

SAVE_DELAY = 0.5

Action = Callable[[], Awaitable[Any]]


class EditorWidget(Protocol):
    """The two operations the adapter needs from a rich-text editor."""

    def get_html(self) -> str:
        ...

    def set_content(self, html: str) -> None:
        ...


class Debouncer:
    """
    Cancellable delayed actions, at most one pending per key.

    Must be used from inside a running event loop.
    """

    def __init__(self, delay: float = SAVE_DELAY):
        self.delay = delay
        self._pending: Dict[Hashable, "asyncio.Task[None]"] = {}

    def __len__(self) -> int:
        return len(self._pending)

    def is_pending(self, key: Hashable) -> bool:
        return key in self._pending

    def schedule(self, key: Hashable, action: Action) -> "asyncio.Task[None]":
        """Runs `action` after `delay` seconds unless rescheduled or cancelled first."""
        self.cancel(key)
        task = asyncio.create_task(self._fire_later(key, action))
        self._pending[key] = task
        return task

    async def _fire_later(self, key: Hashable, action: Action) -> None:
        await asyncio.sleep(self.delay)
        # Fired: cancel() can no longer reach this task
        if self._pending.get(key) is asyncio.current_task():
            del self._pending[key]
        try:
            await action()
        except Exception:
            logger.exception("Debounced action for %r failed", key)

    def cancel(self, key: Hashable) -> bool:
        """Cancels the pending action for `key`; False if none was pending."""
        task = self._pending.pop(key, None)
        if task is None:
            return False
        task.cancel()
        return True

    def cancel_matching(self, predicate: Callable[[Hashable], bool]) -> int:
        keys = [key for key in self._pending if predicate(key)]
        for key in keys:
            self.cancel(key)
        return len(keys)

    def cancel_all(self) -> int:
        return self.cancel_matching(lambda key: True)


class EditorAdapter:
    """
    Autosave bridge between one EditorWidget and a NotesStore.

    Example:
        adapter = EditorAdapter(widget, store)
        adapter.show(store.selected_note)
        adapter.content_changed()      # on every widget update event
        adapter.title_changed("Plan")  # on every title keystroke
        adapter.close()                # when the pane goes away
    """

    def __init__(
        self,
        widget: EditorWidget,
        store: NotesStore,
        debouncer: Optional[Debouncer] = None,
    ):
        self._widget = widget
        self._store = store
        self._debouncer = debouncer if debouncer is not None else Debouncer(SAVE_DELAY)
        self._note: Optional[NoteResponse] = None
        self._closed = False

    @property
    def note(self) -> Optional[NoteResponse]:
        return self._note

    @property
    def closed(self) -> bool:
        return self._closed

    def show(self, note: Optional[NoteResponse]) -> None:
        """
        Displays `note` (None for the empty state).

        The widget is only reloaded when its HTML differs from the note's
        stored content, so a re-render after a save does not reset the cursor.
        """
        if self._closed:
            return

        previous = self._note
        if previous is not None and note is not None and previous.id == note.id:
            self._note = note
            return

        if previous is not None:
            dropped = self._debouncer.cancel_matching(lambda key: key[0] == previous.id)
            if dropped:
                logger.debug("Dropped %d pending save(s) for note %s", dropped, previous.id)

        self._note = note
        if note is not None and self._widget.get_html() != note.content:
            self._widget.set_content(note.content)

    def content_changed(self) -> None:
        if self._closed or self._note is None:
            return
        note_id = self._note.id

        async def save_content() -> None:
            # Read at firing time: the latest HTML, not the HTML of the first keystroke
            await self._store.update_note(note_id, NoteChanges(content=self._widget.get_html()))

        self._debouncer.schedule((note_id, "content"), save_content)

    def title_changed(self, title: str) -> None:
        if self._closed or self._note is None:
            return
        note_id = self._note.id

        async def save_title() -> None:
            await self._store.update_note(note_id, NoteChanges(title=title))

        self._debouncer.schedule((note_id, "title"), save_title)

    def close(self) -> None:
        self._closed = True
        self._debouncer.cancel_all()
