"""Editing session for one open note.

The session holds the mutable title/rows that edits apply to synchronously.
The save coordinator reads them when a save actually starts, so every save
carries the latest content.
"""

import logging
from collections.abc import Callable

from firenotes.core import document
from firenotes.core.autosave import OnAuthRequired, SaveCoordinator, SaveStatus
from firenotes.core.errors import FireNotesError
from firenotes.core.notify import LoggingNotifier, Notifier
from firenotes.core.types import DEFAULT_NOTE_TITLE, Note, NoteDraft, Row, RowKind, utcnow
from firenotes.remote.notes import NotesGateway

logger = logging.getLogger(__name__)

NoteListener = Callable[[Note], None]


class EditorSession:
    """Apply edits to one note and keep it autosaved."""

    def __init__(
        self,
        note: Note,
        gateway: NotesGateway,
        *,
        debounce_seconds: float | None = None,
        on_change: NoteListener | None = None,
        on_saved: NoteListener | None = None,
        on_auth_required: OnAuthRequired | None = None,
        notifier: Notifier | None = None,
    ):
        """
        Initialize editor session.

        Args:
            note: Note being edited
            gateway: Remote note gateway used for saves
            debounce_seconds: Autosave quiescence window
            on_change: Receives the optimistic copy after every edit
            on_saved: Receives the reconciled copy after every successful save
            on_auth_required: Called when a save is rejected for authorization
            notifier: Receives transient save-failure notices
        """
        self._note = note
        self.title = note.title
        self.rows: list[Row] = document.renumber(note.rows)
        self.gateway = gateway
        self.notifier: Notifier = notifier or LoggingNotifier()
        self._on_change = on_change
        self._on_saved = on_saved
        self.coordinator = SaveCoordinator(
            self._read_draft,
            self._persist,
            debounce_seconds=debounce_seconds,
            on_saved=self._handle_saved,
            on_error=self._handle_error,
            on_auth_required=on_auth_required,
        )

    @property
    def note(self) -> Note:
        """Current content as a note value."""
        return self._note.model_copy(update={"title": self.title, "rows": list(self.rows)})

    @property
    def is_dirty(self) -> bool:
        return self.coordinator.is_dirty

    @property
    def is_saving(self) -> bool:
        return self.coordinator.is_saving

    @property
    def status(self) -> SaveStatus:
        return self.coordinator.status

    @property
    def display_title(self) -> str:
        """Title for the screen header, marked while unsaved."""
        marker = " •" if self.is_dirty else ""
        return f"{self.title or DEFAULT_NOTE_TITLE}{marker}"

    def get_row(self, row_id: str) -> Row | None:
        return next((row for row in self.rows if row.id == row_id), None)

    # Edits

    def _apply(self, rows: list[Row] | None = None, title: str | None = None) -> bool:
        if self.coordinator.closed:
            logger.warning("Editor for note %s is closed; edit ignored", self._note.id)
            return False
        if (rows is None or rows == self.rows) and (title is None or title == self.title):
            return False
        if rows is not None:
            self.rows = rows
        if title is not None:
            self.title = title
        self._note = self._note.model_copy(update={"updated_at": utcnow()})
        if self._on_change:
            self._on_change(self.note)
        self.coordinator.notify_edit()
        return True

    def set_title(self, title: str) -> None:
        self._apply(title=title)

    def add_row(self, kind: RowKind) -> Row | None:
        """Append a row and return it."""
        rows = document.add_row(self.rows, kind)
        if not self._apply(rows):
            return None
        return rows[-1]

    def update_row(self, row_id: str, content: str) -> None:
        self._apply(document.update_row_content(self.rows, row_id, content))

    def remove_row(self, row_id: str) -> None:
        self._apply(document.remove_row(self.rows, row_id))

    def duplicate_row(self, row_id: str) -> None:
        self._apply(document.duplicate_row(self.rows, row_id))

    def move_row(self, row_id: str, new_index: int) -> None:
        self._apply(document.move_row(self.rows, row_id, new_index))

    def toggle_checkbox(self, row_id: str) -> None:
        self._apply(document.toggle_checkbox(self.rows, row_id))

    def attach_image(self, row_id: str, uri: str) -> None:
        self._apply(document.attach_image(self.rows, row_id, uri))

    # Persistence

    def _read_draft(self) -> NoteDraft:
        return NoteDraft(title=self.title, rows=list(self.rows))

    async def _persist(self, draft: NoteDraft) -> Note:
        rows = draft.rows if document.is_in_order(draft.rows) else document.renumber(draft.rows)
        if self._note.remote_id:
            saved = await self.gateway.update(
                self._note.remote_id,
                title=draft.title,
                rows=rows,
                local_id=self._note.id,
            )
        else:
            # First persist: adopt the store identifier
            saved = await self.gateway.create(draft.title, rows, local_id=self._note.id)
            logger.info("Note %s persisted as %s", self._note.id, saved.remote_id)

        self._note = self._note.model_copy(
            update={
                "remote_id": saved.remote_id,
                "user_id": saved.user_id,
                "created_at": saved.created_at,
                "updated_at": saved.updated_at,
            }
        )
        return saved

    def _handle_saved(self, saved: Note) -> None:
        if self._on_saved is None:
            return
        # Edits made during the request are newer than the server copy
        self._on_saved(self.note if self.is_dirty else saved)

    def _handle_error(self, exc: FireNotesError) -> None:
        self.notifier.notify("Save failed", exc.message, blocking=False)

    async def flush(self) -> bool:
        """Save pending edits now."""
        return await self.coordinator.flush()

    async def close(self) -> bool:
        """Cancel the timer and flush pending edits before teardown."""
        return await self.coordinator.close()

    async def __aenter__(self) -> "EditorSession":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
