"""Debounced autosave for one open note.

``SaveCoordinator`` owns the save state of an editing session:

* every edit marks the session dirty and (re)arms a debounce timer;
* when the timer fires the *latest* draft is read and saved;
* at most one save is in flight, with at most one save intent queued behind it;
* failures leave the session dirty and are reported, never retried on a timer;
* ``flush()`` saves immediately and ``close()`` flushes before teardown.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from firenotes.core.config import AUTOSAVE_DEBOUNCE_SECONDS
from firenotes.core.errors import FireNotesError, UnauthorizedError
from firenotes.core.types import Note, NoteDraft, utcnow

logger = logging.getLogger(__name__)

DraftReader = Callable[[], NoteDraft]
SaveFn = Callable[[NoteDraft], Awaitable[Note]]
OnSaved = Callable[[Note], None]
OnError = Callable[[FireNotesError], None]
OnAuthRequired = Callable[[], None]


class SaveStatus(Enum):
    """Observable state of an editing session."""

    CLEAN = "clean"
    DIRTY = "dirty"
    SAVING = "saving"
    CLOSED = "closed"


@dataclass
class SaveState:
    """Save flags for one editor session.

    Both flags may be true at once: an edit arrived while a save was in flight.
    """

    is_dirty: bool = False
    is_saving: bool = False


class SaveCoordinator:
    """Coalesce rapid edits into single debounced saves."""

    def __init__(
        self,
        read_draft: DraftReader,
        save: SaveFn,
        *,
        debounce_seconds: float | None = None,
        on_saved: OnSaved | None = None,
        on_error: OnError | None = None,
        on_auth_required: OnAuthRequired | None = None,
    ):
        """
        Initialize save coordinator.

        Args:
            read_draft: Returns the current title/rows; called when a save starts
            save: Persists a draft and returns the canonical note
            debounce_seconds: Quiescence window (defaults to AUTOSAVE_DEBOUNCE_SECONDS)
            on_saved: Called with the saved note after each successful save
            on_error: Called with the error after each failed save
            on_auth_required: Called when a save is rejected for authorization
        """
        self.debounce_seconds = (
            AUTOSAVE_DEBOUNCE_SECONDS if debounce_seconds is None else debounce_seconds
        )
        self.state = SaveState()
        self.last_saved_at: datetime | None = None
        self.last_error: FireNotesError | None = None

        self._read_draft = read_draft
        self._save = save
        self._on_saved = on_saved
        self._on_error = on_error
        self._on_auth_required = on_auth_required

        self._lock = asyncio.Lock()
        self._timer: asyncio.Task | None = None
        self._tasks: set[asyncio.Task] = set()
        self._generation = 0
        self._intent_queued = False
        self._closed = False

    @property
    def is_dirty(self) -> bool:
        return self.state.is_dirty

    @property
    def is_saving(self) -> bool:
        return self.state.is_saving

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def status(self) -> SaveStatus:
        if self._closed:
            return SaveStatus.CLOSED
        if self.state.is_saving:
            return SaveStatus.SAVING
        if self.state.is_dirty:
            return SaveStatus.DIRTY
        return SaveStatus.CLEAN

    def notify_edit(self) -> None:
        """Record a local edit and restart the quiescence window."""
        if self._closed:
            logger.warning("Edit after editor close ignored")
            return
        self._generation += 1
        self.state.is_dirty = True
        self._arm_timer()

    def _arm_timer(self) -> None:
        self.cancel_pending()
        task = asyncio.get_running_loop().create_task(self._debounce())
        self._timer = task
        self._tasks.add(task)
        task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Autosave task failed", exc_info=exc)

    def cancel_pending(self) -> None:
        """Cancel a timer that has not fired yet. Safe to call repeatedly."""
        timer, self._timer = self._timer, None
        if timer is not None and not timer.done():
            timer.cancel()

    async def _debounce(self) -> None:
        await asyncio.sleep(self.debounce_seconds)
        # Fired: from here on the task is a save intent, not a cancellable timer
        if self._timer is asyncio.current_task():
            self._timer = None
        await self._save_when_idle()

    async def _save_when_idle(self) -> None:
        # Queue depth of one: a newer intent is redundant while one is waiting
        if self._intent_queued:
            return
        self._intent_queued = True
        waiting = True
        try:
            async with self._lock:
                # Holding the lock: no longer queued, a newer intent may queue
                self._intent_queued = waiting = False
                if self._closed or not self.state.is_dirty:
                    return
                await self._commit()
        finally:
            if waiting:
                self._intent_queued = False

    async def _commit(self) -> bool:
        """Save the latest draft. Caller must hold the lock."""
        draft = self._read_draft()
        generation = self._generation
        self.state.is_saving = True
        try:
            note = await self._save(draft)
        except FireNotesError as exc:
            self.state.is_dirty = True
            self.last_error = exc
            logger.warning("Autosave failed: %s", exc.message)
            if isinstance(exc, UnauthorizedError) and self._on_auth_required:
                self._on_auth_required()
            if self._on_error:
                self._on_error(exc)
            return False
        finally:
            self.state.is_saving = False

        if self._generation == generation:
            self.state.is_dirty = False
        self.last_saved_at = utcnow()
        self.last_error = None
        logger.debug("Autosaved note %s", note.remote_id or note.id)
        if self._on_saved:
            self._on_saved(note)
        return True

    async def flush(self) -> bool:
        """
        Save now instead of waiting for the debounce window.

        Waits for an in-flight save first. No-op when nothing is dirty.

        Returns:
            True if the session is clean afterwards
        """
        self.cancel_pending()
        async with self._lock:
            if not self.state.is_dirty:
                return True
            return await self._commit()

    async def close(self) -> bool:
        """
        End the session: cancel the timer and flush unsaved edits.

        Returns:
            True if nothing was left unsaved
        """
        if self._closed:
            return not self.state.is_dirty
        self.cancel_pending()
        self._closed = True
        async with self._lock:
            if not self.state.is_dirty:
                return True
            return await self._commit()

    async def wait_idle(self) -> None:
        """Wait for the pending timer and any running saves to finish."""
        while True:
            pending = {task for task in self._tasks if not task.done()}
            if not pending:
                return
            await asyncio.wait(pending)
