"""Application state shared by the screens.

One explicit object, created by ``build_app_state`` and passed to whatever
needs it. ``init()`` hydrates the session from local storage; ``logout()``
clears storage and tears the cached state down.
"""

import logging

from firenotes.core import document
from firenotes.core.auth import AuthService
from firenotes.core.autosave import OnAuthRequired
from firenotes.core.editor import EditorSession
from firenotes.core.errors import FireNotesError, NotFoundError
from firenotes.core.notify import LoggingNotifier, Notifier
from firenotes.core.types import DEFAULT_NOTE_TITLE, Note, User
from firenotes.remote.notes import NotesGateway

logger = logging.getLogger(__name__)


class AppState:
    """Signed-in user, cached notes list and the open note."""

    def __init__(
        self,
        auth: AuthService,
        notes_gateway: NotesGateway,
        *,
        notifier: Notifier | None = None,
        debounce_seconds: float | None = None,
        on_auth_required: OnAuthRequired | None = None,
    ):
        """
        Initialize application state.

        Args:
            auth: Auth service (login/register/logout, session storage)
            notes_gateway: Remote note gateway
            notifier: Receives user notices
            debounce_seconds: Autosave window for editors opened from here
            on_auth_required: Called when the server rejects the session
        """
        self.auth = auth
        self.notes_gateway = notes_gateway
        self.notifier: Notifier = notifier or LoggingNotifier()
        self.debounce_seconds = debounce_seconds
        self._on_auth_required = on_auth_required

        self.user: User | None = None
        self.token: str | None = None
        self.notes: list[Note] = []
        self.current_note: Note | None = None
        self.is_loading = False
        self.is_saving = False
        self.error: str | None = None
        self.needs_reauth = False

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None and self.user is not None

    # Lifecycle

    def init(self) -> bool:
        """
        Hydrate the session from local storage.

        Returns:
            True if a stored session was restored
        """
        session = self.auth.restore()
        if session is None:
            return False
        self.user = session.user
        self.token = session.token
        logger.debug("Restored session for %s", session.user.email)
        return True

    def teardown(self) -> None:
        """Drop every cached value."""
        self.user = None
        self.token = None
        self.notes = []
        self.current_note = None
        self.is_loading = False
        self.is_saving = False
        self.error = None
        self.needs_reauth = False

    async def aclose(self) -> None:
        """Release the HTTP connection pool."""
        await self.notes_gateway.client.aclose()

    def clear_error(self) -> None:
        self.error = None

    def _fail(self, exc: FireNotesError) -> None:
        self.error = exc.message

    def request_reauth(self) -> None:
        """Mark the session as rejected so screens prompt for login."""
        self.needs_reauth = True
        if self._on_auth_required:
            self._on_auth_required()

    # Auth

    async def login(self, email: str, password: str) -> User:
        self.is_loading = True
        self.error = None
        try:
            session = await self.auth.login(email, password)
        except FireNotesError as exc:
            self._fail(exc)
            raise
        finally:
            self.is_loading = False
        self.user, self.token = session.user, session.token
        self.needs_reauth = False
        return session.user

    async def register(self, email: str, password: str, name: str) -> User:
        self.is_loading = True
        self.error = None
        try:
            session = await self.auth.register(email, password, name)
        except FireNotesError as exc:
            self._fail(exc)
            raise
        finally:
            self.is_loading = False
        self.user, self.token = session.user, session.token
        self.needs_reauth = False
        return session.user

    def logout(self) -> None:
        """Clear stored token and user, then the cached state."""
        self.auth.logout()
        self.teardown()

    # Notes

    def find_note(self, identifier: str) -> Note | None:
        """Find a cached note by local or store identifier (or a unique prefix)."""
        exact = next((note for note in self.notes if note.matches(identifier)), None)
        if exact is not None or not identifier:
            return exact
        matches = [
            note
            for note in self.notes
            if note.id.startswith(identifier)
            or (note.remote_id or "").startswith(identifier)
        ]
        return matches[0] if len(matches) == 1 else None

    def _replace(self, note: Note) -> bool:
        for index, cached in enumerate(self.notes):
            if cached.same_note(note):
                self.notes[index] = note
                break
        else:
            return False
        if self.current_note is not None and self.current_note.same_note(note):
            self.current_note = note
        return True

    async def fetch_notes(self) -> list[Note]:
        """Replace the cached list with the user's notes from the store."""
        self.is_loading = True
        self.error = None
        try:
            self.notes = await self.notes_gateway.list()
        except FireNotesError as exc:
            self._fail(exc)
            raise
        finally:
            self.is_loading = False
        return self.notes

    async def create_note(self, title: str = DEFAULT_NOTE_TITLE) -> Note:
        """
        Create a note locally, then persist it.

        The local copy is kept when the store is unreachable; the editor's
        first save creates it remotely.
        """
        note = document.new_note(title)
        self.notes.insert(0, note)
        self.current_note = note

        self.is_saving = True
        self.error = None
        try:
            saved = await self.notes_gateway.create(note.title, note.rows, local_id=note.id)
        except FireNotesError as exc:
            self._fail(exc)
            logger.warning("Note %s kept local-only: %s", note.id, exc.message)
            self.notifier.notify("Not synced", exc.message, blocking=False)
            return note
        finally:
            self.is_saving = False

        self._replace(saved)
        return saved

    def open_editor(self, identifier: str) -> EditorSession:
        """
        Start an editing session for a cached note.

        Raises:
            NotFoundError: If no cached note matches
        """
        note = self.find_note(identifier)
        if note is None:
            raise NotFoundError(f"Note not found: {identifier}")
        self.current_note = note
        return EditorSession(
            note,
            self.notes_gateway,
            debounce_seconds=self.debounce_seconds,
            on_change=self.update_note_optimistically,
            on_saved=self.apply_saved_note,
            on_auth_required=self.request_reauth,
            notifier=self.notifier,
        )

    def update_note_optimistically(self, note: Note) -> None:
        """Reflect an unsaved edit in the cached list."""
        self._replace(note)

    def apply_saved_note(self, note: Note) -> None:
        """Reconcile the cached copy with a persisted note."""
        if not self._replace(note):
            self.notes.insert(0, note)

    async def delete_note(self, identifier: str) -> bool:
        """
        Remove a note locally, then from the store.

        A failed remote delete is reported but the note is not restored.

        Returns:
            True if the store confirmed the delete (or the note was local-only)
        """
        note = self.find_note(identifier)
        if note is None:
            raise NotFoundError(f"Note not found: {identifier}")

        self.notes = [cached for cached in self.notes if not cached.same_note(note)]
        if self.current_note is not None and self.current_note.same_note(note):
            self.current_note = None

        if note.remote_id is None:
            return True

        try:
            await self.notes_gateway.delete(note.remote_id)
        except FireNotesError as exc:
            self._fail(exc)
            logger.warning("Remote delete of %s failed: %s", note.remote_id, exc.message)
            self.notifier.notify("Delete failed", exc.message, blocking=False)
            return False
        return True
