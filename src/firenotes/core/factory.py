"""Factory for building the application state with all dependencies wired.

Every interface should call build_app_state() so the session storage, HTTP
client and gateways are configured the same way.
"""

from pathlib import Path

import httpx

from firenotes.core.auth import AuthService
from firenotes.core.config import AUTOSAVE_DEBOUNCE_SECONDS, EXPORT_DIR, SESSION_FILE
from firenotes.core.notify import Notifier
from firenotes.core.state import AppState
from firenotes.export.service import ExportService, ShareTarget
from firenotes.remote.auth import AuthGateway
from firenotes.remote.client import ApiClient
from firenotes.remote.notes import NotesGateway
from firenotes.storage.session_repo import SessionRepo


def build_app_state(
    api_url: str | None = None,
    session_path: Path | str | None = None,
    notifier: Notifier | None = None,
    debounce_seconds: float | None = None,
    timeout: float | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AppState:
    """
    Build a fully configured AppState.

    Args:
        api_url: API root (defaults to config)
        session_path: Session file (defaults to config)
        notifier: Receives user notices
        debounce_seconds: Autosave window (defaults to config)
        timeout: HTTP timeout in seconds (defaults to config)
        transport: Custom httpx transport

    Returns:
        AppState ready for ``init()``
    """
    session_repo = SessionRepo(session_path=session_path or SESSION_FILE)
    client = ApiClient(
        base_url=api_url,
        timeout=timeout,
        token_provider=session_repo.get_token,
        transport=transport,
    )
    auth = AuthService(AuthGateway(client), session_repo=session_repo)

    return AppState(
        auth,
        NotesGateway(client),
        notifier=notifier,
        debounce_seconds=(
            AUTOSAVE_DEBOUNCE_SECONDS if debounce_seconds is None else debounce_seconds
        ),
    )


def build_export_service(
    export_dir: Path | str | None = None,
    share_target: ShareTarget | None = None,
    notifier: Notifier | None = None,
) -> ExportService:
    """Build an ExportService writing into the configured export directory."""
    return ExportService(
        export_dir=export_dir or EXPORT_DIR,
        share_target=share_target,
        notifier=notifier,
    )
