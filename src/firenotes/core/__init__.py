"""Fire Notes core library - document model, autosave and app state."""

from typing import TYPE_CHECKING

from firenotes.core.types import (
    AuthSession,
    HealthStatus,
    Note,
    NoteDraft,
    Row,
    RowKind,
    User,
)

if TYPE_CHECKING:
    from firenotes.core.autosave import SaveCoordinator, SaveStatus
    from firenotes.core.editor import EditorSession
    from firenotes.core.factory import build_app_state
    from firenotes.core.state import AppState

__all__ = [
    # State
    "AppState",
    "build_app_state",
    # Editing
    "EditorSession",
    "SaveCoordinator",
    "SaveStatus",
    # Types
    "AuthSession",
    "HealthStatus",
    "Note",
    "NoteDraft",
    "Row",
    "RowKind",
    "User",
]


def __getattr__(name: str):
    if name == "AppState":
        from firenotes.core.state import AppState

        return AppState
    if name == "build_app_state":
        from firenotes.core.factory import build_app_state

        return build_app_state
    if name == "EditorSession":
        from firenotes.core.editor import EditorSession

        return EditorSession
    if name in ("SaveCoordinator", "SaveStatus"):
        from firenotes.core import autosave

        return getattr(autosave, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
