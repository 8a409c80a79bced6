"""Storage layer for Fire Notes - local session persistence."""

from firenotes.storage.session_repo import SessionRepo

__all__ = [
    "SessionRepo",
]
