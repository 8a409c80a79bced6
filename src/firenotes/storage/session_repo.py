"""Session repository - local persistence of the bearer token and user.

This module only reads/writes the session file. Validation and the
login/logout flow live in core/auth.py.
"""

import json
import logging
import os
from pathlib import Path

from firenotes.core.config import SESSION_FILE

logger = logging.getLogger(__name__)

TOKEN_KEY = "userToken"
USER_KEY = "userData"


class SessionRepo:
    """Key-value store holding exactly the token and the serialized user."""

    def __init__(self, session_path: Path | str | None = None):
        """
        Initialize session repository.

        Args:
            session_path: Path to session file (defaults to SESSION_FILE)
        """
        self.session_path = Path(session_path) if session_path else SESSION_FILE

    def load(self) -> dict:
        """Load saved session values from file."""
        if self.session_path.exists():
            try:
                with open(self.session_path) as f:
                    data = json.load(f)
                if isinstance(data, dict):
                    return data
                logger.debug("Ignoring malformed session file %s", self.session_path)
            except (json.JSONDecodeError, OSError) as exc:
                logger.debug("Failed to load session file: %s", exc)
        return {}

    def save(self, values: dict) -> None:
        """Save session values to file with secure permissions from creation."""
        self.session_path.parent.mkdir(parents=True, exist_ok=True)

        # Create with 0600 so the token is never world-readable
        fd = os.open(
            self.session_path,
            os.O_WRONLY | os.O_CREAT | os.O_TRUNC,
            0o600,
        )
        try:
            f = os.fdopen(fd, "w")
        except Exception:
            os.close(fd)
            raise
        # The file object owns fd from here on
        with f:
            json.dump(values, f, indent=2)

    def get(self, key: str) -> str | None:
        """Get a single stored value."""
        return self.load().get(key)

    def set(self, key: str, value: str) -> None:
        """Store a single value."""
        values = self.load()
        values[key] = value
        self.save(values)

    def get_token(self) -> str | None:
        """Get saved bearer token."""
        return self.get(TOKEN_KEY)

    def get_user_data(self) -> str | None:
        """Get saved serialized user."""
        return self.get(USER_KEY)

    def store_session(self, token: str, user_data: str) -> None:
        """Save token and user together."""
        self.save({TOKEN_KEY: token, USER_KEY: user_data})

    def clear(self) -> None:
        """Remove token and user together."""
        if self.session_path.exists():
            self.session_path.unlink()

    def exists(self) -> bool:
        """Check if a session file exists."""
        return self.session_path.exists()
