"""Authentication logic and session-token lifecycle.

This module contains the login/register/logout flow and token policies.
Persistence is handled by storage.session_repo, transport by remote.auth.
"""

import base64
import json
import logging
import re
import time

from pydantic import ValidationError as PydanticValidationError

from firenotes.core.errors import ValidationError
from firenotes.core.types import AuthSession, User
from firenotes.remote.auth import AuthGateway
from firenotes.storage.session_repo import SessionRepo

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def validate_credentials(email: str, password: str, name: str | None = None) -> None:
    """
    Validate login/registration input before any network call.

    Args:
        email: Email address
        password: Password
        name: Display name (required only when registering)

    Raises:
        ValidationError: If a required field is missing or malformed
    """
    if not email or not email.strip():
        raise ValidationError("Email is required")
    if not password:
        raise ValidationError("Password is required")
    if name is not None and not name.strip():
        raise ValidationError("Name is required")
    if not EMAIL_PATTERN.match(email.strip()):
        raise ValidationError("Please enter a valid email address")


def token_expiry(token: str) -> int | None:
    """
    Read the ``exp`` claim of a JWT without verifying it.

    Returns:
        Expiration timestamp in milliseconds, or None if unreadable
    """
    parts = token.split(".")
    if len(parts) != 3:
        return None
    payload = parts[1] + "=" * (-len(parts[1]) % 4)
    try:
        claims = json.loads(base64.urlsafe_b64decode(payload))
    except (ValueError, TypeError) as exc:
        logger.debug("Unreadable token payload: %s", exc)
        return None
    exp = claims.get("exp") if isinstance(claims, dict) else None
    if not isinstance(exp, (int, float)):
        return None
    return int(exp * 1000)


def is_token_expired(expires_at: int, buffer_ms: int = 300000) -> bool:
    """
    Check if a token is expired.

    Args:
        expires_at: Expiration timestamp in milliseconds
        buffer_ms: Buffer time in milliseconds (default: 5 minutes)

    Returns:
        True if token is expired or will expire within buffer time
    """
    current_time_ms = time.time() * 1000
    return expires_at < (current_time_ms + buffer_ms)


class AuthService:
    """Login, registration and session persistence."""

    def __init__(self, gateway: AuthGateway, session_repo: SessionRepo | None = None):
        """
        Initialize auth service.

        Args:
            gateway: Remote auth gateway
            session_repo: Local session storage (defaults to SESSION_FILE)
        """
        self.gateway = gateway
        self.session_repo = session_repo or SessionRepo()

    def _remember(self, session: AuthSession) -> AuthSession:
        self.session_repo.store_session(session.token, session.user.model_dump_json())
        return session

    async def login(self, email: str, password: str) -> AuthSession:
        """Sign in and persist the session."""
        validate_credentials(email, password)
        logger.info("Attempting login for %s", email.strip())
        session = await self.gateway.login(email.strip(), password)
        logger.info("Login successful for %s", session.user.email)
        return self._remember(session)

    async def register(self, email: str, password: str, name: str) -> AuthSession:
        """Create an account and persist the session."""
        validate_credentials(email, password, name)
        session = await self.gateway.register(email.strip(), password, name.strip())
        logger.info("Registered %s", session.user.email)
        return self._remember(session)

    def restore(self) -> AuthSession | None:
        """
        Hydrate the session from local storage.

        Returns:
            The stored session, or None when absent, unreadable or expired
        """
        token = self.session_repo.get_token()
        user_data = self.session_repo.get_user_data()
        if not token or not user_data:
            return None

        try:
            user = User.model_validate_json(user_data)
        except PydanticValidationError:
            logger.warning("Stored user data is unreadable; clearing session")
            self.session_repo.clear()
            return None

        expires_at = token_expiry(token)
        if expires_at is not None and is_token_expired(expires_at, buffer_ms=0):
            logger.info("Stored token expired; clearing session")
            self.session_repo.clear()
            return None

        return AuthSession(token=token, user=user)

    def current_token(self) -> str | None:
        """Bearer token for outgoing requests."""
        return self.session_repo.get_token()

    def logout(self) -> None:
        """Clear token and user together."""
        self.session_repo.clear()
        logger.info("Logged out")
