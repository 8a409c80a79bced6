"""Remote auth gateway: login and registration endpoints."""

import logging
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from firenotes.core.errors import ServerError
from firenotes.core.types import AuthSession
from firenotes.remote.client import ApiClient

logger = logging.getLogger(__name__)


def _parse_session(data: Any) -> AuthSession:
    try:
        return AuthSession.model_validate(data)
    except PydanticValidationError as exc:
        raise ServerError("Malformed auth response", detail=str(exc)) from exc


class AuthGateway:
    """Token issuance against ``/login`` and ``/register``."""

    def __init__(self, client: ApiClient):
        self.client = client

    async def login(self, email: str, password: str) -> AuthSession:
        """Exchange credentials for a bearer token."""
        data = await self.client.request(
            "POST",
            "/login",
            json={"email": email, "password": password},
            auth=False,
        )
        return _parse_session(data)

    async def register(self, email: str, password: str, name: str) -> AuthSession:
        """Create an account and return its first token."""
        data = await self.client.request(
            "POST",
            "/register",
            json={"email": email, "password": password, "name": name},
            auth=False,
        )
        return _parse_session(data)
