"""HTTP client for the Fire Notes REST API.

Wraps ``httpx.AsyncClient`` with bearer authorization and maps transport and
HTTP failures onto the error taxonomy in ``firenotes.core.errors``.
"""

import logging
from collections.abc import Callable
from typing import Any

import httpx

from firenotes.core.config import API_BASE_URL, API_TIMEOUT_SECONDS
from firenotes.core.errors import (
    FireNotesError,
    NetworkError,
    NotFoundError,
    ServerError,
    UnauthorizedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], str | None]


async def _log_request(request: httpx.Request) -> None:
    logger.debug("API Request: %s %s", request.method, request.url.path)


async def _log_response(response: httpx.Response) -> None:
    logger.debug(
        "API Response: %s %s %s",
        response.status_code,
        response.request.method,
        response.request.url.path,
    )


def _server_message(response: httpx.Response, default: str) -> str:
    """Read ``message`` (or ``error``) from an error body, if any."""
    try:
        body = response.json()
    except ValueError:
        return default
    if isinstance(body, dict):
        for key in ("message", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return default


def error_for_response(response: httpx.Response) -> FireNotesError:
    """Map a non-2xx response to an application error."""
    status = response.status_code
    if status in (401, 403):
        return UnauthorizedError(_server_message(response, "Invalid token"))
    if status == 404:
        return NotFoundError(_server_message(response, "Note not found"))
    if status == 400:
        return ValidationError(_server_message(response, "Invalid request"))
    return ServerError(
        _server_message(response, f"Server error ({status})"),
        status_code=status,
    )


class ApiClient:
    """Async JSON client with optional bearer authorization."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        token_provider: TokenProvider | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize API client.

        Args:
            base_url: API root (defaults to API_BASE_URL)
            timeout: Request timeout in seconds (defaults to API_TIMEOUT_SECONDS)
            token_provider: Returns the current bearer token or None
            transport: Custom httpx transport (tests use httpx.MockTransport)
        """
        self.base_url = (base_url or API_BASE_URL).rstrip("/")
        self.token_provider = token_provider
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout if timeout is not None else API_TIMEOUT_SECONDS,
            headers={"Content-Type": "application/json"},
            transport=transport,
            event_hooks={"request": [_log_request], "response": [_log_response]},
        )

    def _auth_headers(self) -> dict[str, str]:
        token = self.token_provider() if self.token_provider else None
        if not token:
            raise UnauthorizedError("Access token required")
        return {"Authorization": f"Bearer {token}"}

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        auth: bool = True,
    ) -> Any:
        """
        Send a request and return the decoded JSON body.

        Args:
            method: HTTP method
            path: Path relative to the API root, e.g. "/notes"
            json: Optional JSON body
            auth: Attach the bearer token (fails before sending if absent)

        Returns:
            Decoded JSON body (None for an empty body)

        Raises:
            UnauthorizedError: Missing token, or 401/403 response
            NotFoundError: 404 response
            ValidationError: 400 response
            NetworkError: Transport failure or timeout
            ServerError: Any other non-2xx response, or malformed JSON
        """
        headers = self._auth_headers() if auth else {}

        try:
            response = await self._client.request(
                method, path, json=json, headers=headers
            )
        except httpx.TimeoutException as exc:
            logger.warning("API request timed out: %s %s", method, path)
            raise NetworkError("Request timed out", detail=str(exc)) from exc
        except httpx.RequestError as exc:
            logger.warning("API request failed: %s %s: %s", method, path, exc)
            raise NetworkError("Network error", detail=str(exc)) from exc

        if not response.is_success:
            error = error_for_response(response)
            logger.warning(
                "API error %s on %s %s: %s",
                response.status_code,
                method,
                path,
                error.message,
            )
            raise error

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise ServerError(
                "Malformed response from server",
                status_code=response.status_code,
                detail=str(exc),
            ) from exc

    async def aclose(self) -> None:
        """Close the underlying connection pool."""
        await self._client.aclose()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
