"""Remote note gateway: CRUD against the notes store."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any
from urllib.parse import quote

from pydantic import ValidationError as PydanticValidationError

from firenotes.core.errors import ServerError, ValidationError
from firenotes.core.types import HealthStatus, Note, Row
from firenotes.remote.client import ApiClient

logger = logging.getLogger(__name__)


def _note_path(note_id: str) -> str:
    return f"/notes/{quote(note_id, safe='')}"


def _parse_note(data: Any, local_id: str | None = None) -> Note:
    if not isinstance(data, dict):
        raise ServerError("Malformed note in server response")
    try:
        return Note.from_api(data, local_id=local_id)
    except PydanticValidationError as exc:
        raise ServerError("Malformed note in server response", detail=str(exc)) from exc


class NotesGateway:
    """Notes CRUD for the signed-in user."""

    def __init__(self, client: ApiClient):
        self.client = client

    async def list(self) -> list[Note]:
        """All notes of the current user, most recently updated first."""
        data = await self.client.request("GET", "/notes")
        if not isinstance(data, list):
            raise ServerError("Malformed notes list in server response")
        notes = [_parse_note(item) for item in data]
        notes.sort(key=lambda note: note.updated_at, reverse=True)
        return notes

    async def create(
        self,
        title: str,
        rows: Sequence[Row],
        local_id: str | None = None,
    ) -> Note:
        """
        Persist a new note.

        Args:
            title: Note title
            rows: Note rows
            local_id: Client identifier to keep on the returned note

        Returns:
            Note carrying the store-assigned ``remote_id`` and timestamps
        """
        data = await self.client.request(
            "POST",
            "/notes",
            json={"title": title, "rows": [row.to_api() for row in rows]},
        )
        note = _parse_note(data, local_id=local_id)
        logger.debug("Created note %s", note.remote_id)
        return note

    async def update(
        self,
        note_id: str,
        *,
        title: str | None = None,
        rows: Sequence[Row] | None = None,
        local_id: str | None = None,
    ) -> Note:
        """
        Persist only the supplied fields of an existing note.

        Raises:
            ValidationError: If neither title nor rows is given
            NotFoundError: If the note does not belong to the caller
        """
        payload: dict[str, Any] = {}
        if title is not None:
            payload["title"] = title
        if rows is not None:
            payload["rows"] = [row.to_api() for row in rows]
        if not payload:
            raise ValidationError("Nothing to update")

        data = await self.client.request("PUT", _note_path(note_id), json=payload)
        return _parse_note(data, local_id=local_id)

    async def delete(self, note_id: str) -> None:
        """Remove a note from the store."""
        await self.client.request("DELETE", _note_path(note_id))
        logger.debug("Deleted note %s", note_id)

    async def health(self) -> HealthStatus:
        """Check API and database status (no token required)."""
        data = await self.client.request("GET", "/health", auth=False)
        if not isinstance(data, dict):
            raise ServerError("Malformed health response")
        try:
            return HealthStatus.model_validate(data)
        except PydanticValidationError as exc:
            raise ServerError("Malformed health response", detail=str(exc)) from exc
