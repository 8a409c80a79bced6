"""Shared types and data structures for Fire Notes."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_NOTE_TITLE = "New Note"

# Checkbox state sentinels stored in Row.content
CHECKED = "checked"
UNCHECKED = "unchecked"


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class RowKind(Enum):
    """Kind of content held by a row."""

    TEXT = "text"
    IMAGE = "image"
    CHECKBOX = "checkbox"
    BULLET = "bullet"


class Row(BaseModel):
    """One content unit within a note."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    kind: RowKind = Field(alias="type")
    content: str = ""
    order: int = 0

    def to_api(self) -> dict[str, Any]:
        """Serialize to the wire shape ``{id, type, content, order}``."""
        return self.model_dump(by_alias=True, mode="json")


class Note(BaseModel):
    """A titled, ordered collection of rows.

    ``id`` is the client-local identifier. ``remote_id`` is issued by the
    store on first successful persist; until then the note is local-only.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    remote_id: str | None = Field(default=None, alias="_id")
    title: str = DEFAULT_NOTE_TITLE
    rows: list[Row] = Field(default_factory=list)
    user_id: str | None = Field(default=None, alias="userId")
    created_at: datetime = Field(default_factory=utcnow, alias="createdAt")
    updated_at: datetime = Field(default_factory=utcnow, alias="updatedAt")

    @property
    def is_persisted(self) -> bool:
        """True once the store has assigned an identifier."""
        return self.remote_id is not None

    def matches(self, identifier: str | None) -> bool:
        """Check identity against both the local and the store identifier."""
        if not identifier:
            return False
        return identifier == self.id or identifier == self.remote_id

    def same_note(self, other: Note) -> bool:
        """Check whether two copies refer to the same note."""
        return self.matches(other.id) or (
            other.remote_id is not None and self.matches(other.remote_id)
        )

    def to_payload(self) -> dict[str, Any]:
        """Body for create requests: ``{title, rows}``."""
        return {"title": self.title, "rows": [row.to_api() for row in self.rows]}

    @classmethod
    def from_api(cls, data: dict[str, Any], local_id: str | None = None) -> Note:
        """
        Build a note from its wire representation.

        Args:
            data: ``{_id, title, rows, userId, createdAt, updatedAt}``
            local_id: Keep this client identifier instead of adopting ``_id``

        Returns:
            Note with ``remote_id`` set
        """
        return cls.model_validate({**data, "id": local_id or data.get("_id")})


@dataclass(frozen=True)
class NoteDraft:
    """Latest editor content read at save time."""

    title: str
    rows: list[Row] = field(default_factory=list)


class User(BaseModel, frozen=True):
    """Authenticated user profile."""

    id: str
    email: str
    name: str = ""


class AuthSession(BaseModel, frozen=True):
    """Bearer token and the user it belongs to."""

    token: str
    user: User


class HealthStatus(BaseModel, frozen=True):
    """Response of the API health endpoint."""

    status: str
    database: str = "unknown"
    timestamp: datetime | None = None

    @property
    def is_healthy(self) -> bool:
        return self.status.upper() == "OK" and self.database == "Connected"


__all__ = [
    "AuthSession",
    "CHECKED",
    "DEFAULT_NOTE_TITLE",
    "HealthStatus",
    "Note",
    "NoteDraft",
    "Row",
    "RowKind",
    "UNCHECKED",
    "User",
    "utcnow",
]
