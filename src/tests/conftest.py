"""Shared test fixtures and configuration."""

from __future__ import annotations

import asyncio
import base64
import json
import time
from datetime import datetime, timezone
from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from firenotes.core.types import Note, Row, RowKind
from firenotes.remote.client import ApiClient


@pytest.fixture
def session_file(tmp_path):
    """Path for a temporary session file."""
    return tmp_path / "session.json"


@pytest.fixture
def export_dir(tmp_path):
    """Temporary export directory."""
    return tmp_path / "exports"


@pytest.fixture
def make_row():
    """Factory for rows."""

    def _make_row(kind: RowKind = RowKind.TEXT, content: str = "", order: int = 0, row_id=None):
        return Row(id=row_id or f"row-{order}", kind=kind, content=content, order=order)

    return _make_row


@pytest.fixture
def sample_rows():
    """One row of every kind, in order."""
    return [
        Row(id="r0", kind=RowKind.TEXT, content="Buy groceries", order=0),
        Row(id="r1", kind=RowKind.CHECKBOX, content="checked", order=1),
        Row(id="r2", kind=RowKind.BULLET, content="Milk", order=2),
        Row(id="r3", kind=RowKind.IMAGE, content="file:///photos/cart.jpg", order=3),
    ]


@pytest.fixture
def sample_note(sample_rows):
    """A persisted note with one row of every kind."""
    return Note(
        id="local-1",
        remote_id="64f1a2b3c4d5e6f708091011",
        title="Shopping List",
        rows=sample_rows,
        user_id="user-1",
        created_at=datetime(2024, 11, 14, 8, 0, tzinfo=timezone.utc),
        updated_at=datetime(2024, 11, 14, 9, 30, tzinfo=timezone.utc),
    )


@pytest.fixture
def note_payload():
    """Factory for notes in their wire representation."""

    def _note_payload(
        remote_id: str = "64f1a2b3c4d5e6f708091011",
        title: str = "Shopping List",
        rows: list[dict[str, Any]] | None = None,
        updated_at: str = "2024-11-14T09:30:00.000Z",
    ) -> dict[str, Any]:
        return {
            "_id": remote_id,
            "title": title,
            "rows": rows
            if rows is not None
            else [{"id": "r0", "type": "text", "content": "hello", "order": 0}],
            "userId": "user-1",
            "createdAt": "2024-11-14T08:00:00.000Z",
            "updatedAt": updated_at,
        }

    return _note_payload


@pytest.fixture
def make_token():
    """Factory for unsigned JWTs with an ``exp`` claim."""

    def _make_token(expires_in: float = 7 * 24 * 3600) -> str:
        def _segment(data: dict) -> str:
            raw = json.dumps(data).encode()
            return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()

        header = _segment({"alg": "HS256", "typ": "JWT"})
        claims = _segment({"userId": "user-1", "exp": int(time.time() + expires_in)})
        return f"{header}.{claims}.signature"

    return _make_token


@pytest.fixture
def make_api_client():
    """Factory for ApiClient instances backed by an httpx.MockTransport."""

    def _make_api_client(
        handler: Callable[[httpx.Request], httpx.Response],
        token: str | None = "test-token",
    ) -> ApiClient:
        return ApiClient(
            base_url="http://test/api",
            timeout=1.0,
            token_provider=lambda: token,
            transport=httpx.MockTransport(handler),
        )

    return _make_api_client


@pytest.fixture
def recorded_requests():
    """List shared with json_handler to inspect sent requests."""
    return []


@pytest.fixture
def json_handler(recorded_requests):
    """Factory for MockTransport handlers answering with a fixed response."""

    def _json_handler(status_code: int = 200, body: Any = None):
        def handler(request: httpx.Request) -> httpx.Response:
            recorded_requests.append(request)
            if body is None:
                return httpx.Response(status_code)
            return httpx.Response(status_code, json=body)

        return handler

    return _json_handler


@pytest.fixture
def mock_notifier():
    """Notifier recording every notice."""
    notifier = MagicMock()
    notifier.notify = MagicMock()
    return notifier


@pytest.fixture
def fake_gateway():
    """NotesGateway stand-in that echoes saves back as persisted notes.

    Every call records ``(loop time, kwargs)`` in ``gateway.calls``.
    """
    gateway = MagicMock()
    gateway.calls = []
    gateway.delay = 0.0

    async def _echo(title, rows, remote_id, local_id):
        gateway.calls.append(
            {
                "at": asyncio.get_running_loop().time(),
                "title": title,
                "rows": list(rows),
                "remote_id": remote_id,
            }
        )
        if gateway.delay:
            await asyncio.sleep(gateway.delay)
        return Note(
            id=local_id or remote_id,
            remote_id=remote_id,
            title=title,
            rows=list(rows),
            user_id="user-1",
        )

    async def _create(title, rows, local_id=None):
        return await _echo(title, rows, "remote-new", local_id)

    async def _update(note_id, *, title=None, rows=None, local_id=None):
        return await _echo(title, rows, note_id, local_id)

    gateway.create = AsyncMock(side_effect=_create)
    gateway.update = AsyncMock(side_effect=_update)
    gateway.delete = AsyncMock(return_value=None)
    gateway.list = AsyncMock(return_value=[])
    gateway.client.aclose = AsyncMock()
    return gateway
