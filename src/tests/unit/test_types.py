"""Tests for firenotes.core.types module."""

from datetime import datetime, timezone

from firenotes.core.types import HealthStatus, Note, Row, RowKind


class TestRow:
    """Tests for the Row model."""

    def test_to_api_uses_wire_field_names(self):
        """Rows serialize as {id, type, content, order}."""
        row = Row(id="r1", kind=RowKind.CHECKBOX, content="checked", order=3)

        assert row.to_api() == {
            "id": "r1",
            "type": "checkbox",
            "content": "checked",
            "order": 3,
        }

    def test_row_accepts_wire_alias(self):
        """Rows parse from the wire ``type`` field."""
        row = Row.model_validate({"id": "r1", "type": "bullet", "content": "x", "order": 0})

        assert row.kind is RowKind.BULLET


class TestNote:
    """Tests for the Note model."""

    def test_from_api_adopts_remote_id(self, note_payload):
        """Without a local id the store id is used for both."""
        note = Note.from_api(note_payload())

        assert note.id == "64f1a2b3c4d5e6f708091011"
        assert note.remote_id == "64f1a2b3c4d5e6f708091011"
        assert note.user_id == "user-1"
        assert note.updated_at == datetime(2024, 11, 14, 9, 30, tzinfo=timezone.utc)
        assert note.rows[0].content == "hello"

    def test_from_api_keeps_local_id(self, note_payload):
        """A supplied local id survives the first persist."""
        note = Note.from_api(note_payload(), local_id="local-1")

        assert note.id == "local-1"
        assert note.remote_id == "64f1a2b3c4d5e6f708091011"

    def test_matches_either_identifier(self, sample_note):
        """Lookup accepts the local or the store identifier."""
        assert sample_note.matches("local-1")
        assert sample_note.matches("64f1a2b3c4d5e6f708091011")
        assert not sample_note.matches("other")
        assert not sample_note.matches(None)

    def test_same_note_across_id_adoption(self, sample_note):
        """A local-only copy and its persisted copy are the same note."""
        local_copy = sample_note.model_copy(update={"remote_id": None})

        assert local_copy.same_note(sample_note)
        assert sample_note.same_note(local_copy)

    def test_to_payload(self, sample_note):
        """Create payload carries only title and rows."""
        payload = sample_note.to_payload()

        assert set(payload) == {"title", "rows"}
        assert payload["rows"][1]["type"] == "checkbox"


class TestHealthStatus:
    """Tests for the health response model."""

    def test_healthy_when_ok_and_connected(self):
        """Healthy only when the API and database both report up."""
        assert HealthStatus(status="OK", database="Connected").is_healthy
        assert not HealthStatus(status="OK", database="Disconnected").is_healthy
        assert not HealthStatus(status="ERROR").is_healthy
