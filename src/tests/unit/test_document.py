"""Tests for firenotes.core.document module."""

import pytest

from firenotes.core import document
from firenotes.core.types import CHECKED, UNCHECKED, Row, RowKind


def _orders(rows):
    return [row.order for row in rows]


def _ids(rows):
    return [row.id for row in rows]


class TestAddRow:
    """Tests for appending rows."""

    @pytest.mark.parametrize(
        "kind,expected_content",
        [
            (RowKind.TEXT, ""),
            (RowKind.BULLET, ""),
            (RowKind.IMAGE, ""),
            (RowKind.CHECKBOX, UNCHECKED),
        ],
    )
    def test_add_row_default_content(self, kind, expected_content):
        """New rows start with the default content for their kind."""
        rows = document.add_row([], kind)

        assert len(rows) == 1
        assert rows[0].kind is kind
        assert rows[0].content == expected_content

    def test_add_row_appends_at_end(self, sample_rows):
        """Added row goes last with order equal to its index."""
        rows = document.add_row(sample_rows, RowKind.BULLET)

        assert _ids(rows)[:4] == _ids(sample_rows)
        assert rows[-1].order == 4
        assert _orders(rows) == [0, 1, 2, 3, 4]

    def test_add_row_generates_unique_ids(self):
        """Every added row gets a fresh identifier."""
        rows = []
        for _ in range(5):
            rows = document.add_row(rows, RowKind.TEXT)

        assert len(set(_ids(rows))) == 5

    def test_add_row_does_not_mutate_input(self, sample_rows):
        """The input list is left untouched."""
        before = list(sample_rows)

        document.add_row(sample_rows, RowKind.TEXT)

        assert sample_rows == before


class TestRemoveRow:
    """Tests for removing rows."""

    def test_remove_row_renumbers(self, sample_rows):
        """Remaining rows are renumbered contiguously."""
        rows = document.remove_row(sample_rows, "r1")

        assert _ids(rows) == ["r0", "r2", "r3"]
        assert _orders(rows) == [0, 1, 2]

    def test_remove_unknown_row_is_noop(self, sample_rows):
        """Unknown ids leave the rows unchanged."""
        assert document.remove_row(sample_rows, "missing") == sample_rows

    def test_remove_last_row_leaves_empty_note(self, make_row):
        """Removing the only row yields an empty sequence."""
        assert document.remove_row([make_row()], "row-0") == []


class TestDuplicateRow:
    """Tests for duplicating rows."""

    def test_duplicate_inserts_after_source(self, sample_rows):
        """Copy lands right after the original with a fresh id."""
        rows = document.duplicate_row(sample_rows, "r2")

        assert len(rows) == 5
        assert _ids(rows)[:3] == ["r0", "r1", "r2"]
        copy = rows[3]
        assert copy.id not in _ids(sample_rows)
        assert copy.kind is RowKind.BULLET
        assert copy.content == "Milk"
        assert rows[4].id == "r3"
        assert _orders(rows) == [0, 1, 2, 3, 4]

    def test_duplicate_unknown_row_is_noop(self, sample_rows):
        """Unknown ids leave the rows unchanged."""
        assert document.duplicate_row(sample_rows, "missing") == sample_rows


class TestMoveRow:
    """Tests for reordering rows."""

    def test_move_row_down(self, sample_rows):
        """Moving a row later shifts the rows between."""
        rows = document.move_row(sample_rows, "r0", 2)

        assert _ids(rows) == ["r1", "r2", "r0", "r3"]
        assert _orders(rows) == [0, 1, 2, 3]

    def test_move_row_to_front(self, sample_rows):
        """Moving to index 0 puts the row first."""
        rows = document.move_row(sample_rows, "r3", 0)

        assert _ids(rows) == ["r3", "r0", "r1", "r2"]
        assert _orders(rows) == [0, 1, 2, 3]

    @pytest.mark.parametrize("target,expected_first", [(-5, "r2"), (99, "r0")])
    def test_move_row_clamps_index(self, sample_rows, target, expected_first):
        """Out-of-range targets are clamped to the bounds."""
        rows = document.move_row(sample_rows, "r2", target)

        assert rows[0].id == expected_first
        assert _orders(rows) == [0, 1, 2, 3]


class TestCheckbox:
    """Tests for checkbox state."""

    def test_toggle_checkbox_round_trip(self, make_row):
        """Toggling twice returns to the original state."""
        rows = [make_row(RowKind.CHECKBOX, UNCHECKED)]

        once = document.toggle_checkbox(rows, "row-0")
        twice = document.toggle_checkbox(once, "row-0")

        assert once[0].content == CHECKED
        assert twice[0].content == UNCHECKED

    def test_toggle_labelled_checkbox_becomes_checked(self, make_row):
        """A label is replaced by the checked sentinel."""
        rows = [make_row(RowKind.CHECKBOX, "Call mom")]

        assert document.toggle_checkbox(rows, "row-0")[0].content == CHECKED

    def test_toggle_ignores_other_kinds(self, make_row):
        """Non-checkbox rows are unchanged."""
        rows = [make_row(RowKind.TEXT, "checked")]

        assert document.toggle_checkbox(rows, "row-0") == rows

    @pytest.mark.parametrize(
        "content,checked,label",
        [
            (CHECKED, True, ""),
            (UNCHECKED, False, ""),
            ("Call mom", False, "Call mom"),
            ("Checked", False, "Checked"),
        ],
    )
    def test_checkbox_helpers(self, content, checked, label):
        """Only the exact sentinel counts as checked; sentinels have no label."""
        assert document.is_checked(content) is checked
        assert document.checkbox_label(content) == label


class TestUpdates:
    """Tests for content updates."""

    def test_update_row_content(self, sample_rows):
        """Only the target row changes."""
        rows = document.update_row_content(sample_rows, "r0", "Buy bread")

        assert rows[0].content == "Buy bread"
        assert rows[1:] == sample_rows[1:]

    def test_attach_image_only_on_image_rows(self, sample_rows):
        """Image references are only set on image rows."""
        rows = document.attach_image(sample_rows, "r3", "file:///tmp/new.png")
        unchanged = document.attach_image(sample_rows, "r0", "file:///tmp/new.png")

        assert rows[3].content == "file:///tmp/new.png"
        assert unchanged == sample_rows


class TestOrdering:
    """Tests for order helpers."""

    def test_renumber_fixes_gaps(self):
        """Renumbering assigns 0..n-1 in sequence order."""
        rows = [
            Row(id="a", kind=RowKind.TEXT, order=5),
            Row(id="b", kind=RowKind.TEXT, order=2),
        ]

        renumbered = document.renumber(rows)

        assert _orders(renumbered) == [0, 1]
        assert document.is_in_order(renumbered)
        assert not document.is_in_order(rows)


class TestNewNote:
    """Tests for creating notes."""

    def test_new_note_has_one_empty_text_row(self):
        """New notes start local-only with a single empty text row."""
        note = document.new_note()

        assert note.title == "New Note"
        assert note.remote_id is None
        assert not note.is_persisted
        assert len(note.rows) == 1
        assert note.rows[0].kind is RowKind.TEXT
        assert note.rows[0].content == ""
        assert note.rows[0].order == 0
