"""Pure edit operations over a note's row sequence.

Every function returns a new list and leaves its input untouched. Unknown
row ids are a no-op. Structural changes (add, remove, duplicate, move)
always leave ``order`` equal to each row's index.
"""

from collections.abc import Sequence
from uuid import uuid4

from firenotes.core.types import (
    CHECKED,
    DEFAULT_NOTE_TITLE,
    UNCHECKED,
    Note,
    Row,
    RowKind,
    utcnow,
)


def new_id() -> str:
    """Generate an opaque identifier for a row or a local note."""
    return uuid4().hex


def default_content(kind: RowKind) -> str:
    """Initial content for a freshly added row."""
    match kind:
        case RowKind.CHECKBOX:
            return UNCHECKED
        case RowKind.TEXT | RowKind.BULLET | RowKind.IMAGE:
            return ""


def is_checked(content: str) -> bool:
    """Checkbox state; only the exact ``checked`` sentinel counts."""
    return content == CHECKED


def checkbox_label(content: str) -> str:
    """Label of a checkbox row; state sentinels carry no label."""
    if content in (CHECKED, UNCHECKED):
        return ""
    return content


def renumber(rows: Sequence[Row]) -> list[Row]:
    """Reassign ``order`` so it matches each row's position."""
    return [
        row if row.order == index else row.model_copy(update={"order": index})
        for index, row in enumerate(rows)
    ]


def is_in_order(rows: Sequence[Row]) -> bool:
    """True when ``order`` values are exactly 0..n-1 in sequence."""
    return all(row.order == index for index, row in enumerate(rows))


def _index_of(rows: Sequence[Row], row_id: str) -> int | None:
    for index, row in enumerate(rows):
        if row.id == row_id:
            return index
    return None


def add_row(rows: Sequence[Row], kind: RowKind) -> list[Row]:
    """Append a new row of ``kind`` with default content."""
    row = Row(id=new_id(), kind=kind, content=default_content(kind), order=len(rows))
    return renumber([*rows, row])


def update_row_content(rows: Sequence[Row], row_id: str, content: str) -> list[Row]:
    """Replace the content of the row with ``row_id``."""
    return [
        row.model_copy(update={"content": content}) if row.id == row_id else row
        for row in rows
    ]


def remove_row(rows: Sequence[Row], row_id: str) -> list[Row]:
    """Delete the row with ``row_id`` and renumber the rest."""
    if _index_of(rows, row_id) is None:
        return list(rows)
    return renumber([row for row in rows if row.id != row_id])


def duplicate_row(rows: Sequence[Row], row_id: str) -> list[Row]:
    """Insert a copy of the row right after it, with a fresh id."""
    index = _index_of(rows, row_id)
    if index is None:
        return list(rows)

    copy = rows[index].model_copy(update={"id": new_id()})
    return renumber([*rows[: index + 1], copy, *rows[index + 1 :]])


def move_row(rows: Sequence[Row], row_id: str, new_index: int) -> list[Row]:
    """Move the row to ``new_index`` (clamped to the sequence bounds)."""
    index = _index_of(rows, row_id)
    if index is None:
        return list(rows)

    remaining = [row for row in rows if row.id != row_id]
    target = max(0, min(new_index, len(remaining)))
    remaining.insert(target, rows[index])
    return renumber(remaining)


def toggle_checkbox(rows: Sequence[Row], row_id: str) -> list[Row]:
    """Flip a checkbox row between ``checked`` and ``unchecked``."""
    index = _index_of(rows, row_id)
    if index is None or rows[index].kind is not RowKind.CHECKBOX:
        return list(rows)

    content = UNCHECKED if is_checked(rows[index].content) else CHECKED
    return update_row_content(rows, row_id, content)


def attach_image(rows: Sequence[Row], row_id: str, uri: str) -> list[Row]:
    """Set the content reference of an image row."""
    index = _index_of(rows, row_id)
    if index is None or rows[index].kind is not RowKind.IMAGE:
        return list(rows)
    return update_row_content(rows, row_id, uri)


def new_note(title: str = DEFAULT_NOTE_TITLE) -> Note:
    """Create a local-only note holding a single empty text row."""
    now = utcnow()
    return Note(
        id=new_id(),
        title=title,
        rows=add_row([], RowKind.TEXT),
        created_at=now,
        updated_at=now,
    )
