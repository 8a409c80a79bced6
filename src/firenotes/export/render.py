"""Stateless conversion of a note into plain text, Markdown and HTML."""

import re
import time
from datetime import datetime
from enum import Enum

from firenotes.core.config import APP_NAME
from firenotes.core.document import checkbox_label, is_checked
from firenotes.core.types import Note, Row, RowKind, utcnow
from firenotes.export.html_shell import build_document


class ExportFormat(Enum):
    """Supported export encodings, keyed by file extension."""

    TEXT = "txt"
    MARKDOWN = "md"
    HTML = "html"

    @property
    def extension(self) -> str:
        return f".{self.value}"

    @property
    def mime_type(self) -> str:
        return _FORMAT_INFO[self][0]

    @property
    def label(self) -> str:
        return _FORMAT_INFO[self][1]

    @property
    def description(self) -> str:
        return _FORMAT_INFO[self][2]


_FORMAT_INFO = {
    ExportFormat.TEXT: ("text/plain", "Text File", "Plain text format"),
    ExportFormat.MARKDOWN: (
        "text/markdown",
        "Markdown",
        "Markdown format with formatting",
    ),
    ExportFormat.HTML: ("text/html", "HTML", "Web page with styling"),
}

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-z0-9]")


def escape_html(unsafe: str) -> str:
    """Escape user content for insertion into HTML."""
    if not unsafe:
        return ""
    return (
        unsafe.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#039;")
    )


def format_timestamp(value: datetime) -> str:
    """Render a timestamp in local time for export headers."""
    return value.astimezone().strftime("%Y-%m-%d %H:%M:%S")


def image_name(content: str) -> str:
    """Basename of an image content reference."""
    return content.rstrip("/").rsplit("/", 1)[-1] or "image"


def export_filename(title: str, fmt: ExportFormat, stamp_ms: int | None = None) -> str:
    """
    Build a filesystem-safe, unique export filename.

    Args:
        title: Note title
        fmt: Target format (provides the extension)
        stamp_ms: Uniqueness suffix (defaults to the current time in ms)

    Returns:
        e.g. ``shopping_list_1731571200000.md``
    """
    if stamp_ms is None:
        stamp_ms = time.time_ns() // 1_000_000
    safe = _UNSAFE_FILENAME_CHARS.sub("_", title.lower())
    return f"{safe}_{stamp_ms}{fmt.extension}"


# Plain text


def _text_row(row: Row) -> str:
    match row.kind:
        case RowKind.TEXT:
            return f"{row.content}\n\n"
        case RowKind.CHECKBOX:
            status = "[✓]" if is_checked(row.content) else "[ ]"
            return f"{status} {checkbox_label(row.content)}".rstrip() + "\n\n"
        case RowKind.BULLET:
            return f"• {row.content}\n\n"
        case RowKind.IMAGE:
            if row.content:
                return f"[Image: {image_name(row.content)}]\n\n"
            return "[Image: No image attached]\n\n"


def render_text(note: Note, exported_at: datetime | None = None) -> str:
    """Render a note as plain text."""
    exported_at = exported_at or utcnow()
    parts = [
        f"# {note.title}\n\n",
        f"Created: {format_timestamp(note.created_at)}\n",
        f"Updated: {format_timestamp(note.updated_at)}\n\n",
        "--- CONTENT ---\n\n",
    ]
    for index, row in enumerate(note.rows, start=1):
        parts.append(f"[{index}] {_text_row(row)}")
    parts.append(
        f"\n---\nExported from {APP_NAME} on {format_timestamp(exported_at)}"
    )
    return "".join(parts)


# Markdown


def _markdown_row(row: Row) -> str:
    match row.kind:
        case RowKind.TEXT:
            # Trailing double space keeps the hard line break
            return row.content.replace("\n", "  \n") + "\n\n"
        case RowKind.CHECKBOX:
            status = "[x]" if is_checked(row.content) else "[ ]"
            return f"- {status} {checkbox_label(row.content)}".rstrip() + "\n"
        case RowKind.BULLET:
            return f"- {row.content}\n"
        case RowKind.IMAGE:
            if row.content:
                return f"![{image_name(row.content)}]({row.content})\n\n"
            return "*[Image not attached]*\n\n"


def render_markdown(note: Note, exported_at: datetime | None = None) -> str:
    """Render a note as Markdown."""
    exported_at = exported_at or utcnow()
    parts = [
        f"# {note.title}\n\n",
        f"**Created:** {format_timestamp(note.created_at)}  \n",
        f"**Updated:** {format_timestamp(note.updated_at)}  \n\n",
        "---\n\n",
    ]
    parts.extend(_markdown_row(row) for row in note.rows)
    parts.append(
        f"\n---\n*Exported from {APP_NAME} on {format_timestamp(exported_at)}*"
    )
    return "".join(parts)


# HTML


def _html_row_body(row: Row) -> list[str]:
    match row.kind:
        case RowKind.TEXT:
            text = escape_html(row.content).replace("\n", "<br>")
            return [f'<div class="text-row">{text}</div>']
        case RowKind.CHECKBOX:
            glyph = "✅" if is_checked(row.content) else "⬜"
            return [
                '<div class="checkbox-row">',
                f'    <div class="checkbox">{glyph}</div>',
                f'    <div class="checkbox-text">{escape_html(checkbox_label(row.content))}</div>',
                "</div>",
            ]
        case RowKind.BULLET:
            return [
                '<div class="bullet-row">',
                '    <div class="bullet">•</div>',
                f'    <div class="bullet-text">{escape_html(row.content)}</div>',
                "</div>",
            ]
        case RowKind.IMAGE:
            if row.content:
                label = f"📷 Image: {escape_html(image_name(row.content))}"
            else:
                label = "📷 No image attached"
            return [
                '<div class="image-row">',
                f'    <div class="image-placeholder">{label}</div>',
                "</div>",
            ]


def _html_row(row: Row) -> str:
    lines = [f'        <div class="row {row.kind.value}-row">']
    lines.extend(f"            {line}" for line in _html_row_body(row))
    lines.append("        </div>")
    return "\n".join(lines)


def render_html(note: Note, exported_at: datetime | None = None) -> str:
    """Render a note as a standalone, styled HTML document."""
    exported_at = exported_at or utcnow()
    return build_document(
        title=escape_html(note.title),
        created=format_timestamp(note.created_at),
        updated=format_timestamp(note.updated_at),
        rows_markup="\n".join(_html_row(row) for row in note.rows),
        footer=(
            f"Exported from {escape_html(APP_NAME)} on "
            f"{format_timestamp(exported_at)}"
        ),
    )


def render_note(
    note: Note, fmt: ExportFormat, *, exported_at: datetime | None = None
) -> str:
    """Render ``note`` in the requested format."""
    match fmt:
        case ExportFormat.TEXT:
            return render_text(note, exported_at)
        case ExportFormat.MARKDOWN:
            return render_markdown(note, exported_at)
        case ExportFormat.HTML:
            return render_html(note, exported_at)
