"""Export of notes to plain text, Markdown and HTML."""

from firenotes.export.render import (
    ExportFormat,
    escape_html,
    export_filename,
    render_html,
    render_markdown,
    render_note,
    render_text,
)
from firenotes.export.service import ExportService, ShareTarget

__all__ = [
    "ExportFormat",
    "ExportService",
    "ShareTarget",
    "escape_html",
    "export_filename",
    "render_html",
    "render_markdown",
    "render_note",
    "render_text",
]
