"""Tests for firenotes.export.render module."""

from datetime import datetime, timezone

import pytest

from firenotes.core.types import Note, Row, RowKind
from firenotes.export.render import (
    ExportFormat,
    escape_html,
    export_filename,
    format_timestamp,
    image_name,
    render_html,
    render_markdown,
    render_note,
    render_text,
)

EXPORTED_AT = datetime(2024, 11, 14, 12, 0, tzinfo=timezone.utc)


def _note(*rows, title="Trip"):
    return Note(
        id="n1",
        title=title,
        rows=[row.model_copy(update={"order": index}) for index, row in enumerate(rows)],
        created_at=datetime(2024, 11, 14, 8, 0, tzinfo=timezone.utc),
        updated_at=datetime(2024, 11, 14, 9, 30, tzinfo=timezone.utc),
    )


def _row(kind, content=""):
    return Row(id=f"{kind.value}-{content}", kind=kind, content=content)


class TestHelpers:
    """Tests for rendering helpers."""

    def test_escape_html(self):
        """All HTML-significant characters are escaped."""
        assert (
            escape_html('<b>hi & "bye"</b>')
            == "&lt;b&gt;hi &amp; &quot;bye&quot;&lt;/b&gt;"
        )
        assert escape_html("it's") == "it&#039;s"
        assert escape_html("") == ""

    @pytest.mark.parametrize(
        "content,expected",
        [
            ("file:///photos/cart.jpg", "cart.jpg"),
            ("https://example.com/a/b.png", "b.png"),
            ("plain.gif", "plain.gif"),
        ],
    )
    def test_image_name(self, content, expected):
        """Image labels use the reference basename."""
        assert image_name(content) == expected

    @pytest.mark.parametrize(
        "title,fmt,expected",
        [
            ("Shopping List", ExportFormat.TEXT, "shopping_list_1731571200000.txt"),
            ("Q3 Plan!", ExportFormat.MARKDOWN, "q3_plan__1731571200000.md"),
            ("Ünïcode", ExportFormat.HTML, "_n_code_1731571200000.html"),
        ],
    )
    def test_export_filename(self, title, fmt, expected):
        """Filenames are lowercased, sanitized and stamped."""
        assert export_filename(title, fmt, stamp_ms=1731571200000) == expected

    def test_export_filename_defaults_to_current_time(self):
        """Without a stamp the current time in ms is used."""
        name = export_filename("a", ExportFormat.TEXT)

        stamp = int(name.removeprefix("a_").removesuffix(".txt"))
        assert stamp > 1_700_000_000_000

    @pytest.mark.parametrize(
        "fmt,mime,label",
        [
            (ExportFormat.TEXT, "text/plain", "Text File"),
            (ExportFormat.MARKDOWN, "text/markdown", "Markdown"),
            (ExportFormat.HTML, "text/html", "HTML"),
        ],
    )
    def test_format_metadata(self, fmt, mime, label):
        """Each format carries its MIME type and label."""
        assert fmt.mime_type == mime
        assert fmt.label == label
        assert fmt.extension == f".{fmt.value}"


class TestRenderText:
    """Tests for plain text export."""

    def test_text_layout(self):
        """Header, numbered rows and footer are present."""
        note = _note(_row(RowKind.TEXT, "Pack bags"), _row(RowKind.BULLET, "Passport"))

        out = render_text(note, EXPORTED_AT)

        assert out.startswith("# Trip\n\n")
        assert f"Created: {format_timestamp(note.created_at)}\n" in out
        assert f"Updated: {format_timestamp(note.updated_at)}\n" in out
        assert "--- CONTENT ---" in out
        assert "[1] Pack bags\n\n" in out
        assert "[2] • Passport\n\n" in out
        assert out.endswith(f"Exported from Fire Notes on {format_timestamp(EXPORTED_AT)}")

    @pytest.mark.parametrize(
        "content,expected",
        [
            ("checked", "[1] [✓]\n"),
            ("unchecked", "[1] [ ]\n"),
            ("Call mom", "[1] [ ] Call mom\n"),
        ],
    )
    def test_text_checkbox(self, content, expected):
        """Checkbox sentinels render as state without a label."""
        out = render_text(_note(_row(RowKind.CHECKBOX, content)), EXPORTED_AT)

        assert expected in out

    def test_text_image(self):
        """Images render as a named placeholder."""
        out = render_text(
            _note(_row(RowKind.IMAGE, "file:///p/cat.jpg"), _row(RowKind.IMAGE)),
            EXPORTED_AT,
        )

        assert "[1] [Image: cat.jpg]" in out
        assert "[2] [Image: No image attached]" in out

    def test_empty_note_has_header_and_footer(self):
        """A note without rows still renders header and footer."""
        out = render_text(_note(), EXPORTED_AT)

        assert "--- CONTENT ---" in out
        assert "[1]" not in out
        assert "Exported from Fire Notes" in out


class TestRenderMarkdown:
    """Tests for Markdown export."""

    def test_markdown_rows(self):
        """Every row kind maps onto its Markdown construct."""
        note = _note(
            _row(RowKind.TEXT, "line one\nline two"),
            _row(RowKind.CHECKBOX, "checked"),
            _row(RowKind.CHECKBOX, "unchecked"),
            _row(RowKind.BULLET, "Milk"),
            _row(RowKind.IMAGE, "file:///p/cat.jpg"),
            _row(RowKind.IMAGE),
        )

        out = render_markdown(note, EXPORTED_AT)

        assert out.startswith("# Trip\n\n")
        assert "line one  \nline two\n\n" in out
        assert "- [x]\n" in out
        assert "- [ ]\n" in out
        assert "- Milk\n" in out
        assert "![cat.jpg](file:///p/cat.jpg)" in out
        assert "*[Image not attached]*" in out
        assert out.endswith(f"*Exported from Fire Notes on {format_timestamp(EXPORTED_AT)}*")


class TestRenderHtml:
    """Tests for HTML export."""

    def test_html_escapes_user_content(self):
        """Title and row content are escaped."""
        note = _note(_row(RowKind.TEXT, '<b>hi & "bye"</b>'), title="<script>")

        out = render_html(note, EXPORTED_AT)

        assert "&lt;b&gt;hi &amp; &quot;bye&quot;&lt;/b&gt;" in out
        assert "<title>&lt;script&gt;</title>" in out
        assert "<b>hi" not in out
        assert "<script>" not in out

    def test_html_rows(self):
        """Each row is wrapped with its kind class."""
        note = _note(
            _row(RowKind.TEXT, "a\nb"),
            _row(RowKind.CHECKBOX, "checked"),
            _row(RowKind.BULLET, "Milk"),
            _row(RowKind.IMAGE),
        )

        out = render_html(note, EXPORTED_AT)

        assert out.startswith("<!DOCTYPE html>")
        assert 'class="row text-row"' in out
        assert "a<br>b" in out
        assert "✅" in out
        assert 'class="row bullet-row"' in out
        assert "📷 No image attached" in out
        assert "<style>" in out

    def test_html_content_cannot_inject_placeholders(self):
        """Placeholder-like user text is left as content."""
        note = _note(_row(RowKind.TEXT, "__FOOTER__"), title="__ROWS_MARKUP__")

        out = render_html(note, EXPORTED_AT)

        assert "<title>__ROWS_MARKUP__</title>" in out
        assert "__FOOTER__" in out
        assert out.count("Exported from Fire Notes") == 1


class TestCheckboxRendering:
    """Tests for checkbox state and labels in every format."""

    @pytest.mark.parametrize(
        "content,fmt,expected",
        [
            ("checked", ExportFormat.TEXT, "[1] [✓]\n"),
            ("unchecked", ExportFormat.TEXT, "[1] [ ]\n"),
            ("checked", ExportFormat.MARKDOWN, "- [x]\n"),
            ("unchecked", ExportFormat.MARKDOWN, "- [ ]\n"),
            ("checked", ExportFormat.HTML, '<div class="checkbox-text"></div>'),
            ("unchecked", ExportFormat.HTML, '<div class="checkbox-text"></div>'),
        ],
    )
    def test_sentinel_renders_empty_label(self, content, fmt, expected):
        """State sentinels never leak into the label."""
        out = render_note(_note(_row(RowKind.CHECKBOX, content)), fmt, exported_at=EXPORTED_AT)

        assert expected in out
        assert f"[ ] {content}" not in out
        assert f"[x] {content}" not in out

    @pytest.mark.parametrize(
        "fmt,expected",
        [
            (ExportFormat.TEXT, '[1] [ ] <i>Call & "mom"</i>\n'),
            (ExportFormat.MARKDOWN, '- [ ] <i>Call & "mom"</i>\n'),
            (
                ExportFormat.HTML,
                '<div class="checkbox-text">'
                "&lt;i&gt;Call &amp; &quot;mom&quot;&lt;/i&gt;</div>",
            ),
        ],
    )
    def test_labelled_checkbox(self, fmt, expected):
        """Labels render unchecked, escaped in HTML."""
        label = '<i>Call & "mom"</i>'

        out = render_note(_note(_row(RowKind.CHECKBOX, label)), fmt, exported_at=EXPORTED_AT)

        assert expected in out
        if fmt is ExportFormat.HTML:
            assert "⬜" in out
            assert "<i>Call" not in out


class TestRenderNote:
    """Tests for format dispatch."""

    @pytest.mark.parametrize(
        "fmt,marker",
        [
            (ExportFormat.TEXT, "--- CONTENT ---"),
            (ExportFormat.MARKDOWN, "**Created:**"),
            (ExportFormat.HTML, "<!DOCTYPE html>"),
        ],
    )
    def test_render_note_dispatches(self, sample_note, fmt, marker):
        """render_note picks the renderer for the format."""
        assert marker in render_note(sample_note, fmt, exported_at=EXPORTED_AT)
