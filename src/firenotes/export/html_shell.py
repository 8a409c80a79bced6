"""Static HTML document shell used by the HTML exporter."""

from __future__ import annotations

import re

CSS_BLOCK = r"""
body {
    font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
    line-height: 1.6;
    padding: 20px;
    color: #333;
    max-width: 800px;
    margin: 0 auto;
    background-color: #f8f9fa;
}
.note-header {
    background: white;
    padding: 30px;
    border-radius: 12px;
    box-shadow: 0 2px 10px rgba(0,0,0,0.1);
    margin-bottom: 20px;
}
.note-title {
    font-size: 2em;
    margin: 0 0 10px 0;
    color: #1a1a1a;
    border-bottom: 3px solid #007AFF;
    padding-bottom: 10px;
}
.note-meta {
    color: #666;
    font-size: 0.9em;
    margin-bottom: 20px;
}
.note-content {
    background: white;
    padding: 30px;
    border-radius: 12px;
    box-shadow: 0 2px 10px rgba(0,0,0,0.1);
}
.row {
    margin-bottom: 20px;
    padding-bottom: 20px;
    border-bottom: 1px solid #eee;
}
.row:last-child {
    border-bottom: none;
    margin-bottom: 0;
}
.text-row {
    white-space: pre-wrap;
    font-size: 16px;
}
.checkbox-row, .bullet-row {
    display: flex;
    align-items: flex-start;
}
.checkbox, .bullet {
    margin-right: 10px;
}
.bullet {
    font-weight: bold;
}
.image-row {
    text-align: center;
}
.image-placeholder {
    color: #999;
    font-style: italic;
    padding: 20px;
    background: #f8f8f8;
    border-radius: 8px;
}
.export-footer {
    text-align: center;
    margin-top: 30px;
    color: #999;
    font-size: 0.9em;
}
"""

HTML_SHELL = r"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>__TITLE__</title>
<style>
__CSS_BLOCK__
</style>
</head>
<body>
    <div class="note-header">
        <h1 class="note-title">__TITLE__</h1>
        <div class="note-meta">
            <strong>Created:</strong> __CREATED__<br>
            <strong>Updated:</strong> __UPDATED__
        </div>
    </div>

    <div class="note-content">
__ROWS_MARKUP__
    </div>

    <div class="export-footer">
        __FOOTER__
    </div>
</body>
</html>
"""

_PLACEHOLDER = re.compile(r"__([A-Z_]+)__")


def build_document(
    *, title: str, created: str, updated: str, rows_markup: str, footer: str
) -> str:
    """Fill the shell in a single pass so placeholder-like user text stays inert.

    All arguments must already be escaped.
    """
    values = {
        "TITLE": title,
        "CSS_BLOCK": CSS_BLOCK.strip("\n"),
        "CREATED": created,
        "UPDATED": updated,
        "ROWS_MARKUP": rows_markup,
        "FOOTER": footer,
    }
    return _PLACEHOLDER.sub(lambda m: values.get(m.group(1), m.group(0)), HTML_SHELL)
