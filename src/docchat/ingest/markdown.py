"""Markdown parser — stored as source text, never rendered at ingest time."""

from __future__ import annotations

from docchat.ingest.plaintext import PlainTextParser


class MarkdownParser(PlainTextParser):
    """Read Markdown as plain UTF-8 text.

    The markup is preserved verbatim so the chat view can render it later.
    """

    format_name = "markdown"
