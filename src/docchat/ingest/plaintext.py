"""Plain text parser — UTF-8 passthrough."""

from __future__ import annotations

from docchat.ingest.base import BaseParser, ParsedText


class PlainTextParser(BaseParser):
    """Decode plain text as UTF-8 and pass it through unchanged."""

    format_name = "plain-text"

    def _extract(self, data: bytes, name: str) -> ParsedText:
        return ParsedText(text=self.decode_text(data))
