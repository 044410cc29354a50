"""Binary fallback — the parser behind the ``unsupported`` format tag."""

from __future__ import annotations

from docchat.errors import UnsupportedFormatError
from docchat.ingest.base import BaseParser, ParsedText


class BinaryParser(BaseParser):
    """Never extracts anything; always rejects the file as unsupported."""

    format_name = "unsupported"

    def _extract(self, data: bytes, name: str) -> ParsedText:
        raise UnsupportedFormatError(name)
