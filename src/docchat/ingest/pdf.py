"""PDF parser — page-based extraction via pypdf."""

from __future__ import annotations

import io

import pypdf
from pypdf.errors import PdfReadError

from docchat.errors import ParseError
from docchat.ingest.base import BaseParser, ParsedText


class PdfParser(BaseParser):
    """Extract text from a PDF document using pypdf.

    Strategy:
    - Extract text page-by-page via ``pypdf.PdfReader``.
    - Join the non-empty pages with blank lines.
    - Pages that yield no text (scanned images, etc.) are skipped and
      reported as a warning.
    """

    format_name = "pdf"

    def _extract(self, data: bytes, name: str) -> ParsedText:
        try:
            reader = pypdf.PdfReader(io.BytesIO(data))
        except PdfReadError as exc:
            raise ParseError(name, f"Could not read PDF file ({exc})") from exc

        parts: list[str] = []
        empty_pages = 0
        for page in reader.pages:
            stripped = (page.extract_text() or "").strip()
            if stripped:
                parts.append(stripped)
            else:
                empty_pages += 1

        warnings: list[str] = []
        if empty_pages:
            warnings.append(f"{empty_pages} page(s) without extractable text skipped")
        return ParsedText(text="\n\n".join(parts), warnings=warnings)
