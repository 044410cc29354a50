"""DOCX parser — raw text extraction via python-docx.

Extraction warnings (dropped images, flattened tables) are collected on the
result and never fail the parse. Only a hard error — not a ZIP archive,
missing package parts, a non-Word OOXML package — is a failure.
"""

from __future__ import annotations

import io
import zipfile

import docx
from docx.opc.exceptions import PackageNotFoundError
from docx.table import Table

from docchat.errors import ParseError
from docchat.ingest.base import BaseParser, ParsedText

# Relationship type of embedded pictures in the main document part.
_IMAGE_RELTYPE = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/image"


class DocxParser(BaseParser):
    """Extract body text in document order; table rows become tab-separated lines."""

    format_name = "docx"

    def _extract(self, data: bytes, name: str) -> ParsedText:
        try:
            document = docx.Document(io.BytesIO(data))
        except (PackageNotFoundError, zipfile.BadZipFile, KeyError, ValueError) as exc:
            raise ParseError(name, f"Not a valid Word document ({exc})") from exc

        parts: list[str] = []
        table_count = 0
        for block in document.iter_inner_content():
            if isinstance(block, Table):
                table_count += 1
                parts.extend(self._table_lines(block))
            else:
                parts.append(block.text)

        warnings: list[str] = []
        if table_count:
            warnings.append(f"{table_count} table(s) flattened to tab-separated text")

        image_count = sum(
            1 for rel in document.part.rels.values() if rel.reltype == _IMAGE_RELTYPE
        )
        if image_count:
            warnings.append(f"{image_count} embedded image(s) dropped")

        text = "\n".join(parts).strip()
        return ParsedText(text=text, warnings=warnings)

    @staticmethod
    def _table_lines(table: Table) -> list[str]:
        lines = []
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells]
            if any(cells):
                lines.append("\t".join(cells))
        return lines
