"""CSV parser — tolerant row reader, flattened to readable text."""

from __future__ import annotations

import csv
import io

from docchat.errors import ParseError
from docchat.ingest.base import BaseParser, ParsedText

_RULE = "-" * 50


class CsvParser(BaseParser):
    """Parse a CSV table (first non-blank row = header) into plain text.

    Structural problems are recovered row by row instead of failing the file:
    - short rows are padded with empty values,
    - extra values beyond the header are kept under ``(extra)``,
    - a line the reader rejects is skipped.
    Each recovery is reported as a warning. Only a file with no header row
    at all is a parse failure.

    Output layout::

        CSV Data from people.csv

        Total rows: 1
        Columns: name, age

        Data:
        --------------------------------------------------

        Row 1:
          name: Ada
          age: 36
    """

    format_name = "csv"

    def _extract(self, data: bytes, name: str) -> ParsedText:
        rows, warnings = self._read_rows(self.decode_text(data))
        if not rows:
            raise ParseError(name, "CSV file has no header row")

        _, header_row = rows[0]
        headers = self._unique_headers(
            [h.strip() or f"Column {i}" for i, h in enumerate(header_row, start=1)]
        )

        records: list[tuple[dict[str, str], list[str]]] = []
        for line_no, row in rows[1:]:
            if len(row) < len(headers):
                warnings.append(
                    f"Line {line_no}: expected {len(headers)} fields, got {len(row)} "
                    "(missing values left empty)"
                )
                row = row + [""] * (len(headers) - len(row))
            extra = row[len(headers):]
            if extra:
                warnings.append(
                    f"Line {line_no}: expected {len(headers)} fields, got {len(row)} "
                    "(extra values kept)"
                )
            records.append((dict(zip(headers, row)), extra))

        return ParsedText(text=self._render(name, headers, records), warnings=warnings)

    @staticmethod
    def _unique_headers(headers: list[str]) -> list[str]:
        """Suffix repeated names (``name``, ``name_1``, ...) so no column is lost."""
        seen: set[str] = set(headers)
        counts: dict[str, int] = {}
        result: list[str] = []
        for header in headers:
            if header not in counts:
                counts[header] = 0
                result.append(header)
                continue
            counts[header] += 1
            renamed = f"{header}_{counts[header]}"
            while renamed in seen:
                counts[header] += 1
                renamed = f"{header}_{counts[header]}"
            seen.add(renamed)
            result.append(renamed)
        return result

    @staticmethod
    def _read_rows(text: str) -> tuple[list[tuple[int, list[str]]], list[str]]:
        """Return ``[(line_no, fields), ...]`` for non-blank rows plus warnings."""
        reader = csv.reader(io.StringIO(text, newline=""))
        rows: list[tuple[int, list[str]]] = []
        warnings: list[str] = []
        while True:
            try:
                row = next(reader)
            except StopIteration:
                break
            except csv.Error as exc:
                warnings.append(f"Line {reader.line_num}: skipped malformed row ({exc})")
                continue
            if not any(field.strip() for field in row):
                continue
            rows.append((reader.line_num, row))
        return rows, warnings

    @staticmethod
    def _render(
        name: str, headers: list[str], records: list[tuple[dict[str, str], list[str]]]
    ) -> str:
        lines = [
            f"CSV Data from {name}",
            "",
            f"Total rows: {len(records)}",
            f"Columns: {', '.join(headers)}",
            "",
            "Data:",
            _RULE,
        ]
        for index, (record, extra) in enumerate(records, start=1):
            lines.append("")
            lines.append(f"Row {index}:")
            for header in headers:
                lines.append(f"  {header}: {record[header]}")
            if extra:
                lines.append(f"  (extra): {', '.join(extra)}")
        return "\n".join(lines) + "\n"
