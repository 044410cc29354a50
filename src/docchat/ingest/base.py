"""Base parser interface for all docchat file formats."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from docchat.errors import DocchatError, ParseError


@dataclass
class ParsedText:
    """Normalized text extracted from one file.

    ``warnings`` lists non-fatal extraction issues (lost formatting,
    recovered CSV rows). A non-empty list never means failure.
    """

    text: str
    warnings: list[str] = field(default_factory=list)


class BaseParser(ABC):
    """Abstract base for all parsers.

    Subclasses implement ``_extract()``. ``parse()`` is the public boundary:
    the only exception that may escape it is a ``DocchatError`` subclass —
    anything else raised by an extractor is wrapped in ``ParseError``.
    """

    #: Format tag value this parser handles (for messages / dispatch tables).
    format_name: str = ""

    def parse(self, data: bytes, name: str = "") -> ParsedText:
        """Convert the raw bytes of *name* into a single text blob.

        Args:
            data: Raw file content.
            name: Original filename (used in rendered headers and error messages).

        Returns:
            ParsedText with the extracted text and any non-fatal warnings.

        Raises:
            ParseError: The underlying extractor failed.
        """
        try:
            return self._extract(data, name)
        except DocchatError:
            raise
        except Exception as exc:
            raise ParseError(name, str(exc) or exc.__class__.__name__) from exc

    @abstractmethod
    def _extract(self, data: bytes, name: str) -> ParsedText:
        """Format-specific extraction. May raise anything; see ``parse()``."""

    @staticmethod
    def decode_text(data: bytes) -> str:
        """Decode UTF-8, dropping a leading BOM and replacing undecodable bytes."""
        return data.decode("utf-8-sig", errors="replace")
