"""docchat ingest pipeline — classifier, parsers, URL resolver, orchestrator."""

from docchat.ingest.base import BaseParser, ParsedText
from docchat.ingest.binary import BinaryParser
from docchat.ingest.classifier import ACCEPTED_EXTENSIONS, FormatTag, classify
from docchat.ingest.csv_parser import CsvParser
from docchat.ingest.docx_parser import DocxParser
from docchat.ingest.markdown import MarkdownParser
from docchat.ingest.pdf import PdfParser
from docchat.ingest.plaintext import PlainTextParser

_PARSERS: dict[FormatTag, type[BaseParser]] = {
    FormatTag.PLAIN_TEXT: PlainTextParser,
    FormatTag.MARKDOWN: MarkdownParser,
    FormatTag.CSV: CsvParser,
    FormatTag.DOCX: DocxParser,
    FormatTag.PDF: PdfParser,
    FormatTag.UNSUPPORTED: BinaryParser,
}


def get_parser(tag: FormatTag) -> BaseParser:
    """Return a parser instance for *tag* (binary fallback for unknown tags)."""
    return _PARSERS.get(tag, BinaryParser)()


__all__ = [
    "ACCEPTED_EXTENSIONS",
    "BaseParser",
    "BinaryParser",
    "CsvParser",
    "DocxParser",
    "FormatTag",
    "MarkdownParser",
    "ParsedText",
    "PdfParser",
    "PlainTextParser",
    "classify",
    "get_parser",
]
