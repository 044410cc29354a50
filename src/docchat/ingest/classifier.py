"""Format classifier — decides which parser applies to an uploaded file.

Rule precedence (highest first):
  1. File extension, case-insensitive, against the allow-list.
  2. Declared MIME type, only when the name carries no extension.
     Browsers and OSes disagree on MIME types (``.md`` arrives as ``''`` or
     ``text/plain``), so the extension always wins when present.
  3. Otherwise ``unsupported``. A present but unknown extension is never
     rescued by its MIME type.
"""

from __future__ import annotations

from enum import Enum
from pathlib import PurePath


class FormatTag(str, Enum):
    PLAIN_TEXT = "plain-text"
    MARKDOWN = "markdown"
    CSV = "csv"
    DOCX = "docx"
    PDF = "pdf"
    UNSUPPORTED = "unsupported"


DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

_EXTENSIONS: dict[str, FormatTag] = {
    ".txt": FormatTag.PLAIN_TEXT,
    ".pdf": FormatTag.PDF,
    ".md": FormatTag.MARKDOWN,
    ".csv": FormatTag.CSV,
    ".docx": FormatTag.DOCX,
}

_MIME_TYPES: dict[str, FormatTag] = {
    "text/plain": FormatTag.PLAIN_TEXT,
    "text/markdown": FormatTag.MARKDOWN,
    "text/x-markdown": FormatTag.MARKDOWN,
    "text/csv": FormatTag.CSV,
    "application/vnd.ms-excel": FormatTag.CSV,
    DOCX_MIME: FormatTag.DOCX,
    "application/pdf": FormatTag.PDF,
}

ACCEPTED_EXTENSIONS: tuple[str, ...] = tuple(_EXTENSIONS)


def extension_of(filename: str) -> str:
    """Return the lower-cased final suffix of *filename* (``''`` if none).

    Dotfiles (``.env``) and trailing dots (``notes.``) have no extension.
    """
    ext = PurePath(filename).suffix.lower()
    return "" if ext == "." else ext


def classify(filename: str, declared_mime_type: str = "") -> FormatTag:
    """Pick the format tag for *filename* given its declared MIME type."""
    ext = extension_of(filename)
    if ext:
        return _EXTENSIONS.get(ext, FormatTag.UNSUPPORTED)

    mime = (declared_mime_type or "").split(";")[0].strip().lower()
    if mime in _MIME_TYPES:
        return _MIME_TYPES[mime]
    if mime.startswith("text/"):
        return FormatTag.PLAIN_TEXT
    return FormatTag.UNSUPPORTED
