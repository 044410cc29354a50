"""Error taxonomy for ingestion.

Every error carries a short user-facing ``title`` and uses its message as the
notification description. None of them are fatal: each one is isolated to
the item that raised it and reported once.
"""

from __future__ import annotations

from enum import Enum

from docchat.models import SourceType


class FailureKind(str, Enum):
    DUPLICATE_SOURCE = "duplicate-source"
    UNSUPPORTED_FORMAT = "unsupported-format"
    PARSE_FAILURE = "parse-failure"
    RESOLVER_FAILURE = "resolver-failure"
    VALIDATION_FAILURE = "validation-failure"


class DocchatError(Exception):
    """Base class for all recoverable per-item ingestion errors."""

    kind: FailureKind
    title: str = "Error"

    @property
    def description(self) -> str:
        return str(self)


class DuplicateSourceError(DocchatError):
    """The registry already holds a source with this key."""

    kind = FailureKind.DUPLICATE_SOURCE

    def __init__(self, key: str, source_type: SourceType = SourceType.FILE) -> None:
        self.key = key
        self.source_type = source_type
        if source_type == SourceType.URL:
            self.title = "URL already exists"
            message = f'The URL "{key}" is already in the list.'
        else:
            self.title = "File already exists"
            message = f'"{key}" is already in the list.'
        super().__init__(message)


class UnsupportedFormatError(DocchatError):
    """Neither the extension nor the declared MIME type is recognised."""

    kind = FailureKind.UNSUPPORTED_FORMAT
    title = "Unsupported File Type"

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__("Please upload a .txt, .pdf, .md, .csv, or .docx file.")


class ParseError(DocchatError):
    """A parser failed to extract text from *name*."""

    kind = FailureKind.PARSE_FAILURE
    title = "File Read Error"

    def __init__(self, name: str, message: str) -> None:
        self.name = name
        self.message = message
        super().__init__(f'There was an error processing "{name}": {message}')


class ResolverError(DocchatError):
    """The scraper reported an error for *url*."""

    kind = FailureKind.RESOLVER_FAILURE
    title = "Scraping Error"

    def __init__(self, url: str, message: str) -> None:
        self.url = url
        self.message = message
        super().__init__(message)


class ValidationError(DocchatError):
    """Input failed a name, size, content-length or URL check."""

    kind = FailureKind.VALIDATION_FAILURE

    def __init__(self, title: str, message: str) -> None:
        self.title = title
        super().__init__(message)
