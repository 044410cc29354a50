"""Ingestion orchestrator — drives each submitted file or URL to one outcome.

Per file:
  dedup → name/size validation → classify → parse (worker thread)
  → content validation → commit → notify
Per URL:
  blank check → dedup → URL validation → resolve → commit → notify

Every item ends in exactly one outcome and exactly one notification.
Items in a batch run concurrently and fail independently. The registry is
re-checked at commit time, so two items racing on the same key commit once.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from docchat.config import IngestCfg
from docchat.errors import (
    DocchatError,
    DuplicateSourceError,
    FailureKind,
    UnsupportedFormatError,
    ValidationError,
)
from docchat.ingest import FormatTag, classify, get_parser
from docchat.ingest.validation import (
    format_content_length,
    format_file_size,
    validate_file_content,
    validate_file_name,
    validate_file_size,
    validate_url,
)
from docchat.ingest.web import UrlResolver
from docchat.models import FileInput, Source, SourceType
from docchat.notify import Notification, NotificationSink, NullNotifier
from docchat.registry import SourceRegistry


class ItemState(str, Enum):
    SUBMITTED = "submitted"
    CLASSIFIED = "classified"
    PARSED = "parsed"
    COMMITTED = "committed"
    REJECTED = "rejected"
    DISCARDED = "discarded"


@dataclass
class IngestOutcome:
    """Terminal result for one submitted file or URL."""

    key: str
    state: ItemState = ItemState.SUBMITTED
    source: Source | None = None
    error: DocchatError | None = None
    format: FormatTag | None = None
    warnings: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.state is ItemState.COMMITTED

    @property
    def failure_kind(self) -> FailureKind | None:
        return self.error.kind if self.error is not None else None


class IngestionOrchestrator:
    """Classify, parse, de-duplicate and commit sources into a registry.

    After ``close()`` the orchestrator stops committing and notifying:
    items still in flight finish with state ``DISCARDED``.
    """

    def __init__(
        self,
        registry: SourceRegistry | None = None,
        resolver: UrlResolver | None = None,
        notifier: NotificationSink | None = None,
        config: IngestCfg | None = None,
    ) -> None:
        self.registry = registry if registry is not None else SourceRegistry()
        self.resolver = resolver if resolver is not None else UrlResolver()
        self.notifier = notifier if notifier is not None else NullNotifier()
        self.config = config or IngestCfg()
        self._closed = False

    async def __aenter__(self) -> IngestionOrchestrator:
        return self

    async def __aexit__(self, *args: object) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Tear down; outcomes arriving afterwards are discarded silently."""
        self._closed = True

    def remove(self, key: str) -> None:
        """Remove a source by key (no-op if absent)."""
        self.registry.remove(key)

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    async def ingest_files(self, files: Iterable[FileInput]) -> list[IngestOutcome]:
        """Ingest *files* concurrently; outcomes are returned in input order."""
        return list(await asyncio.gather(*(self.ingest_file(f) for f in files)))

    async def ingest_file(self, file: FileInput) -> IngestOutcome:
        outcome = IngestOutcome(key=file.name)
        try:
            source = await self._build_file_source(file, outcome)
        except DocchatError as exc:
            return self._reject(outcome, exc)

        notification = Notification(
            title="File attached",
            description=(
                f"{file.name} ({format_file_size(file.size)}, "
                f"{format_content_length(len(source.content))}) is ready for analysis."
            ),
        )
        return self._commit(outcome, source, notification)

    async def _build_file_source(self, file: FileInput, outcome: IngestOutcome) -> Source:
        if self.registry.exists(file.name):
            raise DuplicateSourceError(file.name, SourceType.FILE)

        validate_file_name(file.name)
        validate_file_size(file.name, file.size, self.config.max_file_size)

        tag = classify(file.name, file.mime_type)
        if tag is FormatTag.UNSUPPORTED:
            raise UnsupportedFormatError(file.name)
        outcome.format = tag
        outcome.state = ItemState.CLASSIFIED

        parser = get_parser(tag)
        parsed = await asyncio.to_thread(parser.parse, file.data, file.name)
        outcome.state = ItemState.PARSED
        outcome.warnings = list(parsed.warnings)

        validate_file_content(file.name, parsed.text, self.config.max_content_length)
        return Source(name=file.name, content=parsed.text, type=SourceType.FILE, source=file.name)

    # ------------------------------------------------------------------
    # URLs
    # ------------------------------------------------------------------

    async def ingest_urls(self, urls: Iterable[str]) -> list[IngestOutcome]:
        """Ingest *urls* concurrently; outcomes are returned in input order."""
        return list(await asyncio.gather(*(self.ingest_url(u) for u in urls)))

    async def ingest_url(self, url: str) -> IngestOutcome:
        key = url.strip()
        outcome = IngestOutcome(key=key)
        try:
            source = await self._build_url_source(key, outcome)
        except DocchatError as exc:
            return self._reject(outcome, exc)

        notification = Notification(
            title="URL Scraped",
            description=f'Content from "{key}" has been added.',
        )
        return self._commit(outcome, source, notification)

    async def _build_url_source(self, url: str, outcome: IngestOutcome) -> Source:
        if not url:
            raise ValidationError("Invalid URL", "Please enter a valid website URL.")
        if self.registry.exists(url):
            raise DuplicateSourceError(url, SourceType.URL)

        validate_url(url)
        outcome.state = ItemState.CLASSIFIED

        page = await self.resolver.resolve(url)
        outcome.state = ItemState.PARSED
        return Source(name=page.title, content=page.content, type=SourceType.URL, source=url)

    # ------------------------------------------------------------------
    # Terminal transitions
    # ------------------------------------------------------------------

    def _commit(
        self, outcome: IngestOutcome, source: Source, notification: Notification
    ) -> IngestOutcome:
        if self._closed:
            outcome.state = ItemState.DISCARDED
            return outcome
        try:
            self.registry.add(source)
        except DuplicateSourceError as exc:
            return self._reject(outcome, exc)
        outcome.state = ItemState.COMMITTED
        outcome.source = source
        self.notifier.notify(notification)
        return outcome

    def _reject(self, outcome: IngestOutcome, error: DocchatError) -> IngestOutcome:
        outcome.error = error
        if self._closed:
            outcome.state = ItemState.DISCARDED
            return outcome
        outcome.state = ItemState.REJECTED
        self.notifier.notify(Notification.from_error(error))
        return outcome
