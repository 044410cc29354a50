"""Shared pytest fixtures."""

from __future__ import annotations

import base64
import io

import docx
import pytest

from docchat.notify import Notification
from docchat.registry import SourceRegistry

# 1x1 transparent PNG
PNG_1X1 = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)


class RecordingNotifier:
    """Notification sink that keeps every notification in order."""

    def __init__(self) -> None:
        self.notifications: list[Notification] = []

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)

    @property
    def titles(self) -> list[str]:
        return [n.title for n in self.notifications]


class FakeScraper:
    """Async scraper returning canned payloads and recording each call."""

    def __init__(self, pages: dict[str, dict] | None = None) -> None:
        self.pages = pages or {}
        self.calls: list[str] = []

    async def __call__(self, url: str) -> dict:
        self.calls.append(url)
        return self.pages.get(url, {"content": f"Content of {url}", "title": "Page"})


@pytest.fixture
def registry() -> SourceRegistry:
    return SourceRegistry()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def scraper() -> FakeScraper:
    return FakeScraper()


@pytest.fixture
def make_docx():
    """Factory: build .docx bytes.

    Body order: *paragraphs*, then *table*, then *after*; *picture* appends an
    inline image.
    """

    def _make(
        paragraphs: list[str],
        table: list[list[str]] | None = None,
        after: list[str] | None = None,
        picture: bool = False,
    ) -> bytes:
        document = docx.Document()
        for text in paragraphs:
            document.add_paragraph(text)
        if table:
            t = document.add_table(rows=len(table), cols=len(table[0]))
            for r, row in enumerate(table):
                for c, value in enumerate(row):
                    t.cell(r, c).text = value
        for text in after or []:
            document.add_paragraph(text)
        if picture:
            document.add_picture(io.BytesIO(PNG_1X1))
        buf = io.BytesIO()
        document.save(buf)
        return buf.getvalue()

    return _make
