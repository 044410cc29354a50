"""Domain models shared by the ingestion pipeline and conversation search."""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


class SourceType(str, Enum):
    FILE = "file"
    URL = "url"


@dataclass(frozen=True)
class Source:
    """A normalized ingested unit: one file or one scraped page.

    ``source`` is the registry key — the filename for files, the URL string
    for URLs. Sources are never mutated after creation.
    """

    name: str
    content: str
    type: SourceType
    source: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Source:
        return cls(
            name=str(data.get("name", "")),
            content=str(data.get("content", "")),
            type=SourceType(data.get("type", SourceType.FILE.value)),
            source=str(data.get("source", data.get("name", ""))),
        )


@dataclass(frozen=True)
class FileInput:
    """Raw file submitted for ingestion (name, bytes, declared MIME type)."""

    name: str
    data: bytes
    mime_type: str = ""

    @property
    def size(self) -> int:
        return len(self.data)

    @classmethod
    def from_path(cls, path: Path | str, *, read: bool = True) -> FileInput:
        """Build from *path*, guessing the MIME type from its name.

        With ``read=False`` the file is not opened and ``data`` is empty.
        """
        p = Path(path)
        mime, _ = mimetypes.guess_type(p.name)
        data = p.read_bytes() if read else b""
        return cls(name=p.name, data=data, mime_type=mime or "")


@dataclass(frozen=True)
class Message:
    content: str
    role: str = "user"
    id: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Message:
        return cls(
            content=str(data.get("content", "")),
            role=str(data.get("role", "user")),
            id=str(data.get("id", "")),
        )


@dataclass(frozen=True)
class Conversation:
    """A stored chat conversation.

    ``created_at`` is epoch milliseconds. ``messages`` are chronological and
    ``sources`` keep attachment order; neither is ever reordered by search.
    """

    title: str
    created_at: int
    sources: tuple[Source, ...] = field(default_factory=tuple)
    messages: tuple[Message, ...] = field(default_factory=tuple)
    id: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Conversation:
        """Build from the camelCase JSON shape used by the chat frontend."""
        return cls(
            id=str(data.get("id", "")),
            title=str(data.get("title", "")),
            created_at=int(data.get("createdAt", data.get("created_at", 0))),
            sources=tuple(Source.from_dict(s) for s in data.get("sources", [])),
            messages=tuple(Message.from_dict(m) for m in data.get("messages", [])),
        )
