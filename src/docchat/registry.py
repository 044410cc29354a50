"""In-memory source registry — the single commit point for ingestion.

Holds the current corpus in insertion order and enforces key uniqueness.
Only ``add()`` and ``remove()`` mutate the store.
"""

from __future__ import annotations

from collections.abc import Iterator

from docchat.errors import DuplicateSourceError
from docchat.models import Source, SourceType


class SourceRegistry:
    """Ordered set of ingested sources, keyed by ``Source.source``.

    ``add()`` performs its existence check and its insert in one synchronous
    call. Coroutines on the same event loop cannot interleave inside it, so
    two concurrent ingestions of the same key commit exactly once.
    """

    def __init__(self, sources: list[Source] | None = None) -> None:
        self._sources: dict[str, Source] = {}
        for source in sources or []:
            self.add(source)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def exists(self, key: str) -> bool:
        """Exact match on the source key."""
        return key in self._sources

    def get(self, key: str) -> Source | None:
        return self._sources.get(key)

    def list_sources(self, source_type: SourceType | None = None) -> list[Source]:
        """Return sources in insertion order, optionally of one type only."""
        if source_type is None:
            return list(self._sources.values())
        return [s for s in self._sources.values() if s.type == source_type]

    def __contains__(self, key: object) -> bool:
        return key in self._sources

    def __len__(self) -> int:
        return len(self._sources)

    def __iter__(self) -> Iterator[Source]:
        return iter(list(self._sources.values()))

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(self, source: Source) -> None:
        """Append *source*.

        Raises:
            DuplicateSourceError: A source with the same key is already present.
        """
        if source.source in self._sources:
            raise DuplicateSourceError(source.source, source.type)
        self._sources[source.source] = source

    def remove(self, key: str) -> None:
        """Remove the source stored under *key*; unknown keys are ignored."""
        self._sources.pop(key, None)
