"""Debounced conversation search.

``Debouncer`` owns a single event-loop timer: every ``submit()`` cancels the
pending timer and re-arms it, so only the last value inside the delay window
reaches the callback. A zero delay calls back synchronously.

``ConversationSearch`` holds the search box state. Only the free-text query
is debounced; structural filters apply on the next read.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Any

from docchat.models import Conversation
from docchat.search.filters import (
    ConversationFilters,
    has_active_filters,
    search_conversations,
)

_NOTHING = object()


class Debouncer:
    """Delay *callback* until submitted values stop changing for *delay_ms*.

    A non-zero delay needs a running asyncio event loop at ``submit()`` time.
    """

    def __init__(self, delay_ms: int, callback: Callable[[Any], None]) -> None:
        if delay_ms < 0:
            raise ValueError("delay_ms must be >= 0")
        self.delay_ms = delay_ms
        self._callback = callback
        self._handle: asyncio.TimerHandle | None = None
        self._value: Any = _NOTHING

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def submit(self, value: Any) -> None:
        self.cancel()
        if self.delay_ms == 0:
            self._callback(value)
            return
        loop = asyncio.get_running_loop()
        self._value = value
        self._handle = loop.call_later(self.delay_ms / 1000, self._fire)

    def cancel(self) -> None:
        """Drop the pending value, if any, without calling back."""
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self._value = _NOTHING

    def flush(self) -> None:
        """Deliver the pending value now instead of waiting for the timer."""
        if self._handle is not None:
            self._handle.cancel()
            self._fire()

    def _fire(self) -> None:
        value = self._value
        self._handle = None
        self._value = _NOTHING
        if value is not _NOTHING:
            self._callback(value)


class ConversationSearch:
    """Search box state over a list of conversations.

    Args:
        conversations: Candidates, in display order.
        filters: Structural criteria; may be reassigned at any time.
        debounce_ms: Query debounce delay (0 = apply on every keystroke).
        clock: Returns the reference instant for relative date ranges
            (defaults to the current local time).
    """

    def __init__(
        self,
        conversations: Iterable[Conversation],
        filters: ConversationFilters | None = None,
        debounce_ms: int = 0,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.conversations: list[Conversation] = list(conversations)
        self.filters: ConversationFilters = filters or ConversationFilters()
        self._clock = clock or (lambda: datetime.now().astimezone())
        self._search_query = ""
        self._applied_query = ""
        self._debouncer = Debouncer(debounce_ms, self._apply_query)

    @property
    def search_query(self) -> str:
        """The raw query as typed (may not be applied yet)."""
        return self._search_query

    @property
    def applied_query(self) -> str:
        """The query currently used for filtering."""
        return self._applied_query

    def set_search_query(self, query: str) -> None:
        self._search_query = query
        self._debouncer.submit(query)

    def clear_search(self) -> None:
        self.set_search_query("")

    def close(self) -> None:
        """Cancel any pending query update."""
        self._debouncer.cancel()

    @property
    def filtered_conversations(self) -> list[Conversation]:
        return search_conversations(
            self.conversations, self._applied_query, self.filters, now=self._clock()
        )

    @property
    def has_results(self) -> bool:
        return bool(self.filtered_conversations)

    @property
    def has_active_filters(self) -> bool:
        return has_active_filters(self.filters)

    def _apply_query(self, query: str) -> None:
        self._applied_query = query
