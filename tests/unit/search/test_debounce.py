"""Tests for the debouncer and the search box state."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone

import pytest

from docchat.models import Conversation, Message, Source, SourceType
from docchat.search.debounce import ConversationSearch, Debouncer
from docchat.search.filters import ConversationFilters, SourceTypeFilter

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)
NOW_MS = int(NOW.timestamp() * 1000)


@pytest.fixture
def conversations() -> list[Conversation]:
    return [
        Conversation(title="Alpha", created_at=NOW_MS, messages=(Message("first"),)),
        Conversation(
            title="Beta",
            created_at=NOW_MS,
            sources=(Source("a", "x", SourceType.FILE, "a"),),
        ),
        Conversation(title="Gamma", created_at=NOW_MS, messages=(Message("alpha again"),)),
    ]


# ------------------------------------------------------------------
# Debouncer
# ------------------------------------------------------------------


def test_negative_delay_rejected():
    with pytest.raises(ValueError):
        Debouncer(-1, lambda value: None)


def test_zero_delay_calls_back_synchronously():
    seen: list[str] = []
    debouncer = Debouncer(0, seen.append)

    debouncer.submit("a")
    debouncer.submit("ab")
    assert seen == ["a", "ab"]
    assert not debouncer.pending


def test_only_last_value_in_window_is_delivered():
    seen: list[str] = []

    async def run():
        debouncer = Debouncer(20, seen.append)
        for value in ["r", "re", "rep", "report"]:
            debouncer.submit(value)
            await asyncio.sleep(0.001)
        assert seen == []
        assert debouncer.pending
        await asyncio.sleep(0.08)
        assert not debouncer.pending

    asyncio.run(run())
    assert seen == ["report"]


def test_values_spaced_beyond_delay_are_all_delivered():
    seen: list[str] = []

    async def run():
        debouncer = Debouncer(10, seen.append)
        debouncer.submit("a")
        await asyncio.sleep(0.05)
        debouncer.submit("b")
        await asyncio.sleep(0.05)

    asyncio.run(run())
    assert seen == ["a", "b"]


def test_cancel_drops_pending_value():
    seen: list[str] = []

    async def run():
        debouncer = Debouncer(10, seen.append)
        debouncer.submit("a")
        debouncer.cancel()
        await asyncio.sleep(0.05)

    asyncio.run(run())
    assert seen == []


def test_flush_delivers_immediately():
    seen: list[str] = []

    async def run():
        debouncer = Debouncer(1000, seen.append)
        debouncer.submit("now")
        debouncer.flush()
        assert seen == ["now"]
        assert not debouncer.pending

    asyncio.run(run())


def test_flush_without_pending_is_noop():
    seen: list[str] = []
    Debouncer(10, seen.append).flush()
    assert seen == []


def test_nonzero_delay_needs_running_loop():
    with pytest.raises(RuntimeError):
        Debouncer(10, lambda value: None).submit("x")


# ------------------------------------------------------------------
# ConversationSearch
# ------------------------------------------------------------------


def _search(conversations, **kwargs) -> ConversationSearch:
    return ConversationSearch(conversations, clock=lambda: NOW, **kwargs)


def test_initial_state_returns_everything(conversations):
    search = _search(conversations)
    assert search.search_query == ""
    assert search.filtered_conversations == conversations
    assert search.has_results
    assert not search.has_active_filters


def test_query_applied_immediately_without_debounce(conversations):
    search = _search(conversations)
    search.set_search_query("alpha")
    assert [c.title for c in search.filtered_conversations] == ["Alpha", "Gamma"]


def test_debounced_query_applies_after_delay(conversations):
    search = _search(conversations, debounce_ms=20)

    async def run():
        search.set_search_query("beta")
        assert search.search_query == "beta"
        assert search.applied_query == ""
        assert search.filtered_conversations == conversations
        await asyncio.sleep(0.08)

    asyncio.run(run())
    assert search.applied_query == "beta"
    assert [c.title for c in search.filtered_conversations] == ["Beta"]


def test_close_cancels_pending_query(conversations):
    search = _search(conversations, debounce_ms=20)

    async def run():
        search.set_search_query("beta")
        search.close()
        await asyncio.sleep(0.05)

    asyncio.run(run())
    assert search.applied_query == ""


def test_clear_search(conversations):
    search = _search(conversations)
    search.set_search_query("zzz")
    assert not search.has_results
    search.clear_search()
    assert search.search_query == ""
    assert search.filtered_conversations == conversations


def test_filters_apply_without_debounce(conversations):
    search = _search(conversations, debounce_ms=500)
    search.filters = ConversationFilters(source_type=SourceTypeFilter.NONE)
    assert search.has_active_filters
    assert [c.title for c in search.filtered_conversations] == ["Alpha", "Gamma"]
