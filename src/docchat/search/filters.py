"""Conversation filter engine — structural filters, then free-text search.

Structural filters (date range, source type, message-count bounds) are
AND-combined and applied first; the text query is applied last. The result
is a stable filter of the input: order is never changed, and messages and
sources inside a conversation are never touched.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from docchat.models import Conversation, SourceType

_DAY_MS = 24 * 60 * 60 * 1000


class DateRange(str, Enum):
    ALL = "all"
    TODAY = "today"
    LAST_7_DAYS = "last-7-days"
    LAST_30_DAYS = "last-30-days"
    CUSTOM = "custom"


class SourceTypeFilter(str, Enum):
    ALL = "all"
    FILES = "files"
    URLS = "urls"
    NONE = "none"


@dataclass(frozen=True)
class ConversationFilters:
    """Search criteria; the defaults select everything.

    ``custom_date_start`` / ``custom_date_end`` only apply with
    ``DateRange.CUSTOM`` and may be given in either order.
    """

    date_range: DateRange = DateRange.ALL
    custom_date_start: datetime | None = None
    custom_date_end: datetime | None = None
    source_type: SourceTypeFilter = SourceTypeFilter.ALL
    min_messages: int | None = None
    max_messages: int | None = None


def has_active_filters(filters: ConversationFilters | None) -> bool:
    """True iff any criterion deviates from its default."""
    if filters is None:
        return False
    return (
        filters.date_range != DateRange.ALL
        or filters.source_type != SourceTypeFilter.ALL
        or filters.min_messages is not None
        or filters.max_messages is not None
    )


def _to_ms(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def _date_bounds(
    filters: ConversationFilters, now: datetime
) -> tuple[int | None, int | None]:
    """Return inclusive ``(lower, upper)`` epoch-ms bounds; ``None`` = open."""
    now_ms = _to_ms(now)
    if filters.date_range == DateRange.TODAY:
        midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
        return _to_ms(midnight), None
    if filters.date_range == DateRange.LAST_7_DAYS:
        return now_ms - 7 * _DAY_MS, None
    if filters.date_range == DateRange.LAST_30_DAYS:
        return now_ms - 30 * _DAY_MS, None
    if filters.date_range == DateRange.CUSTOM:
        if filters.custom_date_start is None or filters.custom_date_end is None:
            return None, None
        start = _to_ms(filters.custom_date_start)
        end = _to_ms(filters.custom_date_end)
        return min(start, end), max(start, end)
    return None, None


def _matches_source_type(conversation: Conversation, wanted: SourceTypeFilter) -> bool:
    if wanted == SourceTypeFilter.FILES:
        return any(s.type == SourceType.FILE for s in conversation.sources)
    if wanted == SourceTypeFilter.URLS:
        return any(s.type == SourceType.URL for s in conversation.sources)
    if wanted == SourceTypeFilter.NONE:
        return not conversation.sources
    return True


def _matches_message_count(conversation: Conversation, filters: ConversationFilters) -> bool:
    count = len(conversation.messages)
    if filters.min_messages is not None and count < filters.min_messages:
        return False
    if filters.max_messages is not None and count > filters.max_messages:
        return False
    return True


def _matches_query(conversation: Conversation, lowered_query: str) -> bool:
    if lowered_query in conversation.title.lower():
        return True
    return any(lowered_query in m.content.lower() for m in conversation.messages)


def apply_filters(
    conversations: Iterable[Conversation],
    filters: ConversationFilters | None = None,
    now: datetime | None = None,
) -> list[Conversation]:
    """Apply only the structural criteria (no text query)."""
    filters = filters or ConversationFilters()
    lower, upper = _date_bounds(filters, now or datetime.now().astimezone())

    result: list[Conversation] = []
    for conversation in conversations:
        if lower is not None and conversation.created_at < lower:
            continue
        if upper is not None and conversation.created_at > upper:
            continue
        if not _matches_source_type(conversation, filters.source_type):
            continue
        if not _matches_message_count(conversation, filters):
            continue
        result.append(conversation)
    return result


def search_conversations(
    conversations: Iterable[Conversation],
    query: str = "",
    filters: ConversationFilters | None = None,
    now: datetime | None = None,
) -> list[Conversation]:
    """Filter *conversations* by *filters*, then by *query*.

    The query is a case-insensitive substring match against the title or any
    message's content; a blank query matches everything.

    Args:
        conversations: Candidates, in display order.
        query: Free-text query.
        filters: Structural criteria (defaults select everything).
        now: Reference instant for relative date ranges. Defaults to the
            current local time.

    Returns:
        The matching conversations in their original order.
    """
    result = apply_filters(conversations, filters, now)
    trimmed = query.strip().lower()
    if not trimmed:
        return result
    return [c for c in result if _matches_query(c, trimmed)]
