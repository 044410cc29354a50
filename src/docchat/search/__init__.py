"""Conversation search — structural filters, text query, debouncing."""

from docchat.search.debounce import ConversationSearch, Debouncer
from docchat.search.filters import (
    ConversationFilters,
    DateRange,
    SourceTypeFilter,
    apply_filters,
    has_active_filters,
    search_conversations,
)

__all__ = [
    "ConversationFilters",
    "ConversationSearch",
    "DateRange",
    "Debouncer",
    "SourceTypeFilter",
    "apply_filters",
    "has_active_filters",
    "search_conversations",
]
