"""docchat search — filter and search a conversation history export.

Input is the JSON the chat frontend stores: a list of conversations, or an
object with a ``conversations`` list. Structural filters apply first, then
the free-text query (title or any message, case-insensitive).
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from docchat.cli.errors import (
    err_conversations_file,
    err_custom_range_incomplete,
    hint_clear_filters,
)
from docchat.models import Conversation, SourceType
from docchat.search.debounce import ConversationSearch
from docchat.search.filters import ConversationFilters, DateRange, SourceTypeFilter

console = Console()


def search_cmd(
    conversations_file: Annotated[
        Path,
        typer.Argument(help="Conversations JSON file."),
    ],
    query: Annotated[
        str,
        typer.Option("--query", "-q", help="Text to find in titles or messages."),
    ] = "",
    date_range: Annotated[
        DateRange,
        typer.Option("--date-range", case_sensitive=False, help="Created-at window."),
    ] = DateRange.ALL,
    date_from: Annotated[
        datetime | None,
        typer.Option("--from", help="Custom range bound (with --date-range custom)."),
    ] = None,
    date_to: Annotated[
        datetime | None,
        typer.Option("--to", help="Custom range bound (with --date-range custom)."),
    ] = None,
    source_type: Annotated[
        SourceTypeFilter,
        typer.Option("--source-type", case_sensitive=False, help="Attached source kind."),
    ] = SourceTypeFilter.ALL,
    min_messages: Annotated[
        int | None,
        typer.Option("--min-messages", min=0, help="Minimum message count (inclusive)."),
    ] = None,
    max_messages: Annotated[
        int | None,
        typer.Option("--max-messages", min=0, help="Maximum message count (inclusive)."),
    ] = None,
) -> None:
    """Search conversations by text, date range, source type and length."""
    conversations = _load_conversations(conversations_file)

    if date_range == DateRange.CUSTOM and (date_from is None or date_to is None):
        console.print(err_custom_range_incomplete())

    search = ConversationSearch(
        conversations,
        filters=ConversationFilters(
            date_range=date_range,
            custom_date_start=date_from,
            custom_date_end=date_to,
            source_type=source_type,
            min_messages=min_messages,
            max_messages=max_messages,
        ),
    )
    search.set_search_query(query)

    if search.has_active_filters:
        console.print(hint_clear_filters())

    results = search.filtered_conversations
    if not results:
        console.print("[yellow]No conversations match.[/]")
        return

    table = Table(title=f"Conversations ({len(results)} of {len(conversations)})")
    table.add_column("Title")
    table.add_column("Created")
    table.add_column("Messages", justify="right")
    table.add_column("Sources")
    for conv in results:
        table.add_row(
            escape(conv.title or "(untitled)"),
            datetime.fromtimestamp(conv.created_at / 1000).strftime("%Y-%m-%d %H:%M"),
            str(len(conv.messages)),
            _describe_sources(conv),
        )
    console.print(table)


def _load_conversations(path: Path) -> list[Conversation]:
    """Read and parse *path*; exit 1 with an actionable message on failure."""
    try:
        raw: Any = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        console.print(err_conversations_file(str(path), "file not found"))
        raise typer.Exit(1)
    except (OSError, json.JSONDecodeError) as exc:
        console.print(err_conversations_file(str(path), str(exc)))
        raise typer.Exit(1)

    if isinstance(raw, dict):
        raw = raw.get("conversations")
    if not isinstance(raw, list):
        console.print(err_conversations_file(str(path), "no conversation list found"))
        raise typer.Exit(1)

    try:
        return [Conversation.from_dict(item) for item in raw]
    except (AttributeError, TypeError, ValueError) as exc:
        console.print(err_conversations_file(str(path), f"malformed entry ({exc})"))
        raise typer.Exit(1)


def _describe_sources(conv: Conversation) -> str:
    if not conv.sources:
        return "[dim]none[/]"
    files = sum(1 for s in conv.sources if s.type == SourceType.FILE)
    urls = len(conv.sources) - files
    parts = []
    if files:
        parts.append(f"{files} file{'s' if files != 1 else ''}")
    if urls:
        parts.append(f"{urls} url{'s' if urls != 1 else ''}")
    return ", ".join(parts)
