"""docchat CLI error messages — actionable feedback.

Every error shown to the user must contain:
  1. What went wrong (clear cause)
  2. The exact action the user should take to fix it

Usage:
    from docchat.cli.errors import err_path_not_found
    console.print(err_path_not_found("notes.md"))
    raise typer.Exit(1)
"""

from __future__ import annotations

from rich.markup import escape


def err_no_sources() -> str:
    """ingest called without any --source."""
    return (
        "[red]Error:[/] No --source specified.\n"
        "  Run:  docchat ingest --source notes.md --source https://example.com"
    )


def err_path_not_found(path: str) -> str:
    """A --source path that is neither a URL nor an existing file."""
    return (
        f"[red]Error:[/] Source not found: '{escape(path)}'\n"
        "  Check the path, or prefix web pages with https://"
    )


def err_config(message: str) -> str:
    """Invalid docchat.yaml / global config / DOCCHAT_* env var."""
    return (
        f"[red]Error:[/] Invalid configuration.\n"
        f"  {escape(message)}\n"
        "  Fix docchat.yaml (or ~/.docchat/config.yaml) and try again."
    )


def err_conversations_file(path: str, reason: str) -> str:
    """Conversations JSON missing or malformed."""
    return (
        f"[red]Error:[/] Cannot load conversations from '{escape(path)}': {escape(reason)}\n"
        "  Expected a JSON list of conversations, or an object with a 'conversations' list."
    )


def err_custom_range_incomplete() -> str:
    """--date-range custom without both bounds — the filter is ignored."""
    return (
        "[yellow]Warning:[/] Custom date range needs both --from and --to; "
        "date filter ignored."
    )


def hint_clear_filters() -> str:
    """Shown when any structural filter is active."""
    return "[dim]Filters active — run without filter options to see all conversations.[/]"
