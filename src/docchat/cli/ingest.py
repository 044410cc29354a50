"""docchat ingest — load files and web pages into an in-memory corpus.

Source dispatch:
  https:// / http://  → URL resolver (default web scraper)
  directory           → expanded to the supported files it contains
  anything else       → file upload (format decided by the classifier)

Each source yields exactly one notification line. The command exits 1 if any
source was rejected.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from docchat.cli.errors import err_config, err_no_sources, err_path_not_found
from docchat.config import ConfigError, DocchatConfig, load_config
from docchat.ingest.classifier import ACCEPTED_EXTENSIONS, FormatTag, classify
from docchat.ingest.orchestrator import IngestionOrchestrator, IngestOutcome
from docchat.ingest.validation import format_content_length
from docchat.ingest.web import UrlResolver, WebScraper
from docchat.models import FileInput
from docchat.notify import ConsoleNotifier
from docchat.registry import SourceRegistry

console = Console()

_URL_PREFIXES = ("https://", "http://")


def ingest_cmd(
    source: Annotated[
        list[str] | None,
        typer.Option("--source", "-s", help="File, directory, or URL (repeatable)."),
    ] = None,
    show_content: Annotated[
        bool,
        typer.Option("--show-content", help="Print the extracted text of each source."),
    ] = False,
) -> None:
    """Ingest files and web pages and report one outcome per source."""
    sources = source or []
    if not sources:
        console.print(err_no_sources())
        raise typer.Exit(1)

    try:
        cfg = load_config()
    except ConfigError as exc:
        console.print(err_config(str(exc)))
        raise typer.Exit(1)

    urls, paths, missing = _split_sources(sources)
    for path in missing:
        console.print(err_path_not_found(path))

    registry = SourceRegistry()
    outcomes = asyncio.run(_ingest(registry, cfg, urls, paths))

    for outcome in outcomes:
        for warning in outcome.warnings:
            console.print(f"  [dim]{escape(outcome.key)}: {escape(warning)}[/]")

    _show_sources(registry, show_content)

    if missing or any(not o.ok for o in outcomes):
        raise typer.Exit(1)


# ------------------------------------------------------------------
# Pipeline
# ------------------------------------------------------------------


async def _ingest(
    registry: SourceRegistry, cfg: DocchatConfig, urls: list[str], paths: list[Path]
) -> list[IngestOutcome]:
    resolver = UrlResolver(WebScraper(cfg.web))
    async with IngestionOrchestrator(
        registry, resolver, ConsoleNotifier(console), cfg.ingest
    ) as orchestrator:
        files = [_file_input(p) for p in paths]
        file_outcomes, url_outcomes = await asyncio.gather(
            orchestrator.ingest_files(files),
            orchestrator.ingest_urls(urls),
        )
    return file_outcomes + url_outcomes


def _file_input(path: Path) -> FileInput:
    """Unsupported files are submitted without reading their bytes."""
    header = FileInput.from_path(path, read=False)
    if classify(header.name, header.mime_type) == FormatTag.UNSUPPORTED:
        return header
    return FileInput.from_path(path)


def _split_sources(sources: list[str]) -> tuple[list[str], list[Path], list[str]]:
    """Partition into (urls, file paths, missing); directories are expanded."""
    urls: list[str] = []
    paths: list[Path] = []
    missing: list[str] = []
    for src in sources:
        if src.startswith(_URL_PREFIXES):
            urls.append(src)
            continue
        p = Path(src)
        if p.is_dir():
            found = sorted(
                f for f in p.iterdir() if f.is_file() and f.suffix.lower() in ACCEPTED_EXTENSIONS
            )
            if not found:
                console.print(f"[yellow]No supported files found in directory:[/] {escape(src)}")
            paths.extend(found)
        elif p.is_file():
            paths.append(p)
        else:
            missing.append(src)
    return urls, paths, missing


# ------------------------------------------------------------------
# Output
# ------------------------------------------------------------------


def _show_sources(registry: SourceRegistry, show_content: bool) -> None:
    if not len(registry):
        console.print("\n[yellow]No sources ingested.[/]")
        return

    table = Table(title=f"Sources ({len(registry)})")
    table.add_column("Type")
    table.add_column("Name")
    table.add_column("Source")
    table.add_column("Content", justify="right")
    for src in registry:
        table.add_row(
            src.type.value,
            escape(src.name),
            escape(src.source),
            format_content_length(len(src.content)),
        )
    console.print()
    console.print(table)

    if show_content:
        for src in registry:
            console.print(f"\n[bold]── {escape(src.name)}[/]")
            console.print(src.content, markup=False, highlight=False)
