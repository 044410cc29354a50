"""docchat CLI entry point."""

from __future__ import annotations

import importlib.metadata
from typing import Annotated

import typer

from docchat.cli.ingest import ingest_cmd
from docchat.cli.search import search_cmd


def _installed_version() -> str:
    try:
        return importlib.metadata.version("docchat")
    except importlib.metadata.PackageNotFoundError:
        return "dev"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"docchat {_installed_version()}")
        raise typer.Exit()


app = typer.Typer(
    name="docchat",
    help=(
        "docchat — document ingestion and conversation search.\n\n"
        "  docchat ingest  Parse files and web pages into a chat corpus.\n"
        "  docchat search  Filter and search saved conversations."
    ),
    add_completion=False,
)


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
) -> None:
    """docchat — document ingestion and conversation search."""


app.command("ingest")(ingest_cmd)
app.command("search")(search_cmd)


@app.command("version")
def version_cmd() -> None:
    """Show the installed docchat version."""
    typer.echo(f"docchat {_installed_version()}")


if __name__ == "__main__":
    app()
