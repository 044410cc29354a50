"""Tests for notifications and the console sink."""

from __future__ import annotations

from rich.console import Console

from docchat.errors import ParseError, UnsupportedFormatError
from docchat.notify import (
    DEFAULT,
    DESTRUCTIVE,
    ConsoleNotifier,
    Notification,
    NullNotifier,
)


def _console() -> Console:
    return Console(record=True, width=200, color_system=None)


def test_from_error_is_destructive():
    note = Notification.from_error(UnsupportedFormatError("report.doc"))
    assert note.variant == DESTRUCTIVE
    assert note.title == "Unsupported File Type"
    assert note.description == "Please upload a .txt, .pdf, .md, .csv, or .docx file."


def test_default_variant():
    assert Notification("File attached", "ok").variant == DEFAULT


def test_console_notifier_success_line():
    console = _console()
    ConsoleNotifier(console).notify(Notification("File attached", "a.txt is ready."))
    out = console.export_text()
    assert "✓ File attached: a.txt is ready." in out


def test_console_notifier_error_line():
    console = _console()
    ConsoleNotifier(console).notify(Notification.from_error(ParseError("a.csv", "boom")))
    out = console.export_text()
    assert "✗ File Read Error:" in out
    assert 'There was an error processing "a.csv": boom' in out


def test_console_notifier_escapes_markup():
    console = _console()
    ConsoleNotifier(console).notify(Notification("File attached", "[bold]x[/bold].txt"))
    assert "[bold]x[/bold].txt" in console.export_text()


def test_null_notifier_accepts_anything():
    assert NullNotifier().notify(Notification("t", "d")) is None
