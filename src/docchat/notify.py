"""Notification sink — one user-facing message per terminal ingestion outcome."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from rich.console import Console
from rich.markup import escape

from docchat.errors import DocchatError

DEFAULT = "default"
DESTRUCTIVE = "destructive"


@dataclass(frozen=True)
class Notification:
    title: str
    description: str
    variant: str = DEFAULT

    @classmethod
    def from_error(cls, error: DocchatError) -> Notification:
        return cls(title=error.title, description=error.description, variant=DESTRUCTIVE)


class NotificationSink(Protocol):
    def notify(self, notification: Notification) -> None: ...


class ConsoleNotifier:
    """Render notifications on a rich console (✓ green / ✗ red)."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def notify(self, notification: Notification) -> None:
        title = escape(notification.title)
        description = escape(notification.description)
        if notification.variant == DESTRUCTIVE:
            self.console.print(f"  [red]✗ {title}:[/] {description}")
        else:
            self.console.print(f"  [green]✓ {title}:[/] {description}")


class NullNotifier:
    """Discard every notification."""

    def notify(self, notification: Notification) -> None:
        return None
