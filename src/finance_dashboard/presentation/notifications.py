from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from rich.console import Console
from rich.panel import Panel

class NotificationVariant(Enum):
    DEFAULT = "default"
    DESTRUCTIVE = "destructive"

@dataclass(frozen=True)
class Notification:
    title: str
    description: str
    variant: NotificationVariant = NotificationVariant.DEFAULT

class Notifier:
    """
    Shows one-shot, transient notifications to the user.

    Every notification is also kept in `history` so callers (and tests) can
    see what was shown.
    """

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console(stderr=True)
        self.history: List[Notification] = []

    def notify(
        self,
        title: str,
        description: str,
        variant: NotificationVariant = NotificationVariant.DEFAULT,
    ) -> Notification:
        notification = Notification(title=title, description=description, variant=variant)
        self.history.append(notification)

        border_style = "red" if variant == NotificationVariant.DESTRUCTIVE else "green"
        self.console.print(Panel.fit(
            f"[bold]{title}[/bold]\n{description}",
            border_style=border_style,
        ))
        return notification

    def error(self, description: str) -> Notification:
        return self.notify("Error", description, NotificationVariant.DESTRUCTIVE)
