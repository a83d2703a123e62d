"""Outbound user notifications and navigation intents.

Both are fire-and-forget: the view never awaits them or reacts to what the
receiving side does with them.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Protocol

logger = logging.getLogger("appointment_desk.notifications")


class Notifier(Protocol):
    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class Navigator(Protocol):
    def push(self, path: str) -> None: ...


class LoggingNotifier:
    """Writes notifications to the application log."""

    def success(self, message: str) -> None:
        logger.info("Notification (success): %s", message)

    def error(self, message: str) -> None:
        logger.warning("Notification (error): %s", message)


class LoggingNavigator:
    """Remembers navigation intents so the HTTP layer can hand them out."""

    def __init__(self) -> None:
        self.history: List[str] = []

    @property
    def last(self) -> Optional[str]:
        return self.history[-1] if self.history else None

    def push(self, path: str) -> None:
        logger.info("Navigation requested: %s", path)
        self.history.append(path)
