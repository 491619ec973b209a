"""Transient user-facing notifications."""

import itertools
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Protocol


class NotificationLevel(StrEnum):
    """Severity of a notification."""

    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


@dataclass(frozen=True)
class Notification:
    """A dismissible message shown to the user."""

    id: int
    level: NotificationLevel
    message: str


class Notifier(Protocol):
    """Interface for surfacing messages to the user."""

    def success(self, message: str) -> Notification:
        """Show a success message."""

    def error(self, message: str) -> Notification:
        """Show an error message."""

    def info(self, message: str) -> Notification:
        """Show an informational message."""


@dataclass
class NotificationCenter(Notifier):
    """In-memory queue of active notifications."""

    _active: list[Notification] = field(default_factory=list)
    _ids: itertools.count = field(default_factory=lambda: itertools.count(1))

    def success(self, message: str) -> Notification:
        """Show a success message."""
        return self._push(NotificationLevel.SUCCESS, message)

    def error(self, message: str) -> Notification:
        """Show an error message."""
        return self._push(NotificationLevel.ERROR, message)

    def info(self, message: str) -> Notification:
        """Show an informational message."""
        return self._push(NotificationLevel.INFO, message)

    def active(self) -> list[Notification]:
        """Return notifications that have not been dismissed."""
        return list(self._active)

    def dismiss(self, notification_id: int) -> bool:
        """Dismiss a notification; return False if it was not active."""
        for index, notification in enumerate(self._active):
            if notification.id == notification_id:
                del self._active[index]
                return True
        return False

    def clear(self) -> None:
        """Dismiss every notification."""
        self._active.clear()

    def _push(self, level: NotificationLevel, message: str) -> Notification:
        notification = Notification(id=next(self._ids), level=level, message=message)
        self._active.append(notification)
        return notification
