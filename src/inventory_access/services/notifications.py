"""
inventory_access.services.notifications

User-facing notification sink.

Responsibilities:
- Define the notification shape handed to the UI (toast-style messages).
- Provide a bounded buffer the API drains for the UI.
"""

from __future__ import annotations

import enum
from collections import deque
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

from inventory_access.observability.logging import get_logger

log = get_logger(__name__)


class NotificationLevel(enum.StrEnum):
    success = "success"
    error = "error"


@dataclass(frozen=True, slots=True)
class Notification:
    level: NotificationLevel
    title: str
    message: str
    created_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))


class NotificationSink(Protocol):
    def notify(self, notification: Notification) -> None: ...


class BufferedNotificationSink:
    """
    Keeps the most recent notifications until the UI collects them.
    Oldest entries are dropped once `maxlen` is reached.
    """

    def __init__(self, *, maxlen: int = 50) -> None:
        self._items: deque[Notification] = deque(maxlen=maxlen)

    def notify(self, notification: Notification) -> None:
        log.info("notification", level=notification.level.value, title=notification.title)
        self._items.append(notification)

    def drain(self) -> list[Notification]:
        items = list(self._items)
        self._items.clear()
        return items

    def __len__(self) -> int:
        return len(self._items)


def success(title: str, message: str) -> Notification:
    return Notification(level=NotificationLevel.success, title=title, message=message)


def error(title: str, message: str) -> Notification:
    return Notification(level=NotificationLevel.error, title=title, message=message)
