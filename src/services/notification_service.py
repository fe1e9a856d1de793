"""In-memory notification queue shown as toasts by the admin front end."""

import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 5.0


class NotificationType(str, Enum):
    """Toast style."""

    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


TITLES = {
    NotificationType.SUCCESS: "Sucesso!",
    NotificationType.ERROR: "Ocorreu um erro!",
    NotificationType.INFO: "Informativo",
}


def title_for(notification_type: NotificationType | str) -> str:
    """Return the toast title; unknown types read as informative."""
    try:
        return TITLES[NotificationType(notification_type)]
    except ValueError:
        return TITLES[NotificationType.INFO]


@dataclass
class Notification:
    """Single toast entry."""

    id: int
    message: str
    type: NotificationType
    expires_at: float

    @property
    def title(self) -> str:
        return title_for(self.type)


Listener = Callable[[list[Notification]], None]


class NotificationCenter:
    """Queue of notifications with remove-by-id and auto-expiry.

    Entries expire ``ttl_seconds`` after being added. When an event loop is
    running, a timer removes the entry (and notifies listeners) at expiry;
    ``active()`` also drops expired entries, so expiry holds without a loop.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._notifications: list[Notification] = []
        self._next_id = 0
        self._listeners: list[Listener] = []

    def add(self, message: str, notification_type: NotificationType | str = NotificationType.INFO) -> int:
        """Queue a notification and return its id."""
        notification = Notification(
            id=self._next_id,
            message=message,
            type=NotificationType(notification_type),
            expires_at=self._clock() + self.ttl_seconds,
        )
        self._next_id += 1
        self._notifications.append(notification)
        logger.debug("notification.add: id=%d type=%s", notification.id, notification.type.value)

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
        if loop is not None:
            loop.call_later(self.ttl_seconds, self.remove, notification.id)

        self._notify()
        return notification.id

    def success(self, message: str) -> int:
        return self.add(message, NotificationType.SUCCESS)

    def error(self, message: str) -> int:
        return self.add(message, NotificationType.ERROR)

    def info(self, message: str) -> int:
        return self.add(message, NotificationType.INFO)

    def remove(self, notification_id: int) -> None:
        """Remove a notification; unknown ids are ignored."""
        remaining = [n for n in self._notifications if n.id != notification_id]
        if len(remaining) == len(self._notifications):
            return
        self._notifications = remaining
        self._notify()

    def active(self) -> list[Notification]:
        """Return notifications that have not expired, oldest first."""
        now = self._clock()
        remaining = [n for n in self._notifications if n.expires_at > now]
        if len(remaining) != len(self._notifications):
            self._notifications = remaining
            self._notify()
        return list(self._notifications)

    def clear(self) -> None:
        if self._notifications:
            self._notifications = []
            self._notify()

    def subscribe(self, listener: Listener) -> None:
        """Call ``listener`` with the current list after every change."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        snapshot = list(self._notifications)
        for listener in list(self._listeners):
            listener(snapshot)


__all__ = ["Notification", "NotificationCenter", "NotificationType", "title_for"]
