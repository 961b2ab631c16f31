"""Notification port handed to workflow functions in place of a global event bus."""

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager

from formsmith.models.common import Notification, NotificationKind

log = logging.getLogger("formsmith.notify")


class Notifier(ABC):
    @abstractmethod
    def notify(self, kind: NotificationKind, message: str) -> None:
        ...

    def success(self, message: str) -> None:
        self.notify("success", message)

    def info(self, message: str) -> None:
        self.notify("info", message)

    def warning(self, message: str) -> None:
        self.notify("warning", message)

    def error(self, message: str) -> None:
        self.notify("error", message)


class CollectingNotifier(Notifier):
    """Keeps the notifications raised while serving one request."""

    def __init__(self):
        self.notifications: list[Notification] = []

    def notify(self, kind: NotificationKind, message: str) -> None:
        log.debug("%s: %s", kind, message)
        self.notifications.append(Notification(kind=kind, message=message))

    @contextmanager
    def reporting(self):
        """Attach the notifications collected so far to any exception leaving the block."""
        try:
            yield self
        except Exception as e:
            e.notifications = list(self.notifications)
            raise
