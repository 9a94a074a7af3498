"""In-memory notification queue — the toasts a view displays."""

import logging

from schoolboard.application.interfaces import Notifier
from schoolboard.application.schemas import Notification, NotificationLevel

logger = logging.getLogger(__name__)


class NotificationCenter(Notifier):
    """Keeps the most recent notifications in arrival order and logs each one."""

    def __init__(self, max_items: int = 50):
        self._max_items = max_items
        self._items: list[Notification] = []

    @property
    def items(self) -> list[Notification]:
        return list(self._items)

    @property
    def latest(self) -> Notification | None:
        return self._items[-1] if self._items else None

    def success(self, message: str) -> None:
        logger.info("✓ %s", message)
        self._push(Notification(level=NotificationLevel.SUCCESS, message=message))

    def error(self, message: str) -> None:
        logger.error("✗ %s", message)
        self._push(Notification(level=NotificationLevel.ERROR, message=message))

    def dismiss(self, index: int) -> None:
        if 0 <= index < len(self._items):
            del self._items[index]

    def clear(self) -> None:
        self._items.clear()

    def _push(self, notification: Notification) -> None:
        self._items.append(notification)
        if len(self._items) > self._max_items:
            del self._items[: len(self._items) - self._max_items]
