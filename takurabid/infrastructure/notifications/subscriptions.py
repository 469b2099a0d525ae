"""Bridge the store change feed into per-user notification callbacks."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Iterable

from takurabid.domain.entities import Notification

from .change_feed import INSERT, ChangeListener, NotificationChangeFeed

logger = logging.getLogger(__name__)

NotificationHandler = Callable[[Notification], None]

NOTIFICATIONS_TABLE = "notifications"


class NotificationSubscription:
    """Handle over one live channel.

    Closing is idempotent and can happen through ``close()``, by calling the
    handle, or by leaving a ``with`` block.
    """

    def __init__(
        self,
        feed: NotificationChangeFeed,
        user_id: str,
        handler: NotificationHandler,
    ) -> None:
        self.user_id = user_id
        self._feed = feed
        self._handler = handler
        self._lock = threading.Lock()
        self._closed = False
        self._listener: ChangeListener = feed.listen(
            table=NOTIFICATIONS_TABLE,
            event=INSERT,
            filters={"user_id": user_id},
            callback=self._on_row,
        )
        logger.debug("Opened notification channel for user %s", user_id)

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self._feed.remove(self._listener)
        logger.debug("Closed notification channel for user %s", self.user_id)

    def __call__(self) -> None:
        self.close()

    def __enter__(self) -> "NotificationSubscription":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _on_row(self, row: dict[str, Any]) -> None:
        if self._closed:
            return
        try:
            notification = Notification.from_row(row)
        except (TypeError, ValueError) as exc:
            logger.warning(
                "Skipping malformed notification payload for user %s: %s",
                self.user_id,
                exc,
            )
            return
        self._handler(notification)


class NotificationSubscriptionBridge:
    """Open filtered live channels on the notifications table."""

    def __init__(self, feed: NotificationChangeFeed) -> None:
        self._feed = feed

    def subscribe(
        self, user_id: str, on_notification: NotificationHandler
    ) -> NotificationSubscription:
        """Deliver every notification inserted for ``user_id`` to ``on_notification``."""

        return NotificationSubscription(self._feed, user_id, on_notification)

    def active_channels(self, user_id: str | None = None) -> int:
        if user_id is None:
            return self._feed.listener_count(NOTIFICATIONS_TABLE)
        return self._feed.listener_count(NOTIFICATIONS_TABLE, user_id=user_id)


class NotificationDeduplicator:
    """Let each notification id through at most once.

    Subscribe first, fetch the snapshot, then ``prime`` with the snapshot ids:
    live events already present in the snapshot are dropped.
    """

    def __init__(self) -> None:
        self._seen: set[str] = set()
        self._lock = threading.Lock()

    def prime(self, notification_ids: Iterable[str]) -> None:
        with self._lock:
            self._seen.update(notification_ids)

    def seen(self, notification_id: str) -> bool:
        with self._lock:
            return notification_id in self._seen

    def accept(self, notification: Notification) -> bool:
        """Record ``notification`` and return ``True`` the first time its id shows up."""

        with self._lock:
            if notification.id in self._seen:
                return False
            self._seen.add(notification.id)
            return True

    def wrap(self, handler: NotificationHandler) -> NotificationHandler:
        """Return a handler that forwards only notifications not seen before."""

        def _forward(notification: Notification) -> None:
            if self.accept(notification):
                handler(notification)

        return _forward


__all__ = [
    "NotificationDeduplicator",
    "NOTIFICATIONS_TABLE",
    "NotificationHandler",
    "NotificationSubscription",
    "NotificationSubscriptionBridge",
]
