"""Utility helpers to push notifications to websocket subscribers."""

from __future__ import annotations

import asyncio
from typing import Any

from takurabid.domain.entities import Notification


class NotificationPublisher:
    """Hand notifications from committing threads over to an event loop queue."""

    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop
        self.queue: asyncio.Queue[Notification] = asyncio.Queue()

    def dispatch(self, notification: Notification) -> None:
        """Schedule ``notification`` to be put on the queue."""

        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is self._loop:
            self.queue.put_nowait(notification)
            return
        if self._loop.is_closed():
            return
        self._loop.call_soon_threadsafe(self.queue.put_nowait, notification)

    __call__ = dispatch


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the websocket payload representation for ``notification``."""

    return {
        "id": notification.id,
        "user_id": notification.user_id,
        "type": notification.type,
        "title": notification.title,
        "body": notification.body,
        "link": notification.link,
        "read": notification.read,
        "created_at": notification.created_at.isoformat(),
        "metadata": notification.metadata or {},
    }


__all__ = ["NotificationPublisher", "serialize_notification"]
