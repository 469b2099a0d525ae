"""Realtime notification helpers for the infrastructure layer."""

from .change_feed import INSERT, ChangeListener, NotificationChangeFeed, row_payload
from .publisher import NotificationPublisher, serialize_notification
from .subscriptions import (
    NotificationDeduplicator,
    NotificationHandler,
    NotificationSubscription,
    NotificationSubscriptionBridge,
)

__all__ = [
    "ChangeListener",
    "INSERT",
    "NotificationChangeFeed",
    "row_payload",
    "NotificationPublisher",
    "serialize_notification",
    "NotificationDeduplicator",
    "NotificationHandler",
    "NotificationSubscription",
    "NotificationSubscriptionBridge",
]
