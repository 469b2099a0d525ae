"""Public helpers for reading and emitting notifications."""

from .display import (
    DEFAULT_COLOR,
    DEFAULT_ICON,
    get_notification_color,
    get_notification_icon,
)
from .service import NotificationService, classify_store_error

__all__ = [
    "DEFAULT_COLOR",
    "DEFAULT_ICON",
    "get_notification_color",
    "get_notification_icon",
    "NotificationService",
    "classify_store_error",
]
