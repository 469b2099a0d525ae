"""Static display lookups for notification types."""

from __future__ import annotations

from typing import Final

from takurabid.domain.entities import NotificationType

DEFAULT_ICON: Final[str] = "🔔"
DEFAULT_COLOR: Final[str] = "bg-gray-100 text-gray-600"

_ICONS: Final[dict[str, str]] = {
    NotificationType.MESSAGE.value: "💬",
    NotificationType.LOAD.value: "📦",
    NotificationType.PAYMENT.value: "💰",
    NotificationType.SYSTEM.value: "⚙️",
    NotificationType.BID.value: "🔔",
    NotificationType.JOB.value: "🚛",
}

_COLORS: Final[dict[str, str]] = {
    NotificationType.MESSAGE.value: "bg-orange-100 text-orange-600",
    NotificationType.LOAD.value: "bg-amber-100 text-amber-600",
    NotificationType.PAYMENT.value: "bg-green-100 text-green-600",
    NotificationType.SYSTEM.value: "bg-gray-100 text-gray-600",
    NotificationType.BID.value: "bg-orange-100 text-orange-600",
    NotificationType.JOB.value: "bg-amber-100 text-amber-600",
}


def _type_key(notification_type: str | NotificationType | None) -> str:
    if isinstance(notification_type, NotificationType):
        return notification_type.value
    return str(notification_type or "")


def get_notification_icon(notification_type: str | NotificationType | None) -> str:
    """Return the glyph shown next to a notification of ``notification_type``."""

    return _ICONS.get(_type_key(notification_type), DEFAULT_ICON)


def get_notification_color(notification_type: str | NotificationType | None) -> str:
    """Return the CSS color classes used for ``notification_type``."""

    return _COLORS.get(_type_key(notification_type), DEFAULT_COLOR)


__all__ = [
    "DEFAULT_COLOR",
    "DEFAULT_ICON",
    "get_notification_color",
    "get_notification_icon",
]
