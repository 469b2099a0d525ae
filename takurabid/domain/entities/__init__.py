"""Domain entities exposed by the application."""

from .notification import Notification, NotificationStats, NotificationType
from .user_profile import UserProfile, UserType, build_avatar

__all__ = [
    "Notification",
    "NotificationStats",
    "NotificationType",
    "UserProfile",
    "UserType",
    "build_avatar",
]
