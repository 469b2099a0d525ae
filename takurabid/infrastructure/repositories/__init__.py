"""Repository implementations for infrastructure layer."""

from .notification_repository import NotificationRepository
from .user_profile_repository import UserProfileRepository

__all__ = [
    "NotificationRepository",
    "UserProfileRepository",
]
