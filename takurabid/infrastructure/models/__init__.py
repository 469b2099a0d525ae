"""ORM models used by the application infrastructure."""

from .notification import NotificationModel
from .user_profile import UserProfileModel

__all__ = [
    "NotificationModel",
    "UserProfileModel",
]
