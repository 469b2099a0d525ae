"""Aggregate application use cases."""

from .notifications import NotificationService
from .profiles import create_profile, get_profile_by_auth_id

__all__ = [
    "NotificationService",
    "create_profile",
    "get_profile_by_auth_id",
]
