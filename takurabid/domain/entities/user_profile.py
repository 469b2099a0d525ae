"""Domain entity representing a marketplace user profile."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class UserType(str, Enum):
    """Marketplace roles a profile can hold."""

    CLIENT = "client"
    DRIVER = "driver"


@dataclass
class UserProfile:
    """Local profile linked to an identity issued by the identity provider."""

    id: str | None
    auth_id: str
    type: UserType
    name: str
    avatar: str
    email: str | None
    created_at: datetime | None

    def is_driver(self) -> bool:
        return self.type is UserType.DRIVER


def build_avatar(name: str) -> str:
    """Return the initials shown when a profile has no picture."""

    return name.strip()[:2].upper()


__all__ = ["UserProfile", "UserType", "build_avatar"]
