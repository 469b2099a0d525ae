"""Domain entity representing a user notification."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Mapping

from takurabid.utils import parse_timestamp


class NotificationType(str, Enum):
    """Closed set of notification categories."""

    MESSAGE = "message"
    LOAD = "load"
    PAYMENT = "payment"
    SYSTEM = "system"
    BID = "bid"
    JOB = "job"

    @classmethod
    def values(cls) -> tuple[str, ...]:
        return tuple(member.value for member in cls)


@dataclass(frozen=True)
class Notification:
    """Alert directed at one user.

    Only ``read`` changes after creation and it never goes back to ``False``;
    the store replaces the whole record on every read so instances are frozen.
    """

    id: str
    user_id: str
    type: str
    title: str
    body: str
    read: bool
    created_at: datetime
    link: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Notification":
        """Decode a store row payload.

        Raises ``ValueError`` when a required column is missing or has the wrong
        shape.
        """

        try:
            notification_id = row["id"]
            user_id = row["user_id"]
            created_at = parse_timestamp(row["created_at"])
        except KeyError as exc:
            raise ValueError(f"Notification payload is missing {exc.args[0]!r}") from exc

        if not notification_id or not user_id:
            raise ValueError("Notification payload has an empty identifier")

        metadata = row.get("metadata")
        if metadata is not None and not isinstance(metadata, Mapping):
            raise ValueError("Notification metadata must be an object")

        return cls(
            id=str(notification_id),
            user_id=str(user_id),
            type=str(row.get("type") or ""),
            title=str(row.get("title") or ""),
            body=str(row.get("body") or ""),
            read=bool(row.get("read", False)),
            created_at=created_at,
            link=row.get("link"),
            metadata=dict(metadata or {}),
        )


@dataclass
class NotificationStats:
    """Aggregated counters for the notifications of one user."""

    total: int
    unread: int
    by_type: dict[str, int] = field(default_factory=dict)


__all__ = ["Notification", "NotificationStats", "NotificationType"]
