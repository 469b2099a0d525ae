"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from takurabid.domain.entities import NotificationType


class NotificationCreate(BaseModel):
    """Payload used by producers to notify a user."""

    user_id: str = Field(..., min_length=1, description="Recipient profile identifier")
    type: NotificationType
    title: str = Field(..., min_length=1, max_length=200)
    body: str = Field(..., min_length=1)
    link: str | None = Field(default=None, max_length=500)
    metadata: dict[str, Any] | None = None


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    id: str
    user_id: str
    type: str
    title: str
    body: str
    link: str | None = None
    read: bool
    created_at: datetime
    metadata: dict[str, Any] = Field(default_factory=dict)
    icon: str
    color: str


class UnreadCountRead(BaseModel):
    unread: int


class NotificationStatsRead(BaseModel):
    """Counters shown on the notification panel."""

    total: int
    unread: int
    by_type: dict[str, int] = Field(default_factory=dict)


__all__ = [
    "NotificationCreate",
    "NotificationRead",
    "NotificationStatsRead",
    "UnreadCountRead",
]
