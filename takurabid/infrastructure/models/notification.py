"""SQLAlchemy model for persisted notifications."""

from uuid import uuid4

from sqlalchemy import JSON, Boolean, CheckConstraint, Column, DateTime, Index, String, Text
from sqlalchemy.sql import expression

from takurabid.domain.entities import NotificationType
from takurabid.infrastructure.database import Base
from takurabid.utils import now_utc_naive

_TYPE_VALUES = ", ".join(f"'{value}'" for value in NotificationType.values())


def _new_identifier() -> str:
    return str(uuid4())


class NotificationModel(Base):
    """Database representation for user notifications."""

    __tablename__ = "notifications"
    __table_args__ = (
        CheckConstraint(f"type IN ({_TYPE_VALUES})", name="ck_notifications_type"),
        Index("ix_notifications_user_created", "user_id", "created_at"),
    )

    id = Column(String(36), primary_key=True, default=_new_identifier)
    user_id = Column(String(36), nullable=False, index=True)
    type = Column(String(20), nullable=False)
    title = Column(String(200), nullable=False)
    body = Column(Text, nullable=False)
    link = Column(String(500), nullable=True)
    read = Column(
        Boolean,
        nullable=False,
        default=False,
        server_default=expression.false(),
    )
    created_at = Column(DateTime(), nullable=False, default=now_utc_naive)
    # ``metadata`` is reserved on declarative classes.
    metadata_ = Column("metadata", JSON, nullable=True)


__all__ = ["NotificationModel"]
