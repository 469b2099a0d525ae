"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from sqlalchemy import func
from sqlalchemy.orm import Session

from takurabid.domain.entities import Notification
from takurabid.infrastructure.models import NotificationModel
from takurabid.utils import ensure_utc


class NotificationRepository:
    """Provide CRUD operations for :class:`Notification` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_for_user(
        self,
        user_id: str,
        *,
        limit: int | None = 50,
    ) -> Sequence[Notification]:
        query = self.session.query(NotificationModel)
        query = query.filter(NotificationModel.user_id == user_id)
        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def count_unread(self, user_id: str) -> int:
        query = (
            self.session.query(func.count(NotificationModel.id))
            .filter(NotificationModel.user_id == user_id)
            .filter(NotificationModel.read.is_(False))
        )
        return int(query.scalar() or 0)

    def count_by_type_and_state(self, user_id: str) -> list[tuple[str, bool, int]]:
        """Return ``(type, read, count)`` rows for every group the user has."""

        query = (
            self.session.query(
                NotificationModel.type,
                NotificationModel.read,
                func.count(NotificationModel.id),
            )
            .filter(NotificationModel.user_id == user_id)
            .group_by(NotificationModel.type, NotificationModel.read)
        )
        return [(type_, bool(read), int(count)) for type_, read, count in query.all()]

    def create(
        self,
        *,
        user_id: str,
        type: str,
        title: str,
        body: str,
        link: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> Notification:
        model = NotificationModel(
            user_id=user_id,
            type=type,
            title=title,
            body=body,
            link=link,
            read=False,
            metadata_=metadata,
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def mark_as_read(self, notification_id: str, *, user_id: str | None = None) -> int:
        query = self.session.query(NotificationModel).filter(
            NotificationModel.id == notification_id,
            NotificationModel.read.is_(False),
        )
        if user_id is not None:
            query = query.filter(NotificationModel.user_id == user_id)
        updated = query.update({NotificationModel.read: True}, synchronize_session=False)
        self.session.commit()
        return updated

    def mark_all_as_read(self, user_id: str) -> int:
        updated = (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.user_id == user_id,
                NotificationModel.read.is_(False),
            )
            .update({NotificationModel.read: True}, synchronize_session=False)
        )
        self.session.commit()
        return updated

    def delete(self, notification_id: str, *, user_id: str | None = None) -> int:
        query = self.session.query(NotificationModel).filter(
            NotificationModel.id == notification_id
        )
        if user_id is not None:
            query = query.filter(NotificationModel.user_id == user_id)
        deleted = query.delete(synchronize_session=False)
        self.session.commit()
        return deleted

    def delete_for_user(self, user_id: str) -> int:
        deleted = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.user_id == user_id)
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return deleted

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            user_id=model.user_id,
            type=model.type,
            title=model.title,
            body=model.body,
            read=bool(model.read),
            created_at=ensure_utc(model.created_at),
            link=model.link,
            metadata=dict(model.metadata_ or {}),
        )


__all__ = ["NotificationRepository"]
