"""Notification access layer.

Every store-backed operation opens its own session, runs one repository
call and returns a :class:`~takurabid.domain.results.Result`. Store failures
are logged and reported as :class:`Failure`; nothing raises past this layer.
Callers that prefer the "degrade to empty" behaviour use ``unwrap_or``::

    notifications = service.get_notifications(user_id).unwrap_or([])
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any, TypeVar

from sqlalchemy.exc import (
    DisconnectionError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    ProgrammingError,
    SQLAlchemyError,
)
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session

from takurabid.domain.entities import Notification, NotificationStats, NotificationType
from takurabid.domain.results import (
    Failure,
    NotificationStoreError,
    Result,
    StoreErrorKind,
    Success,
)
from takurabid.infrastructure.repositories import NotificationRepository

from .display import get_notification_color, get_notification_icon

logger = logging.getLogger(__name__)

T = TypeVar("T")

_PERMISSION_MARKERS = ("permission denied", "insufficient privilege", "not authorized")


def classify_store_error(operation: str, exc: SQLAlchemyError) -> NotificationStoreError:
    """Map a SQLAlchemy exception onto a :class:`StoreErrorKind`."""

    message = str(getattr(exc, "orig", None) or exc)
    if isinstance(exc, IntegrityError):
        kind = StoreErrorKind.CONSTRAINT
    elif isinstance(exc, (OperationalError, InterfaceError, DisconnectionError, PoolTimeoutError)):
        kind = StoreErrorKind.TRANSPORT
    elif isinstance(exc, ProgrammingError) and any(
        marker in message.lower() for marker in _PERMISSION_MARKERS
    ):
        kind = StoreErrorKind.PERMISSION
    else:
        kind = StoreErrorKind.UNKNOWN
    return NotificationStoreError(kind=kind, operation=operation, message=message)


class NotificationService:
    """Translate notification intents into store queries scoped per user."""

    def __init__(
        self,
        session_factory: Callable[[], Session],
        *,
        repository_factory: Callable[[Session], NotificationRepository] = NotificationRepository,
        default_limit: int = 50,
        max_limit: int = 100,
    ) -> None:
        self._session_factory = session_factory
        self._repository_factory = repository_factory
        self.default_limit = default_limit
        self.max_limit = max(max_limit, default_limit)

    def get_notifications(
        self, user_id: str, limit: int | None = None
    ) -> Result[Sequence[Notification]]:
        """Return the newest notifications of ``user_id``, at most ``limit`` of them."""

        effective_limit = self.default_limit if limit is None else limit
        if effective_limit < 0:
            return Failure(
                NotificationStoreError(
                    kind=StoreErrorKind.VALIDATION,
                    operation="get_notifications",
                    message=f"limit must not be negative, got {effective_limit}",
                )
            )
        return self._run(
            "get_notifications",
            lambda repository: repository.list_for_user(user_id, limit=effective_limit),
        )

    def get_unread_count(self, user_id: str) -> Result[int]:
        return self._run("get_unread_count", lambda repository: repository.count_unread(user_id))

    def get_notification_stats(self, user_id: str) -> Result[NotificationStats]:
        """Return total, unread and per-type counters for ``user_id``."""

        def _collect(repository: NotificationRepository) -> NotificationStats:
            stats = NotificationStats(total=0, unread=0)
            for notification_type, read, amount in repository.count_by_type_and_state(user_id):
                stats.total += amount
                if not read:
                    stats.unread += amount
                stats.by_type[notification_type] = stats.by_type.get(notification_type, 0) + amount
            return stats

        return self._run("get_notification_stats", _collect)

    def mark_as_read(self, notification_id: str, *, user_id: str | None = None) -> Result[None]:
        """Flag one notification as read.

        Missing or already-read notifications are not an error. ``user_id``
        restricts the update to notifications owned by that user.
        """

        def _mark(repository: NotificationRepository) -> None:
            updated = repository.mark_as_read(notification_id, user_id=user_id)
            if not updated:
                logger.debug("Notification %s was already read or does not exist", notification_id)

        return self._run("mark_as_read", _mark)

    def mark_all_as_read(self, user_id: str) -> Result[int]:
        """Flag every unread notification of ``user_id`` in one bulk update.

        Rows inserted while the update runs may or may not be included.
        """

        return self._run("mark_all_as_read", lambda repository: repository.mark_all_as_read(user_id))

    def create_notification(
        self,
        user_id: str,
        type: str | NotificationType,
        title: str,
        body: str,
        link: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> Result[Notification]:
        """Insert an unread notification for ``user_id``."""

        type_value = type.value if isinstance(type, NotificationType) else type
        if type_value not in NotificationType.values():
            error = NotificationStoreError(
                kind=StoreErrorKind.VALIDATION,
                operation="create_notification",
                message=f"Unknown notification type '{type_value}'",
            )
            logger.warning("Rejected notification for user %s: %s", user_id, error.message)
            return Failure(error)

        return self._run(
            "create_notification",
            lambda repository: repository.create(
                user_id=user_id,
                type=type_value,
                title=title,
                body=body,
                link=link,
                metadata=metadata,
            ),
        )

    def delete_notification(
        self, notification_id: str, *, user_id: str | None = None
    ) -> Result[None]:
        def _delete(repository: NotificationRepository) -> None:
            repository.delete(notification_id, user_id=user_id)

        return self._run("delete_notification", _delete)

    def clear_all(self, user_id: str) -> Result[int]:
        return self._run("clear_all", lambda repository: repository.delete_for_user(user_id))

    # Static presentation lookups, no store access.
    get_notification_icon = staticmethod(get_notification_icon)
    get_notification_color = staticmethod(get_notification_color)

    def _run(self, operation: str, action: Callable[[NotificationRepository], T]) -> Result[T]:
        session = self._session_factory()
        try:
            value = action(self._repository_factory(session))
        except SQLAlchemyError as exc:
            session.rollback()
            error = classify_store_error(operation, exc)
            logger.error(
                "Notification store error during %s (%s): %s",
                operation,
                error.kind.value,
                error.message,
                exc_info=exc,
            )
            return Failure(error)
        finally:
            session.close()
        return Success(value)


__all__ = ["NotificationService", "classify_store_error"]
