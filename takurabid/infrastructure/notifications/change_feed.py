"""Row-level change feed fed by SQLAlchemy session events.

Inserted rows are collected per session when they are flushed and published
to matching listeners once the surrounding transaction commits. Rows whose
transaction or savepoint rolls back are discarded without being published.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from itertools import count
from typing import Any, Callable, Mapping

from sqlalchemy import event as sa_event, inspect
from sqlalchemy.orm import Session, sessionmaker

logger = logging.getLogger(__name__)

INSERT = "INSERT"

RowCallback = Callable[[dict[str, Any]], None]

_PENDING_KEY = "takurabid.change_feed.pending"


@dataclass(frozen=True)
class ChangeListener:
    """Registered interest in one table/event pair narrowed by equality filters."""

    token: int
    table: str
    event: str
    filters: Mapping[str, Any]
    callback: RowCallback = field(compare=False)

    def matches(self, table: str, event_name: str, row: Mapping[str, Any]) -> bool:
        if table != self.table or event_name != self.event:
            return False
        return all(row.get(column) == value for column, value in self.filters.items())


def row_payload(instance: Any) -> tuple[str, dict[str, Any]]:
    """Return ``(table_name, row)`` for a flushed ORM instance.

    Datetimes are rendered in ISO format the way a wire payload would carry
    them.
    """

    state = inspect(instance)
    mapper = state.mapper
    row: dict[str, Any] = {}
    for prop in mapper.column_attrs:
        value = state.dict.get(prop.key)
        if isinstance(value, datetime):
            value = value.isoformat()
        row[prop.columns[0].name] = value
    return mapper.local_table.name, row


class NotificationChangeFeed:
    """Publish committed inserts to listeners registered per table."""

    def __init__(self, tables: tuple[str, ...] = ("notifications",)) -> None:
        self._tables = frozenset(tables)
        self._listeners: dict[int, ChangeListener] = {}
        self._lock = threading.Lock()
        self._tokens = count(1)

    def attach(self, session_factory: sessionmaker[Session]) -> None:
        """Hook the feed into every session created by ``session_factory``."""

        sa_event.listen(session_factory, "after_flush", self._collect)
        sa_event.listen(session_factory, "after_commit", self._publish)
        sa_event.listen(session_factory, "after_soft_rollback", self._rollback)
        sa_event.listen(session_factory, "after_transaction_end", self._discard)

    def detach(self, session_factory: sessionmaker[Session]) -> None:
        sa_event.remove(session_factory, "after_flush", self._collect)
        sa_event.remove(session_factory, "after_commit", self._publish)
        sa_event.remove(session_factory, "after_soft_rollback", self._rollback)
        sa_event.remove(session_factory, "after_transaction_end", self._discard)

    def listen(
        self,
        *,
        table: str,
        event: str = INSERT,
        filters: Mapping[str, Any] | None = None,
        callback: RowCallback,
    ) -> ChangeListener:
        if table not in self._tables:
            raise ValueError(f"Table '{table}' is not published by this feed")
        if event != INSERT:
            raise ValueError(f"Unsupported change event '{event}'")
        listener = ChangeListener(
            token=next(self._tokens),
            table=table,
            event=event,
            filters=dict(filters or {}),
            callback=callback,
        )
        with self._lock:
            self._listeners[listener.token] = listener
        return listener

    def remove(self, listener: ChangeListener) -> None:
        with self._lock:
            self._listeners.pop(listener.token, None)

    def listener_count(self, table: str | None = None, **filters: Any) -> int:
        with self._lock:
            listeners = list(self._listeners.values())
        return sum(
            1
            for listener in listeners
            if (table is None or listener.table == table)
            and all(listener.filters.get(key) == value for key, value in filters.items())
        )

    def publish(self, table: str, event_name: str, row: Mapping[str, Any]) -> None:
        """Deliver ``row`` to every listener whose filters match it."""

        with self._lock:
            listeners = [
                listener
                for listener in self._listeners.values()
                if listener.matches(table, event_name, row)
            ]
        for listener in listeners:
            # Listeners may have been removed after the snapshot was taken.
            with self._lock:
                if listener.token not in self._listeners:
                    continue
            try:
                listener.callback(dict(row))
            except Exception:
                logger.exception(
                    "Change listener %s failed while handling a %s on %s",
                    listener.token,
                    event_name,
                    table,
                )

    def _collect(self, session: Session, flush_context: Any) -> None:
        pending = session.info.setdefault(_PENDING_KEY, [])
        owner = session.get_nested_transaction() or session.get_transaction()
        new_instances = sorted(session.new, key=lambda obj: inspect(obj).insert_order or 0)
        for instance in new_instances:
            table, row = row_payload(instance)
            if table in self._tables:
                pending.append((owner, table, row))

    def _publish(self, session: Session) -> None:
        pending = session.info.pop(_PENDING_KEY, [])
        for _, table, row in pending:
            self.publish(table, INSERT, row)

    def _rollback(self, session: Session, previous_transaction: Any) -> None:
        pending = session.info.get(_PENDING_KEY)
        if not pending:
            return
        kept = [
            entry for entry in pending if not _owned_by(entry[0], previous_transaction)
        ]
        if len(kept) != len(pending):
            logger.debug(
                "Discarded %d unpublished inserts after rollback", len(pending) - len(kept)
            )
            session.info[_PENDING_KEY] = kept

    def _discard(self, session: Session, transaction: Any) -> None:
        # Only the outermost transaction owns the pending rows.
        if transaction.parent is not None:
            return
        dropped = session.info.pop(_PENDING_KEY, [])
        if dropped:
            logger.debug("Discarded %d unpublished inserts after rollback", len(dropped))


def _owned_by(owner: Any, transaction: Any) -> bool:
    """Return ``True`` when ``owner`` is ``transaction`` or one of its savepoints."""

    while owner is not None:
        if owner is transaction:
            return True
        owner = owner.parent
    return False


__all__ = ["ChangeListener", "INSERT", "NotificationChangeFeed", "row_payload"]
