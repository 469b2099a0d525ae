"""Tests for the store change feed."""

from __future__ import annotations

import pytest

from takurabid.infrastructure.database import Database
from takurabid.infrastructure.models import NotificationModel, UserProfileModel
from takurabid.infrastructure.notifications import NotificationChangeFeed


def _notification(user_id: str = "user-1", title: str = "Hello") -> NotificationModel:
    return NotificationModel(user_id=user_id, type="message", title=title, body="body")


def test_insert_is_published_only_after_commit(database: Database, change_feed: NotificationChangeFeed) -> None:
    received: list[dict] = []
    change_feed.listen(table="notifications", filters={"user_id": "user-1"}, callback=received.append)

    with database.session() as session:
        session.add(_notification())
        session.flush()
        assert received == []
        session.commit()

    assert len(received) == 1
    row = received[0]
    assert row["user_id"] == "user-1"
    assert row["type"] == "message"
    assert row["read"] is False
    assert row["id"]
    assert isinstance(row["created_at"], str)
    assert "metadata" in row


def test_rolled_back_inserts_are_never_published(database: Database, change_feed: NotificationChangeFeed) -> None:
    received: list[dict] = []
    change_feed.listen(table="notifications", callback=received.append)

    with database.session() as session:
        session.add(_notification(title="discarded"))
        session.flush()
        session.rollback()

        session.add(_notification(title="kept"))
        session.commit()

    assert [row["title"] for row in received] == ["kept"]


def test_inserts_from_a_rolled_back_savepoint_are_never_published(
    database: Database, change_feed: NotificationChangeFeed
) -> None:
    received: list[dict] = []
    change_feed.listen(table="notifications", callback=received.append)

    with database.session() as session:
        session.add(_notification(title="kept"))
        savepoint = session.begin_nested()
        session.add(_notification(title="rolled back"))
        session.flush()
        savepoint.rollback()
        session.commit()

        stored = [row.title for row in session.query(NotificationModel).all()]

    assert stored == ["kept"]
    assert [row["title"] for row in received] == ["kept"]


def test_inserts_from_a_released_savepoint_follow_the_outer_commit(
    database: Database, change_feed: NotificationChangeFeed
) -> None:
    received: list[dict] = []
    change_feed.listen(table="notifications", callback=received.append)

    with database.session() as session:
        with session.begin_nested():
            session.add(_notification(title="inner"))
        assert received == []
        session.commit()

    assert [row["title"] for row in received] == ["inner"]


def test_rows_are_published_in_insert_order(database: Database, change_feed: NotificationChangeFeed) -> None:
    received: list[dict] = []
    change_feed.listen(table="notifications", callback=received.append)

    with database.session() as session:
        session.add_all([_notification(title=str(index)) for index in range(5)])
        session.commit()

    assert [row["title"] for row in received] == ["0", "1", "2", "3", "4"]


def test_filters_select_matching_rows(database: Database, change_feed: NotificationChangeFeed) -> None:
    mine: list[dict] = []
    theirs: list[dict] = []
    change_feed.listen(table="notifications", filters={"user_id": "user-1"}, callback=mine.append)
    change_feed.listen(table="notifications", filters={"user_id": "user-2"}, callback=theirs.append)

    with database.session() as session:
        session.add_all([_notification("user-1"), _notification("user-2"), _notification("user-2")])
        session.commit()

    assert len(mine) == 1
    assert len(theirs) == 2


def test_other_tables_are_not_published(database: Database, change_feed: NotificationChangeFeed) -> None:
    received: list[dict] = []
    change_feed.listen(table="notifications", callback=received.append)

    with database.session() as session:
        session.add(UserProfileModel(auth_id="auth-1", type="client", name="Tariro", avatar="TA"))
        session.commit()

    assert received == []


def test_removed_listener_stops_receiving(database: Database, change_feed: NotificationChangeFeed) -> None:
    received: list[dict] = []
    listener = change_feed.listen(table="notifications", callback=received.append)
    change_feed.remove(listener)
    change_feed.remove(listener)

    with database.session() as session:
        session.add(_notification())
        session.commit()

    assert received == []
    assert change_feed.listener_count() == 0


def test_failing_listener_does_not_block_others(
    database: Database, change_feed: NotificationChangeFeed, caplog
) -> None:
    received: list[dict] = []

    def explode(row: dict) -> None:
        raise RuntimeError("subscriber bug")

    change_feed.listen(table="notifications", callback=explode)
    change_feed.listen(table="notifications", callback=received.append)

    with caplog.at_level("ERROR"):
        with database.session() as session:
            session.add(_notification())
            session.commit()

    assert len(received) == 1
    assert any("failed while handling" in record.getMessage() for record in caplog.records)


def test_listener_count_by_filter(change_feed: NotificationChangeFeed) -> None:
    change_feed.listen(table="notifications", filters={"user_id": "a"}, callback=lambda row: None)
    change_feed.listen(table="notifications", filters={"user_id": "b"}, callback=lambda row: None)

    assert change_feed.listener_count("notifications") == 2
    assert change_feed.listener_count("notifications", user_id="a") == 1


def test_unknown_table_or_event_is_rejected(change_feed: NotificationChangeFeed) -> None:
    with pytest.raises(ValueError):
        change_feed.listen(table="users", callback=lambda row: None)
    with pytest.raises(ValueError):
        change_feed.listen(table="notifications", event="DELETE", callback=lambda row: None)
