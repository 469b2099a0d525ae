"""Shared fixtures for the TakuraBid test-suite."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from takurabid.application.use_cases.notifications import NotificationService  # noqa: E402
from takurabid.config import Settings  # noqa: E402
from takurabid.infrastructure.database import Database  # noqa: E402
from takurabid.infrastructure.notifications import (  # noqa: E402
    NotificationChangeFeed,
    NotificationSubscriptionBridge,
)
from takurabid.infrastructure.security import create_identity_token  # noqa: E402


@pytest.fixture()
def settings() -> Settings:
    """Settings pointing at a private in-memory database."""

    return Settings(
        database_url="sqlite://",
        jwt_secret="test-secret",
        jwt_audience="authenticated",
        notification_page_size=50,
        notification_max_page_size=100,
        _env_file=None,
    )


@pytest.fixture()
def database(settings: Settings):
    """Initialized database handle, disposed after the test."""

    db = Database(settings.database_url)
    db.initialize()
    yield db
    db.dispose()


@pytest.fixture()
def change_feed(database: Database):
    feed = NotificationChangeFeed()
    feed.attach(database.session_factory)
    yield feed
    feed.detach(database.session_factory)


@pytest.fixture()
def bridge(change_feed: NotificationChangeFeed) -> NotificationSubscriptionBridge:
    return NotificationSubscriptionBridge(change_feed)


@pytest.fixture()
def service(database: Database, change_feed: NotificationChangeFeed) -> NotificationService:
    return NotificationService(database.session_factory)


@pytest.fixture()
def make_token(settings: Settings):
    """Return a factory signing identity tokens with the test secret."""

    def _make(auth_id: str, email: str | None = None) -> str:
        return create_identity_token(settings, auth_id, email=email)

    return _make
