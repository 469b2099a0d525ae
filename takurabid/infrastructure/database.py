"""Database configuration and session management."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from takurabid.config import Settings


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""


logger = logging.getLogger(__name__)


def build_engine(database_url: str) -> Engine:
    """Create the SQLAlchemy engine for ``database_url``.

    SQLite connections are shared across the worker threads FastAPI uses for
    sync routes; in-memory databases additionally need a single connection or
    every session would see an empty schema.
    """

    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return create_engine(url, pool_pre_ping=True)

    connect_args = {"check_same_thread": False}
    if url.database in (None, "", ":memory:"):
        return create_engine(url, connect_args=connect_args, poolclass=StaticPool)
    return create_engine(url, connect_args=connect_args)


class Database:
    """Explicitly constructed handle over the engine and its session factory."""

    def __init__(self, database_url: str) -> None:
        self.engine = build_engine(database_url)
        self.session_factory: sessionmaker[Session] = sessionmaker(
            autocommit=False, autoflush=False, bind=self.engine
        )

    def initialize(self) -> None:
        """Ensure all ORM models have corresponding database tables."""

        from takurabid.infrastructure import models  # noqa: F401  # ensure models are imported

        Base.metadata.create_all(bind=self.engine, checkfirst=True)

    def dispose(self) -> None:
        self.engine.dispose()

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Yield a session and close it afterwards."""

        db = self.session_factory()
        try:
            yield db
        finally:
            db.close()


@contextmanager
def open_database(settings: Settings) -> Iterator[Database]:
    """Create, initialize and finally dispose the database for ``settings``."""

    database = Database(settings.database_url)
    database.initialize()
    logger.info("Database ready at %s", make_url(settings.database_url).render_as_string(hide_password=True))
    try:
        yield database
    finally:
        database.dispose()


__all__ = ["Base", "Database", "build_engine", "open_database"]
