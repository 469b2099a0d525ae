"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from takurabid.application.use_cases.notifications import NotificationService
from takurabid.config import Settings, get_settings
from takurabid.infrastructure.database import open_database
from takurabid.infrastructure.notifications import (
    NotificationChangeFeed,
    NotificationSubscriptionBridge,
)
from takurabid.interfaces.api.routes import register_routes

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Every collaborator (database, change feed, subscription bridge and
    notification service) is built in the lifespan and stored on
    ``app.state``; route dependencies read them from there.
    """

    resolved = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(resolved)
        with open_database(resolved) as database:
            change_feed = NotificationChangeFeed()
            change_feed.attach(database.session_factory)

            app.state.settings = resolved
            app.state.database = database
            app.state.change_feed = change_feed
            app.state.subscription_bridge = NotificationSubscriptionBridge(change_feed)
            app.state.notification_service = NotificationService(
                database.session_factory,
                default_limit=resolved.notification_page_size,
                max_limit=resolved.notification_max_page_size,
            )
            logger.info("TakuraBid notification service started")
            try:
                yield
            finally:
                change_feed.detach(database.session_factory)
                logger.info("TakuraBid notification service stopped")

    app = FastAPI(title="TakuraBid Notifications", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=resolved.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app
