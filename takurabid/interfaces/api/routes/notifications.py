"""Endpoints and websocket handler for realtime notifications."""

from __future__ import annotations

import asyncio
import logging
from functools import partial
from typing import Any

import anyio
from anyio import to_thread
from fastapi import APIRouter, Depends, HTTPException, Query, Response, WebSocket, WebSocketDisconnect, status

from takurabid.application.use_cases.notifications import (
    NotificationService,
    get_notification_color,
    get_notification_icon,
)
from takurabid.domain.entities import Notification, UserProfile
from takurabid.infrastructure.notifications import (
    NotificationDeduplicator,
    NotificationPublisher,
    NotificationSubscriptionBridge,
    serialize_notification,
)
from takurabid.interfaces.api.dependencies import (
    get_current_profile,
    get_notification_service,
    resolve_current_profile,
)
from takurabid.interfaces.api.routes_helpers import unwrap_or_raise
from takurabid.interfaces.api.schemas import (
    NotificationCreate,
    NotificationRead,
    NotificationStatsRead,
    UnreadCountRead,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)


def _notification_to_schema(notification: Notification) -> NotificationRead:
    return NotificationRead(
        id=notification.id,
        user_id=notification.user_id,
        type=notification.type,
        title=notification.title,
        body=notification.body,
        link=notification.link,
        read=notification.read,
        created_at=notification.created_at,
        metadata=notification.metadata or {},
        icon=get_notification_icon(notification.type),
        color=get_notification_color(notification.type),
    )


def _notification_to_payload(notification: Notification) -> dict[str, Any]:
    payload = serialize_notification(notification)
    payload["icon"] = get_notification_icon(notification.type)
    payload["color"] = get_notification_color(notification.type)
    return payload


@router.get("/", response_model=list[NotificationRead])
def list_notifications(
    limit: int | None = Query(default=None, ge=1),
    current_user: UserProfile = Depends(get_current_profile),
    service: NotificationService = Depends(get_notification_service),
) -> list[NotificationRead]:
    """Return the most recent notifications for the authenticated user."""

    if limit is not None and limit > service.max_limit:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"limit must not exceed {service.max_limit}",
        )
    notifications = unwrap_or_raise(service.get_notifications(current_user.id, limit))
    return [_notification_to_schema(notification) for notification in notifications]


@router.get("/unread-count", response_model=UnreadCountRead)
def unread_count(
    current_user: UserProfile = Depends(get_current_profile),
    service: NotificationService = Depends(get_notification_service),
) -> UnreadCountRead:
    return UnreadCountRead(unread=unwrap_or_raise(service.get_unread_count(current_user.id)))


@router.get("/stats", response_model=NotificationStatsRead)
def notification_stats(
    current_user: UserProfile = Depends(get_current_profile),
    service: NotificationService = Depends(get_notification_service),
) -> NotificationStatsRead:
    """Return total, unread and per-type counters for the authenticated user."""

    stats = unwrap_or_raise(service.get_notification_stats(current_user.id))
    return NotificationStatsRead(total=stats.total, unread=stats.unread, by_type=stats.by_type)


@router.post("/", response_model=NotificationRead, status_code=status.HTTP_201_CREATED)
def create_notification(
    payload: NotificationCreate,
    current_user: UserProfile = Depends(get_current_profile),
    service: NotificationService = Depends(get_notification_service),
) -> NotificationRead:
    """Notify ``payload.user_id`` on behalf of the authenticated user."""

    notification = unwrap_or_raise(
        service.create_notification(
            payload.user_id,
            payload.type,
            payload.title,
            payload.body,
            link=payload.link,
            metadata=payload.metadata,
        )
    )
    logger.info(
        "User %s notified %s (%s)", current_user.id, notification.user_id, notification.type
    )
    return _notification_to_schema(notification)


@router.post("/read-all", status_code=status.HTTP_204_NO_CONTENT)
def mark_all_notifications_read(
    current_user: UserProfile = Depends(get_current_profile),
    service: NotificationService = Depends(get_notification_service),
) -> Response:
    unwrap_or_raise(service.mark_all_as_read(current_user.id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
def mark_notification_read(
    notification_id: str,
    current_user: UserProfile = Depends(get_current_profile),
    service: NotificationService = Depends(get_notification_service),
) -> Response:
    unwrap_or_raise(service.mark_as_read(notification_id, user_id=current_user.id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notification(
    notification_id: str,
    current_user: UserProfile = Depends(get_current_profile),
    service: NotificationService = Depends(get_notification_service),
) -> Response:
    unwrap_or_raise(service.delete_notification(notification_id, user_id=current_user.id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/", status_code=status.HTTP_204_NO_CONTENT)
def clear_notifications(
    current_user: UserProfile = Depends(get_current_profile),
    service: NotificationService = Depends(get_notification_service),
) -> Response:
    unwrap_or_raise(service.clear_all(current_user.id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


async def _forward_live_notifications(
    websocket: WebSocket,
    publisher: NotificationPublisher,
    dedupe: NotificationDeduplicator,
) -> None:
    while True:
        notification = await publisher.queue.get()
        if not dedupe.accept(notification):
            continue
        try:
            await websocket.send_json(
                {"type": "notification", "data": _notification_to_payload(notification)}
            )
        except (WebSocketDisconnect, RuntimeError):
            return


async def _receive_client_messages(
    websocket: WebSocket,
    service: NotificationService,
    user_id: str,
) -> None:
    while True:
        try:
            message = await websocket.receive_json()
        except WebSocketDisconnect:
            return
        except (KeyError, ValueError):
            # Binary frames and invalid JSON are ignored.
            continue

        if not isinstance(message, dict):
            continue

        message_type = message.get("type")
        if message_type == "ping":
            await websocket.send_json({"type": "pong"})
            continue

        if message_type == "ack":
            ids = message.get("ids", [])
            if not isinstance(ids, list):
                continue
            for notification_id in ids:
                if not isinstance(notification_id, str):
                    continue
                await to_thread.run_sync(
                    partial(service.mark_as_read, notification_id, user_id=user_id)
                )


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Websocket endpoint that streams notifications to the authenticated user."""

    state = websocket.app.state
    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    try:
        with state.database.session() as session:
            user = resolve_current_profile(token, session, state.settings)
    except HTTPException:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    service: NotificationService = state.notification_service
    bridge: NotificationSubscriptionBridge = state.subscription_bridge

    await websocket.accept()
    publisher = NotificationPublisher(asyncio.get_running_loop())
    dedupe = NotificationDeduplicator()

    # Subscribe before taking the snapshot so no insert falls in between.
    with bridge.subscribe(user.id, publisher.dispatch):
        snapshot = (
            await to_thread.run_sync(lambda: service.get_notifications(user.id))
        ).unwrap_or([])
        dedupe.prime(notification.id for notification in snapshot)
        await websocket.send_json(
            {"type": "init", "data": [_notification_to_payload(n) for n in snapshot]}
        )

        async with anyio.create_task_group() as task_group:
            task_group.start_soon(_forward_live_notifications, websocket, publisher, dedupe)
            await _receive_client_messages(websocket, service, user.id)
            task_group.cancel_scope.cancel()

    logger.debug("Notification websocket closed for user %s", user.id)
