"""Tests for the realtime notification websocket."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect


def test_connection_without_valid_token_is_refused(client: TestClient, make_token) -> None:
    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect("/notifications/ws"):
            pass

    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect("/notifications/ws?token=garbage"):
            pass

    # Valid identity but no profile yet.
    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect(f"/notifications/ws?token={make_token('auth-ghost')}"):
            pass


def test_stream_sends_snapshot_then_live_inserts(client: TestClient, register) -> None:
    profile, headers, token = register("auth-driver")
    existing = client.post(
        "/notifications/",
        json={"user_id": profile["id"], "type": "system", "title": "Welcome", "body": "Hi"},
        headers=headers,
    ).json()

    with client.websocket_connect(f"/notifications/ws?token={token}") as websocket:
        init = websocket.receive_json()
        assert init["type"] == "init"
        assert [n["id"] for n in init["data"]] == [existing["id"]]

        created = client.post(
            "/notifications/",
            json={"user_id": profile["id"], "type": "message", "title": "New message", "body": "Load ready?"},
            headers=headers,
        ).json()

        message = websocket.receive_json()
        assert message["type"] == "notification"
        assert message["data"]["id"] == created["id"]
        assert message["data"]["title"] == "New message"
        assert message["data"]["read"] is False
        assert message["data"]["icon"] == "💬"

        websocket.send_json({"type": "ping"})
        assert websocket.receive_json() == {"type": "pong"}


def test_other_users_inserts_are_not_streamed(client: TestClient, register) -> None:
    driver, driver_headers, driver_token = register("auth-driver")
    other, other_headers, _ = register("auth-other")

    with client.websocket_connect(f"/notifications/ws?token={driver_token}") as websocket:
        assert websocket.receive_json() == {"type": "init", "data": []}

        client.post(
            "/notifications/",
            json={"user_id": other["id"], "type": "bid", "title": "Bid", "body": "For other"},
            headers=other_headers,
        )
        mine = client.post(
            "/notifications/",
            json={"user_id": driver["id"], "type": "bid", "title": "Bid", "body": "For driver"},
            headers=driver_headers,
        ).json()

        message = websocket.receive_json()
        assert message["data"]["id"] == mine["id"]


def test_ack_marks_notifications_read(client: TestClient, register) -> None:
    profile, headers, token = register("auth-driver")
    created = client.post(
        "/notifications/",
        json={"user_id": profile["id"], "type": "payment", "title": "Paid", "body": "$500"},
        headers=headers,
    ).json()

    with client.websocket_connect(f"/notifications/ws?token={token}") as websocket:
        websocket.receive_json()
        websocket.send_text("not json")
        websocket.send_json({"type": "ack", "ids": [created["id"], 42]})
        websocket.send_json({"type": "ping"})
        assert websocket.receive_json() == {"type": "pong"}

    assert client.get("/notifications/unread-count", headers=headers).json() == {"unread": 0}


def test_binary_and_unknown_frames_are_ignored(client: TestClient, register) -> None:
    _, _, token = register("auth-driver")

    with client.websocket_connect(f"/notifications/ws?token={token}") as websocket:
        websocket.receive_json()
        websocket.send_bytes(b"\x00\x01")
        websocket.send_json(["not", "an", "object"])
        websocket.send_json({"type": "wave"})
        websocket.send_json({"type": "ping"})
        assert websocket.receive_json() == {"type": "pong"}


def test_disconnect_releases_the_channel(client: TestClient, register) -> None:
    profile, _, token = register("auth-driver")
    bridge = client.app.state.subscription_bridge

    with client.websocket_connect(f"/notifications/ws?token={token}") as websocket:
        websocket.receive_json()
        assert bridge.active_channels(profile["id"]) == 1

    assert bridge.active_channels(profile["id"]) == 0
