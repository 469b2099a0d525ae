"""Integration tests for the notification endpoints."""

from __future__ import annotations

from fastapi.testclient import TestClient


def _notify(client: TestClient, headers: dict, user_id: str, **overrides) -> dict:
    payload = {
        "user_id": user_id,
        "type": "bid",
        "title": "New Bid",
        "body": "Driver X bid $500",
    }
    payload.update(overrides)
    response = client.post("/notifications/", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_notification_read_flow(client: TestClient, register) -> None:
    """Create, list, mark read and count for a single user."""

    profile, headers, _ = register("auth-driver")

    created = _notify(client, headers, profile["id"], link="/driver/jobs/9", metadata={"bid_id": 9})
    assert created["read"] is False
    assert created["icon"] == "🔔"
    assert created["color"] == "bg-orange-100 text-orange-600"

    listing = client.get("/notifications/", params={"limit": 10}, headers=headers)
    assert listing.status_code == 200
    body = listing.json()
    assert len(body) == 1
    assert body[0]["id"] == created["id"]
    assert body[0]["type"] == "bid"
    assert body[0]["metadata"] == {"bid_id": 9}

    assert client.get("/notifications/unread-count", headers=headers).json() == {"unread": 1}

    response = client.post(f"/notifications/{created['id']}/read", headers=headers)
    assert response.status_code == 204
    response = client.post(f"/notifications/{created['id']}/read", headers=headers)
    assert response.status_code == 204

    assert client.get("/notifications/unread-count", headers=headers).json() == {"unread": 0}
    assert client.get("/notifications/", headers=headers).json()[0]["read"] is True


def test_producer_notifies_another_user(client: TestClient, register) -> None:
    driver, driver_headers, _ = register("auth-driver", name="Tendai")
    _, client_headers, _ = register("auth-client", name="Rudo", user_type="client")

    _notify(client, client_headers, driver["id"], type="job", title="Job assigned", body="Harare to Mutare")

    assert client.get("/notifications/", headers=client_headers).json() == []
    driver_notifications = client.get("/notifications/", headers=driver_headers).json()
    assert [n["title"] for n in driver_notifications] == ["Job assigned"]
    assert driver_notifications[0]["icon"] == "🚛"


def test_users_cannot_touch_each_others_notifications(client: TestClient, register) -> None:
    owner, owner_headers, _ = register("auth-owner")
    _, other_headers, _ = register("auth-other")
    created = _notify(client, owner_headers, owner["id"])

    assert client.post(f"/notifications/{created['id']}/read", headers=other_headers).status_code == 204
    assert client.delete(f"/notifications/{created['id']}", headers=other_headers).status_code == 204

    remaining = client.get("/notifications/", headers=owner_headers).json()
    assert [n["id"] for n in remaining] == [created["id"]]
    assert remaining[0]["read"] is False


def test_read_all_stats_delete_and_clear(client: TestClient, register) -> None:
    profile, headers, _ = register("auth-driver")
    first = _notify(client, headers, profile["id"], type="load")
    _notify(client, headers, profile["id"], type="load")
    _notify(client, headers, profile["id"], type="payment")

    stats = client.get("/notifications/stats", headers=headers).json()
    assert stats == {"total": 3, "unread": 3, "by_type": {"load": 2, "payment": 1}}

    assert client.post("/notifications/read-all", headers=headers).status_code == 204
    assert client.get("/notifications/unread-count", headers=headers).json() == {"unread": 0}

    assert client.delete(f"/notifications/{first['id']}", headers=headers).status_code == 204
    assert client.delete(f"/notifications/{first['id']}", headers=headers).status_code == 204
    ids = [n["id"] for n in client.get("/notifications/", headers=headers).json()]
    assert first["id"] not in ids
    assert len(ids) == 2

    assert client.delete("/notifications/", headers=headers).status_code == 204
    assert client.get("/notifications/", headers=headers).json() == []


def test_listing_is_newest_first_and_limited(client: TestClient, register) -> None:
    profile, headers, _ = register("auth-driver")
    for index in range(4):
        _notify(client, headers, profile["id"], title=f"n{index}")

    listing = client.get("/notifications/", params={"limit": 3}, headers=headers).json()
    assert len(listing) == 3
    timestamps = [n["created_at"] for n in listing]
    assert timestamps == sorted(timestamps, reverse=True)


def test_invalid_requests_are_rejected(client: TestClient, register) -> None:
    profile, headers, _ = register("auth-driver")

    response = client.post(
        "/notifications/",
        json={"user_id": profile["id"], "type": "auction", "title": "t", "body": "b"},
        headers=headers,
    )
    assert response.status_code == 422

    assert client.get("/notifications/", params={"limit": 0}, headers=headers).status_code == 422
    assert client.get("/notifications/", params={"limit": 101}, headers=headers).status_code == 422


def test_endpoints_require_authentication(client: TestClient) -> None:
    assert client.get("/notifications/").status_code == 401
    assert client.post("/notifications/read-all").status_code == 401
    assert client.delete("/notifications/").status_code == 401
