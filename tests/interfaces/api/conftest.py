"""Fixtures running the FastAPI application against an in-memory store."""

from __future__ import annotations

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

from takurabid.main import create_app


@pytest.fixture()
def client(settings):
    """Return a test client bound to a clean application instance."""

    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def register(client: TestClient, make_token):
    """Create a profile for ``auth_id`` and return ``(profile, headers, token)``."""

    def _register(auth_id: str, *, name: str = "Tendai Moyo", user_type: str = "driver"):
        token = make_token(auth_id, email=f"{auth_id}@example.com")
        headers = {"Authorization": f"Bearer {token}"}
        response = client.post("/profiles/", json={"type": user_type, "name": name}, headers=headers)
        assert response.status_code == 201, response.text
        return response.json(), headers, token

    return _register
