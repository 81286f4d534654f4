"""Health probes and WebSocket hub authentication.

Invariants:
    - /api/health is always 200; /api/health/ready reflects the database
    - The hub refuses connections without a valid access_token (close code 1008)
"""

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from ventytime import __version__
from ventytime.main import app


async def test_health(client):
    res = await client.get("/api/health")
    assert res.json() == {
        "status": "healthy", "service": "ventytime-api", "version": __version__,
    }


async def test_ready_reports_database_and_cache(client):
    res = await client.get("/api/health/ready")
    assert res.status_code == 200
    body = res.json()
    assert body["checks"]["database"] == "healthy"
    assert "hit_rate_percent" in body["event_cache"]


def test_hub_rejects_missing_token():
    with pytest.raises(WebSocketDisconnect) as exc:
        with TestClient(app).websocket_connect("/notificationHub"):
            pass
    assert exc.value.code == 1008


def test_hub_rejects_invalid_token():
    with pytest.raises(WebSocketDisconnect) as exc:
        with TestClient(app).websocket_connect("/notificationHub?access_token=garbage"):
            pass
    assert exc.value.code == 1008
