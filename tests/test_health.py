"""Health, unknown-route and request-logging tests."""

import json
import logging
from datetime import datetime

from core.log import JSONFormatter
from users import repository as users_repository


async def test_health(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert datetime.fromisoformat(body["timestamp"])


async def test_unknown_route_uses_error_envelope(client):
    resp = await client.get("/api/nope")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Not Found", "status": "error"}


async def test_requests_are_logged_with_structured_fields(client, auth_headers, caplog, monkeypatch):
    async def get_user_with_profile(db, user_id):
        return None

    monkeypatch.setattr(users_repository, "get_user_with_profile", get_user_with_profile)

    with caplog.at_level(logging.INFO, logger="main"):
        await client.get("/health")
        await client.get("/api/user/profile", headers=auth_headers)

    records = [r for r in caplog.records if r.name == "main" and hasattr(r, "status_code")]
    health, profile = records[-2], records[-1]
    assert (health.method, health.path, health.status_code, health.user_id) == ("GET", "/health", 200, None)
    assert (profile.path, profile.status_code, profile.user_id) == ("/api/user/profile", 404, "42")
    assert profile.duration_ms >= 0


def test_json_formatter_emits_request_fields():
    record = logging.LogRecord("main", logging.INFO, __file__, 1, "GET /health 200", None, None)
    record.__dict__.update(method="GET", path="/health", status_code=200, duration_ms=1.5, user_id="7")

    line = json.loads(JSONFormatter().format(record))

    assert line["message"] == "GET /health 200"
    assert line["status_code"] == 200
    assert line["user_id"] == "7"
    assert line["duration_ms"] == 1.5
    assert "model" not in line
