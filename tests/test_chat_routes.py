"""Simulated-chat history endpoint tests."""

import jwt
import pytest

from auth import security
from chat import repository


@pytest.fixture
def messages(monkeypatch):
    store = []

    async def list_messages(db, *, user_id, target_id):
        rows = [m for m in store if m["user_id"] == user_id and m["target_id"] == target_id]
        return sorted(rows, key=lambda m: m["timestamp"])

    async def insert_message(db, *, user_id, target_id, sender, text, insight, timestamp):
        row = {
            "id": len(store) + 1,
            "user_id": user_id,
            "target_id": target_id,
            "sender": sender,
            "text": text,
            "insight": insight,
            "timestamp": timestamp,
        }
        store.append(row)
        return row

    async def delete_messages(db, *, user_id, target_id):
        store[:] = [m for m in store if not (m["user_id"] == user_id and m["target_id"] == target_id)]

    monkeypatch.setattr(repository, "list_messages", list_messages)
    monkeypatch.setattr(repository, "insert_message", insert_message)
    monkeypatch.setattr(repository, "delete_messages", delete_messages)
    return store


async def test_save_and_list_messages(client, auth_headers, messages):
    for ts, sender, text in [(2000, "persona", "hey you"), (1000, "user", "hi!")]:
        resp = await client.post(
            "/api/chat/target-1",
            json={"sender": sender, "text": text, "timestamp": ts},
            headers=auth_headers,
        )
        assert resp.status_code == 201

    resp = await client.get("/api/chat/target-1", headers=auth_headers)
    assert resp.status_code == 200
    assert [m["text"] for m in resp.json()] == ["hi!", "hey you"]
    assert all(m["user_id"] == 42 for m in resp.json())
    assert resp.json()[0]["insight"] == ""


async def test_other_targets_are_untouched_by_clear(client, auth_headers, messages):
    await client.post("/api/chat/a", json={"sender": "user", "text": "one", "timestamp": 1}, headers=auth_headers)
    await client.post("/api/chat/b", json={"sender": "user", "text": "two", "timestamp": 2}, headers=auth_headers)

    resp = await client.delete("/api/chat/a", headers=auth_headers)
    assert resp.json() == {"success": True}
    assert (await client.get("/api/chat/a", headers=auth_headers)).json() == []
    assert len((await client.get("/api/chat/b", headers=auth_headers)).json()) == 1


@pytest.mark.parametrize(
    "payload",
    [
        {"sender": "robot", "text": "hi", "timestamp": 1},
        {"sender": "user", "text": "", "timestamp": 1},
        {"sender": "user", "text": "hi"},
    ],
)
async def test_invalid_message_is_rejected(client, auth_headers, messages, payload):
    resp = await client.post("/api/chat/t", json=payload, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.json()["status"] == "error"
    assert messages == []


async def test_chat_requires_token(client, messages):
    resp = await client.get("/api/chat/t")
    assert resp.status_code == 401


async def test_non_numeric_user_id_matches_profile_routes(client, messages):
    token = jwt.encode({"userId": "abc"}, security.jwt_secret(), algorithm="HS256")
    headers = {"Authorization": f"Bearer {token}"}

    chat = await client.get("/api/chat/t", headers=headers)
    profile = await client.get("/api/user/profile", headers=headers)

    assert chat.status_code == profile.status_code == 401
    assert chat.json() == profile.json() == {"error": "Invalid token", "status": "error"}
