"""User profile and payment endpoint tests."""

import jwt
import pytest

from auth import security
from users import repository

ROW = {
    "id": 42,
    "username": "mia",
    "email": "mia@example.com",
    "is_guest": False,
    "name": None,
    "occupation": "Designer",
    "bio": None,
    "age": "27",
    "avatar_b64": None,
    "additional_images": None,
    "social_links": None,
    "ai_model_preference": "gemini-3-flash-preview",
    "analysis_model_preference": None,
    "api_endpoint": None,
}


@pytest.fixture
def profile_store(monkeypatch):
    calls = {"updates": [], "payments": []}

    async def get_user_with_profile(db, user_id):
        return dict(ROW) if user_id == ROW["id"] else None

    async def update_profile(db, user_id, payload):
        calls["updates"].append((user_id, payload))

    async def list_payments(db, user_id):
        calls["payments"].append(user_id)
        return [{"id": 1, "user_id": user_id, "amount": 9.99, "currency": "USD", "status": "completed"}]

    monkeypatch.setattr(repository, "get_user_with_profile", get_user_with_profile)
    monkeypatch.setattr(repository, "update_profile", update_profile)
    monkeypatch.setattr(repository, "list_payments", list_payments)
    return calls


async def test_get_profile(client, auth_headers, profile_store):
    resp = await client.get("/api/user/profile", headers=auth_headers)

    assert resp.status_code == 200
    body = resp.json()
    assert body["id"] == 42
    assert body["isGuest"] is False
    profile = body["profile"]
    # Missing profile name falls back to the username.
    assert profile["name"] == "mia"
    assert profile["occupation"] == "Designer"
    assert profile["bio"] == ""
    assert profile["additionalImages"] == []
    assert profile["aiModelPreference"] == "gemini-3-flash-preview"


async def test_profile_requires_token(client, profile_store):
    resp = await client.get("/api/user/profile")
    assert resp.status_code == 401
    assert resp.json()["error"] == "No token provided"


async def test_unknown_user_is_not_found(client, profile_store):
    headers = {"Authorization": f"Bearer {security.build_access_token(user_id=7)}"}
    resp = await client.get("/api/user/profile", headers=headers)
    assert resp.status_code == 404
    assert resp.json() == {"error": "User not found", "status": "error"}


async def test_non_numeric_user_id_is_an_invalid_token(client, profile_store):
    token = jwt.encode({"userId": "abc"}, security.jwt_secret(), algorithm="HS256")
    resp = await client.get("/api/user/profile", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401
    assert resp.json()["error"] == "Invalid token"


async def test_update_profile_is_partial(client, auth_headers, profile_store):
    resp = await client.put(
        "/api/user/profile",
        json={"bio": "coffee & film", "additionalImages": ["data:image/png;base64,AAAA"]},
        headers=auth_headers,
    )

    assert resp.status_code == 200
    assert resp.json() == {"success": True}
    user_id, payload = profile_store["updates"][0]
    assert user_id == 42
    assert payload.bio == "coffee & film"
    assert payload.additional_images == ["data:image/png;base64,AAAA"]
    assert payload.name is None
    assert payload.occupation is None


async def test_payments_are_scoped_to_caller(client, auth_headers, profile_store):
    resp = await client.get("/api/user/payments", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()[0]["currency"] == "USD"
    assert profile_store["payments"] == [42]
