"""Target profile and saved-analysis endpoint tests (repository is faked)."""

import json
from datetime import datetime, timezone

import pytest

from auth import security
from targets import repository


@pytest.fixture
def store(monkeypatch):
    """In-memory target_profiles plus report tables, scoped like the SQL."""
    state = {
        "targets": {},
        "personality": [],
        "social": [],
        "posts": [],
        "relationship": [],
        "next_id": 1,
    }

    def next_id():
        value = state["next_id"]
        state["next_id"] += 1
        return value

    def owned(target_id, user_id):
        row = state["targets"].get(target_id)
        return row if row is not None and row["user_id"] == user_id else None

    def public(row):
        return {k: v for k, v in row.items() if k != "user_id"}

    def rows_for(table, target_id):
        rows = [r for r in state[table] if r["target_id"] == target_id]
        return [{k: v for k, v in r.items() if k != "target_id"} for r in reversed(rows)]

    async def list_targets(db, user_id):
        rows = [public(r) for r in state["targets"].values() if r["user_id"] == user_id]
        return sorted(rows, key=lambda r: r["created_at"], reverse=True)

    async def get_target(db, *, target_id, user_id):
        row = owned(target_id, user_id)
        return public(row) if row else None

    async def target_exists(db, *, target_id, user_id):
        return owned(target_id, user_id) is not None

    async def create_target(db, *, user_id, payload):
        now = datetime(2026, 1, 1, tzinfo=timezone.utc).replace(second=state["next_id"])
        row = {"id": next_id(), "user_id": user_id, **payload.model_dump(), "created_at": now, "updated_at": now}
        state["targets"][row["id"]] = row
        return public(row)

    async def update_target(db, *, target_id, user_id, payload):
        row = owned(target_id, user_id)
        if row is None:
            return None
        row.update({k: v for k, v in payload.model_dump().items() if v is not None})
        return public(row)

    async def delete_target(db, *, target_id, user_id):
        if owned(target_id, user_id) is None:
            return False
        del state["targets"][target_id]
        return True

    async def latest_personality_report(db, target_id):
        rows = rows_for("personality", target_id)
        return rows[0] if rows else None

    async def list_social_analyses(db, target_id):
        return rows_for("social", target_id)

    async def list_post_analyses(db, target_id):
        return rows_for("posts", target_id)

    async def list_relationship_reports(db, target_id):
        return rows_for("relationship", target_id)

    async def insert_personality_report(db, target_id, report):
        row = {"id": next_id(), "target_id": target_id, **report.model_dump(exclude={"id"})}
        # JSONB comes back from asyncpg as text.
        row["big_five"] = json.dumps(row["big_five"])
        state["personality"].append(row)

    async def insert_social_analysis(db, target_id, analysis):
        state["social"].append({"id": next_id(), "target_id": target_id, **analysis.model_dump(exclude={"id"})})

    async def insert_post_analysis(db, target_id, analysis):
        state["posts"].append({"id": next_id(), "target_id": target_id, **analysis.model_dump(exclude={"id"})})

    async def insert_relationship_report(db, *, user_id, target_id, report):
        row = {"id": next_id(), "target_id": target_id, **report.model_dump(exclude={"id"})}
        row["date_ideas"] = json.dumps(row["date_ideas"])
        state["relationship"].append(row)

    for fn in (
        list_targets,
        get_target,
        target_exists,
        create_target,
        update_target,
        delete_target,
        latest_personality_report,
        list_social_analyses,
        list_post_analyses,
        list_relationship_reports,
        insert_personality_report,
        insert_social_analysis,
        insert_post_analysis,
        insert_relationship_report,
    ):
        monkeypatch.setattr(repository, fn.__name__, fn)
    return state


@pytest.fixture
def other_user_headers():
    return {"Authorization": f"Bearer {security.build_access_token(user_id=7)}"}


async def _create(client, headers, **fields):
    resp = await client.post("/api/targets", json={"name": "Mia", **fields}, headers=headers)
    assert resp.status_code == 201
    return resp.json()


PERSONALITY = {
    "bigFive": {"openness": 80, "conscientiousness": 60, "extraversion": 70, "agreeableness": 65, "neuroticism": 30},
    "mbti": "ENFP",
    "emotionalStability": 70,
    "coreInterests": ["film"],
    "communicationStyle": "Playful",
    "summary": "Warm and curious.",
    "datingAdvice": "Lead with humour.",
    "dataSufficiency": 55,
    "generatedAt": 1700000000000,
    "tags": ["#creative"],
}


# --- CRUD ---------------------------------------------------------------------

async def test_create_and_list_targets(client, auth_headers, store):
    first = await _create(client, auth_headers, occupation="Designer", additionalImages=["data:image/png;base64,A"])
    await _create(client, auth_headers, name="Zoe")

    assert first["name"] == "Mia"
    assert first["occupation"] == "Designer"
    assert first["additionalImages"] == ["data:image/png;base64,A"]
    assert first["generalSummary"] == ""
    assert "avatar_b64" not in first

    resp = await client.get("/api/targets", headers=auth_headers)
    assert resp.status_code == 200
    assert [t["name"] for t in resp.json()] == ["Zoe", "Mia"]


async def test_create_requires_a_name(client, auth_headers, store):
    resp = await client.post("/api/targets", json={"occupation": "Designer"}, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.json()["status"] == "error"
    assert store["targets"] == {}


async def test_targets_require_a_token(client, store):
    resp = await client.get("/api/targets")
    assert resp.status_code == 401
    assert resp.json()["error"] == "No token provided"


async def test_update_is_partial(client, auth_headers, store):
    target = await _create(client, auth_headers, bio="coffee")

    resp = await client.put(
        f"/api/targets/{target['id']}",
        json={"occupation": "Architect", "bio": None},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["occupation"] == "Architect"
    assert resp.json()["bio"] == "coffee"
    assert resp.json()["name"] == "Mia"


async def test_delete_target(client, auth_headers, store):
    target = await _create(client, auth_headers)

    resp = await client.delete(f"/api/targets/{target['id']}", headers=auth_headers)
    assert resp.json() == {"success": True}

    resp = await client.get(f"/api/targets/{target['id']}", headers=auth_headers)
    assert resp.status_code == 404


# --- ownership ----------------------------------------------------------------

@pytest.mark.parametrize(
    "method, suffix, body",
    [
        ("GET", "", None),
        ("PUT", "", {"name": "Hijacked"}),
        ("DELETE", "", None),
        ("POST", "/personality", PERSONALITY),
        ("POST", "/post-analysis", {"analysis": "x", "timestamp": 1}),
    ],
)
async def test_other_users_target_is_not_found(client, auth_headers, other_user_headers, store, method, suffix, body):
    target = await _create(client, auth_headers)

    resp = await client.request(method, f"/api/targets/{target['id']}{suffix}", json=body, headers=other_user_headers)

    assert resp.status_code == 404
    assert resp.json() == {"error": "Target not found", "status": "error"}
    assert store["targets"][target["id"]]["name"] == "Mia"
    assert store["personality"] == [] and store["posts"] == []


@pytest.mark.parametrize("target_id", ["999", "abc"])
async def test_unknown_target_id_is_not_found(client, auth_headers, store, target_id):
    resp = await client.get(f"/api/targets/{target_id}", headers=auth_headers)
    assert resp.status_code == 404
    assert resp.json()["error"] == "Target not found"


# --- saved analyses -----------------------------------------------------------

async def test_saved_analyses_appear_on_the_target(client, auth_headers, store):
    target = await _create(client, auth_headers)
    base = f"/api/targets/{target['id']}"

    older = {**PERSONALITY, "mbti": "INFP", "generatedAt": 1}
    for body in (older, PERSONALITY):
        assert (await client.post(f"{base}/personality", json=body, headers=auth_headers)).json() == {"success": True}

    social = {"id": "1700000000000", "url": "https://insta/mia", "platform": "Instagram", "handle": "@mia",
              "reportTags": ["#artsy"], "report": "{}", "timestamp": 1700000000000}
    await client.post(f"{base}/social-analysis", json=social, headers=auth_headers)

    post = {"content": "Sunset", "images": ["data:image/png;base64,A"], "analysis": "### 1.", "timestamp": 5}
    await client.post(f"{base}/post-analysis", json=post, headers=auth_headers)

    relationship = {
        "compatibilityScore": 72,
        "greenFlags": ["replies fast"],
        "dateIdeas": [{"title": "Pottery class", "description": "hands-on"}],
        "goalContext": "second date",
        "generatedAt": 1700000000001,
    }
    await client.post(f"{base}/relationship-report", json=relationship, headers=auth_headers)

    resp = await client.get(base, headers=auth_headers)
    assert resp.status_code == 200
    body = resp.json()

    assert body["name"] == "Mia"
    assert body["personalityReport"]["mbti"] == "ENFP"
    assert body["personalityReport"]["bigFive"]["openness"] == 80
    assert isinstance(body["personalityReport"]["id"], str)

    [saved_social] = body["socialAnalysisHistory"]
    assert saved_social["platform"] == "Instagram"
    assert saved_social["reportTags"] == ["#artsy"]
    assert saved_social["id"] != social["id"]

    [saved_post] = body["postAnalysisHistory"]
    assert saved_post["content"] == "Sunset"
    assert saved_post["images"] == ["data:image/png;base64,A"]

    [consultation] = body["consultationHistory"]
    assert consultation["compatibilityScore"] == 72
    assert consultation["dateIdeas"] == [{"title": "Pottery class", "description": "hands-on"}]
    assert consultation["goalContext"] == "second date"


async def test_target_without_analyses(client, auth_headers, store):
    target = await _create(client, auth_headers)
    body = (await client.get(f"/api/targets/{target['id']}", headers=auth_headers)).json()

    assert body["personalityReport"] is None
    assert body["socialAnalysisHistory"] == []
    assert body["postAnalysisHistory"] == []
    assert body["consultationHistory"] == []


async def test_invalid_saved_report_is_rejected(client, auth_headers, store):
    target = await _create(client, auth_headers)
    resp = await client.post(
        f"/api/targets/{target['id']}/personality",
        json={"mbti": "ENFP"},
        headers=auth_headers,
    )
    assert resp.status_code == 400
    assert store["personality"] == []
