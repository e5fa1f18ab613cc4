# tests/test_api.py

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import httpx

from .conftest import STRONG_PASSWORD


async def _register(client: httpx.AsyncClient, email: str, name: str = "Alice Smith") -> str:
    resp = await client.post("/auth/register", json={"email": email, "name": name, "password": STRONG_PASSWORD})
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]["access_token"]


def _auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def _due(hours: float) -> str:
    return (datetime.now(timezone.utc) + timedelta(hours=hours)).isoformat()


async def test_register_login_envelope(client) -> None:
    resp = await client.post(
        "/auth/register",
        json={"email": "Alice@Example.com", "name": "Alice Smith", "password": STRONG_PASSWORD},
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["status"] == "success"
    assert body["status_code"] == 201
    assert body["data"]["user"]["email"] == "alice@example.com"
    assert body["data"]["token_type"] == "bearer"
    assert "password" not in resp.text
    assert resp.headers["X-Trace-ID"]

    resp = await client.post("/auth/login", json={"email": "alice@example.com", "password": STRONG_PASSWORD})
    assert resp.status_code == 200
    assert resp.json()["data"]["access_token"]


async def test_duplicate_registration_conflicts(client) -> None:
    await _register(client, "alice@example.com")

    resp = await client.post(
        "/auth/register",
        json={"email": "ALICE@example.com", "name": "Alice Again", "password": STRONG_PASSWORD},
    )

    assert resp.status_code == 409
    body = resp.json()
    assert body["status"] == "error"
    assert body["status_code"] == 409
    assert body["message"] == "邮箱已被注册"
    assert body["errors"]["path"] == "/auth/register"
    assert body["errors"]["error"] == "Conflict"
    assert body["errors"]["timestamp"]


async def test_registration_validation(client) -> None:
    weak = await client.post(
        "/auth/register", json={"email": "weak@example.com", "name": "Weak Pw", "password": "password"}
    )
    assert weak.status_code == 400
    assert weak.json()["status"] == "error"

    bad_name = await client.post(
        "/auth/register", json={"email": "n@example.com", "name": "R2D2", "password": STRONG_PASSWORD}
    )
    assert bad_name.status_code == 400

    bad_email = await client.post(
        "/auth/register", json={"email": "not-an-email", "name": "No Mail", "password": STRONG_PASSWORD}
    )
    assert bad_email.status_code == 400


async def test_login_failures_share_one_answer(client) -> None:
    await _register(client, "alice@example.com")

    wrong = await client.post("/auth/login", json={"email": "alice@example.com", "password": "Wr0ng!Pass"})
    unknown = await client.post("/auth/login", json={"email": "ghost@example.com", "password": STRONG_PASSWORD})

    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json()["message"] == unknown.json()["message"] == "邮箱或密码错误"


async def test_protected_routes_need_a_valid_token(client) -> None:
    missing = await client.get("/todo-lists")
    assert missing.status_code == 401
    assert missing.json()["status"] == "error"

    garbage = await client.get("/todo-lists", headers=_auth("not.a.jwt"))
    assert garbage.status_code == 401


async def test_logout_revokes_the_token(client, fake_redis) -> None:
    token = await _register(client, "alice@example.com")
    assert (await client.get("/todo-lists", headers=_auth(token))).status_code == 200

    resp = await client.post("/auth/logout", headers=_auth(token))
    assert resp.status_code == 200
    assert len(fake_redis.store) == 1

    assert (await client.get("/todo-lists", headers=_auth(token))).status_code == 401


async def test_lists_and_tasks_end_to_end(client) -> None:
    alice = await _register(client, "alice@example.com")
    bob = await _register(client, "bob@example.com", name="Bob Jones")

    resp = await client.post("/todo-lists", json={"name": "Launch", "description": "v1 launch"}, headers=_auth(alice))
    assert resp.status_code == 201
    list_id = resp.json()["data"]["id"]
    tasks_url = f"/todo-lists/{list_id}/tasks"

    # bob sees nothing of alice's data
    assert (await client.get(f"/todo-lists/{list_id}", headers=_auth(bob))).status_code == 404
    assert (await client.get(tasks_url, headers=_auth(bob))).status_code == 404
    bob_lists = (await client.get("/todo-lists", headers=_auth(bob))).json()["data"]
    assert bob_lists["paging"]["total_items"] == 0

    created = []
    for title, hours, priority in (("Ship it", 2, "high"), ("Write notes", 30, "low"), ("Retro", 100, "medium")):
        resp = await client.post(
            tasks_url,
            json={"title": title, "due_date": _due(hours), "priority": priority},
            headers=_auth(alice),
        )
        assert resp.status_code == 201, resp.text
        created.append(resp.json()["data"])
    assert [task["timeline_status"] for task in created] == ["red", "amber", "green"]

    page = (await client.get(tasks_url, params={"limit": 2}, headers=_auth(alice))).json()["data"]
    assert [task["title"] for task in page["payload"]] == ["Ship it", "Write notes"]
    assert page["paging"] == {
        "total_items": 3,
        "page_size": 2,
        "current": 1,
        "count": 2,
        "next": 2,
        "previous": None,
    }
    assert [link["rel"] for link in page["links"]] == ["current", "next"]
    assert page["links"][1]["href"].endswith(f"{tasks_url}?limit=2&page=2")

    high = (await client.get(tasks_url, params={"priority": "high"}, headers=_auth(alice))).json()["data"]
    assert [task["title"] for task in high["payload"]] == ["Ship it"]

    ship_id = created[0]["id"]
    resp = await client.patch(f"{tasks_url}/{ship_id}", json={"status": "completed"}, headers=_auth(alice))
    assert resp.status_code == 200
    assert resp.json()["data"]["status"] == "completed"
    assert (await client.patch(f"{tasks_url}/{ship_id}", json={"title": "Mine"}, headers=_auth(bob))).status_code == 404

    assert (await client.delete(f"{tasks_url}/{ship_id}", headers=_auth(alice))).status_code == 204
    assert (await client.get(f"{tasks_url}/{ship_id}", headers=_auth(alice))).status_code == 404
    archived = await client.get(f"{tasks_url}/{ship_id}", params={"include_deleted": "true"}, headers=_auth(alice))
    assert archived.status_code == 200
    assert archived.json()["data"]["is_deleted"] is True

    detail = (await client.get(f"/todo-lists/{list_id}", headers=_auth(alice))).json()["data"]
    assert [task["title"] for task in detail["tasks"]] == ["Write notes", "Retro"]

    resp = await client.patch(f"/todo-lists/{list_id}", json={"name": "Launch v2"}, headers=_auth(alice))
    assert resp.json()["data"]["name"] == "Launch v2"

    assert (await client.delete(f"/todo-lists/{list_id}", headers=_auth(bob))).status_code == 404
    assert (await client.delete(f"/todo-lists/{list_id}", headers=_auth(alice))).status_code == 204
    assert (await client.get(f"/todo-lists/{list_id}", headers=_auth(alice))).status_code == 404


async def test_task_input_validation(client) -> None:
    token = await _register(client, "alice@example.com")
    list_id = (await client.post("/todo-lists", json={"name": "Checks"}, headers=_auth(token))).json()["data"]["id"]
    tasks_url = f"/todo-lists/{list_id}/tasks"

    past = await client.post(tasks_url, json={"title": "Too late", "due_date": _due(-1)}, headers=_auth(token))
    assert past.status_code == 400
    assert "截止时间不能早于当前时间" in past.json()["message"]

    short = await client.post(tasks_url, json={"title": "ab", "due_date": _due(5)}, headers=_auth(token))
    assert short.status_code == 400

    inverted = await client.get(
        tasks_url,
        params={"due_date_start": _due(48), "due_date_end": _due(1)},
        headers=_auth(token),
    )
    assert inverted.status_code == 400

    zero_limit = await client.get(tasks_url, params={"limit": 0}, headers=_auth(token))
    assert zero_limit.status_code == 400

    bad_status = await client.get(tasks_url, params={"status": "done"}, headers=_auth(token))
    assert bad_status.status_code == 400


async def test_huge_page_number_is_a_bad_request(client) -> None:
    token = await _register(client, "alice@example.com")

    resp = await client.get("/todo-lists", params={"page": "10000000000000000000"}, headers=_auth(token))

    assert resp.status_code == 400
    assert resp.json()["message"] == "page 超出范围"


async def test_unknown_route_uses_error_envelope(client) -> None:
    resp = await client.get("/nope")
    assert resp.status_code == 404
    assert resp.json()["status"] == "error"
    assert resp.json()["errors"]["error"] == "Not Found"


async def test_health(client) -> None:
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
