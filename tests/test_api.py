from datetime import datetime, timedelta, timezone

from taskmanager.models import User
from taskmanager.security import TokenService

from .helpers import TEST_SECRET, auth_headers, create_task, login, register


def test_healthz(client):
    assert client.get("/healthz").json() == {"ok": True}


# Auth routes


def test_register_returns_token_and_profile(client):
    r = register(client, "a@x.com", "pw", "A")
    assert r.status_code == 200
    body = r.json()
    assert body["email"] == "a@x.com"
    assert body["fullName"] == "A"
    assert body["token"]
    assert "password" not in body and "passwordHash" not in body


def test_register_duplicate_is_409(client):
    register(client)
    r = register(client, password="different")
    assert r.status_code == 409
    assert r.json()["error"]["code"] == "duplicate_user"


def test_register_validation_is_400(client):
    r = client.post("/api/auth/register", json={"email": "not-an-email", "password": "pw"})
    assert r.status_code == 400
    error = r.json()["error"]
    assert error["code"] == "validation_error"
    assert "body.email" in error["fields"]
    assert "body.fullName" in error["fields"]


def test_login_success_and_failures(client):
    register(client)
    ok = login(client)
    assert ok.status_code == 200
    assert ok.json()["fullName"] == "A"

    wrong_password = login(client, password="nope")
    unknown_email = login(client, email="ghost@x.com")
    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json()


def test_login_token_authorizes_task_routes(client):
    register(client)
    token = login(client).json()["token"]
    r = client.get("/api/tasks", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200


# Authentication on task routes


def test_task_routes_require_token(client):
    for method, path in [
        ("GET", "/api/tasks"),
        ("POST", "/api/tasks"),
        ("GET", "/api/tasks/1"),
        ("GET", "/api/tasks/status/TODO"),
        ("GET", "/api/tasks/priority/LOW"),
        ("PUT", "/api/tasks/1"),
        ("DELETE", "/api/tasks/1"),
    ]:
        r = client.request(method, path, json={"title": "t"})
        assert r.status_code == 401, (method, path)
        assert r.json()["error"]["code"] == "unauthenticated"
        assert r.headers["WWW-Authenticate"] == "Bearer"


def test_invalid_or_malformed_token_is_401(client):
    for header in ["Bearer not-a-jwt", "Basic YTpi", "Bearer", "token-without-scheme"]:
        r = client.get("/api/tasks", headers={"Authorization": header})
        assert r.status_code == 401, header


def test_token_for_unknown_account_is_401(client):
    ghost = User(id=99, email="ghost@x.com", password_hash="unused", full_name="Ghost")
    token = TokenService(TEST_SECRET).issue(ghost)
    r = client.get("/api/tasks", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401
    assert r.json()["error"]["code"] == "unauthenticated"


def test_expired_token_is_401(client):
    register(client)
    user = User(id=1, email="a@x.com", password_hash="unused", full_name="A")
    past = datetime.now(timezone.utc) - timedelta(days=2)
    token = TokenService(TEST_SECRET, clock=lambda: past).issue(user)
    r = client.get("/api/tasks", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401


def test_token_from_another_app_secret_is_401(client, settings, hasher):
    from fastapi.testclient import TestClient

    from taskmanager.app import create_app

    other = TestClient(create_app(settings.model_copy(update={"jwt_secret": None}), hasher=hasher))
    headers = auth_headers(other, "z@x.com")
    assert client.get("/api/tasks", headers=headers).status_code == 401


# Task routes


def test_create_defaults_and_representation(client):
    headers = auth_headers(client)
    task = create_task(client, headers, "t")
    assert task["status"] == "TODO"
    assert task["priority"] == "MEDIUM"
    assert set(task) == {
        "id",
        "title",
        "description",
        "status",
        "priority",
        "dueDate",
        "createdAt",
        "updatedAt",
    }


def test_create_get_roundtrip(client):
    headers = auth_headers(client)
    sent = {
        "title": "Report",
        "description": "Q3",
        "status": "IN_PROGRESS",
        "priority": "HIGH",
        "dueDate": "2030-01-02T09:30:00",
    }
    created = create_task(client, headers, **sent)
    fetched = client.get(f"/api/tasks/{created['id']}", headers=headers).json()
    assert fetched == created
    assert {k: fetched[k] for k in sent} == sent


def test_create_rejects_blank_title(client):
    headers = auth_headers(client)
    r = client.post("/api/tasks", json={"title": "  "}, headers=headers)
    assert r.status_code == 400
    assert "body.title" in r.json()["error"]["fields"]
    assert client.post("/api/tasks", json={}, headers=headers).status_code == 400


def test_create_rejects_unknown_status(client):
    headers = auth_headers(client)
    r = client.post("/api/tasks", json={"title": "t", "status": "WAITING"}, headers=headers)
    assert r.status_code == 400


def test_filters(client):
    headers = auth_headers(client)
    a = create_task(client, headers, "a", priority="HIGH")
    b = create_task(client, headers, "b", status="DONE")
    c = create_task(client, headers, "c", status="DONE", priority="HIGH")

    all_ids = [t["id"] for t in client.get("/api/tasks", headers=headers).json()]
    assert all_ids == [a["id"], b["id"], c["id"]]
    done = client.get("/api/tasks/status/DONE", headers=headers).json()
    assert [t["id"] for t in done] == [b["id"], c["id"]]
    high = client.get("/api/tasks/priority/HIGH", headers=headers).json()
    assert [t["id"] for t in high] == [a["id"], c["id"]]
    assert client.get("/api/tasks/status/IN_PROGRESS", headers=headers).json() == []
    assert client.get("/api/tasks/status/BOGUS", headers=headers).status_code == 400
    assert client.get("/api/tasks/priority/URGENT", headers=headers).status_code == 400


def test_update_partial_status_semantics(client):
    headers = auth_headers(client)
    task = create_task(client, headers, "t", description="d", status="IN_PROGRESS")

    r = client.put(f"/api/tasks/{task['id']}", json={"title": "t2"}, headers=headers)
    assert r.status_code == 200
    body = r.json()
    assert body["title"] == "t2"
    assert body["status"] == "IN_PROGRESS"
    assert body["description"] is None

    r = client.put(f"/api/tasks/{task['id']}", json={"title": "t2", "status": "DONE"}, headers=headers)
    assert r.json()["status"] == "DONE"


def test_delete(client):
    headers = auth_headers(client)
    task = create_task(client, headers)
    r = client.delete(f"/api/tasks/{task['id']}", headers=headers)
    assert r.status_code == 204
    assert r.content == b""
    assert client.delete(f"/api/tasks/{task['id']}", headers=headers).status_code == 404
    assert client.get(f"/api/tasks/{task['id']}", headers=headers).status_code == 404


def test_cross_user_isolation(client):
    alice = auth_headers(client, "a@x.com", full_name="A")
    bob = auth_headers(client, "b@x.com", full_name="B")
    task = create_task(client, alice, "secret", status="DONE", priority="HIGH")
    path = f"/api/tasks/{task['id']}"

    assert client.get("/api/tasks", headers=bob).json() == []
    assert client.get("/api/tasks/status/DONE", headers=bob).json() == []
    assert client.get("/api/tasks/priority/HIGH", headers=bob).json() == []

    foreign = client.get(path, headers=bob)
    missing = client.get("/api/tasks/99999", headers=bob)
    assert foreign.status_code == missing.status_code == 404
    assert foreign.json() == missing.json()

    assert client.put(path, json={"title": "mine"}, headers=bob).status_code == 404
    assert client.delete(path, headers=bob).status_code == 404
    assert client.get(path, headers=alice).json()["title"] == "secret"


def test_worked_example(client):
    t1 = register(client, "a@x.com", "pw", "A").json()["token"]
    t2 = login(client, "a@x.com", "pw").json()["token"]
    for token in (t1, t2):
        assert client.get("/api/tasks", headers={"Authorization": f"Bearer {token}"}).status_code == 200

    task = create_task(client, {"Authorization": f"Bearer {t1}"}, "t")
    assert (task["status"], task["priority"]) == ("TODO", "MEDIUM")

    other = auth_headers(client, "b@x.com", full_name="B")
    assert client.get(f"/api/tasks/{task['id']}", headers=other).status_code == 404


def test_task_id_out_of_range_is_400(client):
    headers = auth_headers(client)
    for path in ["/api/tasks/99999999999999999999", "/api/tasks/0", "/api/tasks/-1"]:
        for method in ("GET", "PUT", "DELETE"):
            r = client.request(method, path, json={"title": "t"}, headers=headers)
            assert r.status_code == 400, (method, path)
            assert r.json()["error"]["fields"] == ["path.task_id"]
    assert client.get("/api/tasks/9223372036854775807", headers=headers).status_code == 404
