# tests/test_api.py

import pytest

from taskboard.errors import StorageError


# ---------- auth ----------
def test_register_login_and_use_token(client) -> None:
    resp = client.post("/api/auth/register", json={"username": "alice", "password": "secret1"})
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["token"]
    assert set(body["user"]) == {"id", "username", "createdAt"}
    assert body["user"]["username"] == "alice"

    resp = client.post("/api/auth/login", json={"username": "alice", "password": "wrong"})
    assert resp.status_code == 401
    assert resp.get_json() == {"error": "Invalid credentials"}

    resp = client.post("/api/auth/login", json={"username": "alice", "password": "secret1"})
    assert resp.status_code == 200
    token = resp.get_json()["token"]
    assert resp.get_json()["user"]["id"] == body["user"]["id"]

    resp = client.get("/api/tasks", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    assert resp.get_json() == []


def test_register_same_username_twice_conflicts(client, register) -> None:
    register("bob")
    resp = client.post("/api/auth/register", json={"username": "bob", "password": "other12"})
    assert resp.status_code == 409
    assert resp.get_json() == {"error": "Username already exists"}


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"username": "alice"},
        {"password": "secret1"},
        {"username": "", "password": "secret1"},
        {"username": 123, "password": "secret1"},
        {"username": "al", "password": "secret1"},
        {"username": "alice", "password": "short"},
        {"username": "bad name", "password": "secret1"},
        {"username": "a" * 51, "password": "secret1"},
        {"username": "alice", "password": "p" * 101},
    ],
)
def test_register_rejects_bad_input(client, payload) -> None:
    resp = client.post("/api/auth/register", json=payload)
    assert resp.status_code == 400
    assert "error" in resp.get_json()


def test_register_without_json_body(client) -> None:
    resp = client.post("/api/auth/register", data="username=alice", content_type="text/plain")
    assert resp.status_code == 400


def test_login_missing_fields_and_unknown_user(client) -> None:
    assert client.post("/api/auth/login", json={"username": "alice"}).status_code == 400
    resp = client.post("/api/auth/login", json={"username": "ghost", "password": "secret1"})
    assert resp.status_code == 401
    assert resp.get_json() == {"error": "Invalid credentials"}


def test_seeded_demo_user_can_log_in(client) -> None:
    resp = client.post("/api/auth/login", json={"username": "defaultuser", "password": "password123"})
    assert resp.status_code == 200
    token = resp.get_json()["token"]

    tasks = client.get("/api/tasks", headers={"Authorization": f"Bearer {token}"}).get_json()
    assert [t["title"] for t in tasks] == ["Sample Task"]


# ---------- middleware ----------
@pytest.mark.parametrize("header", [None, "", "Bearer", "Bearer ", "Basic abc", "token abc"])
def test_missing_token_is_401(client, header) -> None:
    headers = {} if header is None else {"Authorization": header}
    resp = client.get("/api/tasks", headers=headers)
    assert resp.status_code == 401
    assert resp.get_json() == {"error": "Access token required"}


def test_invalid_token_is_403(client) -> None:
    resp = client.get("/api/tasks", headers={"Authorization": "Bearer not.a.token"})
    assert resp.status_code == 403
    assert resp.get_json() == {"error": "Invalid or expired token"}


def test_token_for_unknown_user_is_401(app, client) -> None:
    token = app.extensions["taskboard"].tokens.issue("does-not-exist")
    resp = client.get("/api/tasks", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401
    assert resp.get_json() == {"error": "Invalid token - user not found"}


# ---------- tasks ----------
def test_task_crud(client, register) -> None:
    headers, user = register("alice")

    resp = client.post("/api/tasks", json={"title": "  Buy milk ", "description": "2 liters"}, headers=headers)
    assert resp.status_code == 201
    task = resp.get_json()
    assert task["title"] == "Buy milk"
    assert task["description"] == "2 liters"
    assert task["status"] == "pending"
    assert task["userId"] == user["id"]
    assert task["createdAt"] == task["updatedAt"]

    resp = client.put(f"/api/tasks/{task['id']}", json={"status": "completed"}, headers=headers)
    assert resp.status_code == 200
    updated = resp.get_json()
    assert updated["status"] == "completed"
    assert updated["title"] == "Buy milk"
    assert updated["createdAt"] == task["createdAt"]

    assert client.get("/api/tasks", headers=headers).get_json() == [updated]

    resp = client.delete(f"/api/tasks/{task['id']}", headers=headers)
    assert resp.status_code == 200
    assert resp.get_json()["id"] == task["id"]
    assert client.get("/api/tasks", headers=headers).get_json() == []


def test_create_task_with_status_and_no_description(client, register) -> None:
    headers, _ = register("alice")
    resp = client.post("/api/tasks", json={"title": "Done already", "status": "completed"}, headers=headers)
    assert resp.status_code == 201
    assert resp.get_json()["status"] == "completed"
    assert resp.get_json()["description"] == ""


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"title": ""},
        {"title": "   "},
        {"title": 5},
        {"title": "x" * 101},
        {"title": "ok", "status": "archived"},
        {"title": "ok", "description": ["not", "a", "string"]},
        {"title": "ok", "description": "d" * 501},
    ],
)
def test_create_task_rejects_bad_input(client, register, payload) -> None:
    headers, _ = register("alice")
    resp = client.post("/api/tasks", json=payload, headers=headers)
    assert resp.status_code == 400
    assert "error" in resp.get_json()


def test_update_with_empty_body_keeps_fields(client, register) -> None:
    headers, _ = register("alice")
    task = client.post("/api/tasks", json={"title": "Keep"}, headers=headers).get_json()

    resp = client.put(f"/api/tasks/{task['id']}", json={}, headers=headers)
    assert resp.status_code == 200
    body = resp.get_json()
    assert (body["title"], body["description"], body["status"]) == ("Keep", "", "pending")
    assert body["updatedAt"] >= task["updatedAt"]


def test_update_rejects_bad_fields(client, register) -> None:
    headers, _ = register("alice")
    task = client.post("/api/tasks", json={"title": "Keep"}, headers=headers).get_json()

    assert client.put(f"/api/tasks/{task['id']}", json={"title": ""}, headers=headers).status_code == 400
    assert client.put(f"/api/tasks/{task['id']}", json={"status": "nope"}, headers=headers).status_code == 400


def test_missing_task_is_404(client, register) -> None:
    headers, _ = register("alice")
    assert client.put("/api/tasks/9999", json={"title": "x"}, headers=headers).status_code == 404
    resp = client.delete("/api/tasks/9999", headers=headers)
    assert resp.status_code == 404
    assert resp.get_json() == {"error": "Task not found"}


def test_tasks_are_scoped_to_their_owner(client, register) -> None:
    alice, _ = register("alice")
    bob, _ = register("bob_2")

    task = client.post("/api/tasks", json={"title": "Alice only"}, headers=alice).get_json()

    assert task["id"] not in [t["id"] for t in client.get("/api/tasks", headers=bob).get_json()]
    assert client.put(f"/api/tasks/{task['id']}", json={"title": "mine now"}, headers=bob).status_code == 404
    assert client.delete(f"/api/tasks/{task['id']}", headers=bob).status_code == 404

    still = client.get("/api/tasks", headers=alice).get_json()
    assert [t["title"] for t in still] == ["Alice only"]


def test_task_ids_keep_increasing(client, register) -> None:
    headers, _ = register("alice")
    ids = [client.post("/api/tasks", json={"title": f"t{i}"}, headers=headers).get_json()["id"]
           for i in range(3)]
    assert [int(i) for i in ids] == sorted(int(i) for i in ids)
    assert len(set(ids)) == 3
    # the seeded sample task owns id 1
    assert "1" not in ids


# ---------- misc ----------
def test_health_and_index(client) -> None:
    assert client.get("/").get_json() == {"message": "Task Manager API is running!"}
    body = client.get("/health").get_json()
    assert body["status"] == "OK"
    assert body["timestamp"]


def test_unknown_route_has_json_error(client) -> None:
    resp = client.get("/api/nope")
    assert resp.status_code == 404
    assert "error" in resp.get_json()

    resp = client.patch("/api/tasks")
    assert resp.status_code == 405
    assert "error" in resp.get_json()


def test_storage_failure_is_generic_500(app, client, register, monkeypatch) -> None:
    headers, _ = register("alice")

    def broken(user_id):
        raise StorageError("disk on fire")

    monkeypatch.setattr(app.extensions["taskboard"].tasks, "get_by_user", broken)
    resp = client.get("/api/tasks", headers=headers)
    assert resp.status_code == 500
    assert resp.get_json() == {"error": "Internal server error"}


def test_login_does_not_trim_username(client, register) -> None:
    register("alice")
    resp = client.post("/api/auth/login", json={"username": "alice ", "password": "secret1"})
    assert resp.status_code == 401


def test_description_is_stored_as_sent(client, register) -> None:
    headers, _ = register("alice")
    task = client.post("/api/tasks", json={"title": "t", "description": "  indented\n"}, headers=headers).get_json()
    assert task["description"] == "  indented\n"

    resp = client.put(f"/api/tasks/{task['id']}", json={"description": " x "}, headers=headers)
    assert resp.get_json()["description"] == " x "
