# tests/test_tasks_api.py

from __future__ import annotations

import sqlite3

import pytest
from fastapi.testclient import TestClient

from task_tracker import db

OTHER_USER = {"X-User-Id": "user-b"}


def _create(client: TestClient, **body) -> dict:
    response = client.post("/api/tasks", json=body)
    assert response.status_code == 201, response.text
    return response.json()


def test_requests_without_identity_are_unauthorized(app) -> None:
    with TestClient(app) as anonymous:
        for method, kwargs in (
            ("GET", {}),
            ("POST", {"json": {"title": "t"}}),
            ("PUT", {"json": {"id": 1}}),
            ("DELETE", {"params": {"id": "1"}}),
        ):
            response = anonymous.request(method, "/api/tasks", **kwargs)
            assert response.status_code == 401
            assert response.json() == {"error": "Unauthorized"}


def test_create_returns_camel_case_record(client: TestClient) -> None:
    task = _create(
        client,
        title=" Buy milk ",
        description="",
        dueDate="2025-06-01",
        project="Home",
    )
    assert task["title"] == "Buy milk"
    assert task["description"] is None
    assert task["dueDate"] == "2025-06-01"
    assert task["priority"] == "medium"
    assert task["status"] == "pending"
    assert task["project"] == "Home"
    assert task["ownerId"] == "user-a"
    assert {"id", "createdAt", "updatedAt"} <= task.keys()


def test_create_validation_error_shape(client: TestClient) -> None:
    response = client.post("/api/tasks", json={"title": "x" * 256})
    assert response.status_code == 400
    assert response.json() == {"error": "Title must be at most 255 characters"}


def test_malformed_body_is_bad_request(client: TestClient) -> None:
    response = client.post(
        "/api/tasks",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert "error" in response.json()


def test_list_is_scoped_and_newest_first(client: TestClient) -> None:
    first = _create(client, title="first")
    second = _create(client, title="second")
    client.post("/api/tasks", json={"title": "theirs"}, headers=OTHER_USER)

    response = client.get("/api/tasks")
    assert response.status_code == 200
    assert [t["id"] for t in response.json()] == [second["id"], first["id"]]


def test_get_single_task(client: TestClient) -> None:
    task = _create(client, title="one")
    assert client.get(f"/api/tasks/{task['id']}").json()["title"] == "one"
    assert client.get(f"/api/tasks/{task['id']}", headers=OTHER_USER).status_code == 404


def test_partial_update(client: TestClient) -> None:
    task = _create(client, title="t", description="notes", priority="low")

    response = client.put("/api/tasks", json={"id": task["id"], "status": "in_progress"})
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "in_progress"
    assert body["description"] == "notes"
    assert body["priority"] == "low"

    body = client.put("/api/tasks", json={"id": task["id"], "description": None}).json()
    assert body["description"] is None
    assert body["status"] == "in_progress"


def test_update_rejects_bad_status(client: TestClient) -> None:
    task = _create(client, title="t")
    response = client.put("/api/tasks", json={"id": task["id"], "status": "done"})
    assert response.status_code == 400
    assert "Status" in response.json()["error"]


def test_update_and_delete_of_foreign_task_are_not_found(client: TestClient) -> None:
    task = _create(client, title="mine")

    response = client.put("/api/tasks", json={"id": task["id"], "title": "x"}, headers=OTHER_USER)
    assert response.status_code == 404
    assert response.json() == {"error": "Task not found"}

    response = client.delete("/api/tasks", params={"id": task["id"]}, headers=OTHER_USER)
    assert response.status_code == 404

    assert client.get(f"/api/tasks/{task['id']}").json()["title"] == "mine"


def test_delete(client: TestClient) -> None:
    task = _create(client, title="t")

    response = client.delete("/api/tasks", params={"id": str(task["id"])})
    assert response.status_code == 200
    assert response.json() == {"message": "Task deleted successfully"}
    assert client.get("/api/tasks").json() == []


@pytest.mark.parametrize(
    "params, message",
    [
        ({}, "Task ID is required"),
        ({"id": "abc"}, "Task ID must be a valid number"),
    ],
)
def test_delete_requires_numeric_id(client: TestClient, params, message) -> None:
    response = client.delete("/api/tasks", params=params)
    assert response.status_code == 400
    assert response.json() == {"error": message}


def test_persistence_failure_is_generic_500(
    client: TestClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    def broken(*args, **kwargs):
        raise sqlite3.DatabaseError("database disk image is malformed")

    monkeypatch.setattr(db, "create_task", broken)
    response = client.post("/api/tasks", json={"title": "t"})
    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}


HUGE_ID = 2**70


def test_ids_beyond_sqlite_range_are_bad_requests(client: TestClient) -> None:
    _create(client, title="t")

    response = client.put("/api/tasks", json={"id": HUGE_ID, "title": "x"})
    assert response.status_code == 400
    assert response.json() == {"error": "Task ID is out of range"}

    response = client.delete("/api/tasks", params={"id": str(HUGE_ID)})
    assert response.status_code == 400
    assert response.json() == {"error": "Task ID is out of range"}

    response = client.get(f"/api/tasks/{HUGE_ID}")
    assert response.status_code == 400
    assert "error" in response.json()


@pytest.mark.parametrize("raw", ["1_0", "٣", "+1", "1.0"])
def test_delete_id_must_be_plain_digits(client: TestClient, raw: str) -> None:
    task = _create(client, title="t")

    response = client.delete("/api/tasks", params={"id": raw})
    assert response.status_code == 400
    assert response.json() == {"error": "Task ID must be a valid number"}
    assert client.get(f"/api/tasks/{task['id']}").status_code == 200
