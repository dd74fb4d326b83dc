"""
tests/integration/test_tasks.py — Integration tests for task CRUD.

Endpoints covered (url_prefix=/api/tasks, token required):
  POST   /         → 201
  GET    /         → 200
  GET    /:id      → 200 / 404
  PUT    /:id      → 200 / 404
  DELETE /:id      → 200 / 404

Ownership: another user's task is reported as TASK_NOT_FOUND (404),
never 403, so task ids cannot be probed.
"""

from __future__ import annotations

import pytest

from .conftest import auth_headers, make_task, register_and_login


FULL_TASK = {
    "title": "Quarterly report",
    "description": "Collect numbers from finance",
    "dueDate": "2026-11-01T09:30:00+00:00",
    "priority": "High",
    "status": "In-Progress",
}


@pytest.fixture
def alice(client):
    return register_and_login(client, "alice")


@pytest.fixture
def bob(client):
    return register_and_login(client, "bob")


class TestCreateTask:

    def test_round_trip_preserves_fields(self, client, alice):
        created = make_task(client, alice, **FULL_TASK)

        resp = client.get(f"/api/tasks/{created['id']}", headers=auth_headers(alice))
        assert resp.status_code == 200
        fetched = resp.get_json()

        for key, value in FULL_TASK.items():
            assert fetched[key] == value
        assert fetched["id"] == created["id"]
        assert fetched["user"] == created["user"]

    def test_defaults_for_priority_and_status(self, client, alice):
        task = make_task(client, alice, title="Minimal")
        assert task["priority"] == "Low"
        assert task["status"] == "Pending"
        assert task["description"] is None
        assert task["dueDate"] is None

    def test_owner_comes_from_token_not_body(self, client, alice, bob):
        bobs_id = make_task(client, bob)["user"]
        task = make_task(client, alice, user=bobs_id)
        assert task["user"] != bobs_id

    def test_missing_title_returns_400(self, client, alice):
        resp = client.post("/api/tasks", json={"description": "x"}, headers=auth_headers(alice))
        assert resp.status_code == 400
        assert resp.get_json()["error"]["code"] == "MISSING_FIELD"
        assert resp.get_json()["error"]["field"] == "title"

    def test_invalid_priority_returns_400(self, client, alice):
        resp = client.post(
            "/api/tasks",
            json={"title": "x", "priority": "Urgent"},
            headers=auth_headers(alice),
        )
        assert resp.status_code == 400
        assert resp.get_json()["error"]["field"] == "priority"

    def test_requires_token(self, client):
        resp = client.post("/api/tasks", json={"title": "x"})
        assert resp.status_code == 401


class TestListTasks:

    def test_lists_only_callers_tasks(self, client, alice, bob):
        make_task(client, alice, title="A1")
        make_task(client, alice, title="A2")
        make_task(client, bob, title="B1")

        resp = client.get("/api/tasks", headers=auth_headers(alice))
        assert resp.status_code == 200
        assert [t["title"] for t in resp.get_json()] == ["A1", "A2"]

    def test_empty_list(self, client, alice):
        resp = client.get("/api/tasks", headers=auth_headers(alice))
        assert resp.get_json() == []


class TestOwnershipIsolation:

    def test_other_users_task_is_not_found_on_get(self, client, alice, bob):
        task = make_task(client, alice)
        resp = client.get(f"/api/tasks/{task['id']}", headers=auth_headers(bob))
        assert resp.status_code == 404
        assert resp.get_json()["error"]["code"] == "TASK_NOT_FOUND"

    def test_other_users_task_is_not_found_on_put(self, client, alice, bob):
        task = make_task(client, alice)
        resp = client.put(
            f"/api/tasks/{task['id']}",
            json={"title": "hijacked"},
            headers=auth_headers(bob),
        )
        assert resp.status_code == 404

        unchanged = client.get(f"/api/tasks/{task['id']}", headers=auth_headers(alice))
        assert unchanged.get_json()["title"] == task["title"]

    def test_other_users_task_is_not_found_on_delete(self, client, alice, bob):
        task = make_task(client, alice)
        resp = client.delete(f"/api/tasks/{task['id']}", headers=auth_headers(bob))
        assert resp.status_code == 404

        still_there = client.get(f"/api/tasks/{task['id']}", headers=auth_headers(alice))
        assert still_there.status_code == 200


class TestUpdateTask:

    def test_partial_update_changes_only_given_fields(self, client, alice):
        task = make_task(client, alice, **FULL_TASK)
        resp = client.put(
            f"/api/tasks/{task['id']}",
            json={"status": "Completed"},
            headers=auth_headers(alice),
        )
        assert resp.status_code == 200
        updated = resp.get_json()
        assert updated["status"] == "Completed"
        assert updated["title"] == FULL_TASK["title"]
        assert updated["priority"] == FULL_TASK["priority"]

    def test_echoing_the_full_task_back_is_accepted(self, client, alice):
        task = make_task(client, alice)
        task["title"] = "Renamed"
        resp = client.put(f"/api/tasks/{task['id']}", json=task, headers=auth_headers(alice))
        assert resp.status_code == 200
        assert resp.get_json()["title"] == "Renamed"
        assert resp.get_json()["user"] == task["user"]

    def test_invalid_status_returns_400(self, client, alice):
        task = make_task(client, alice)
        resp = client.put(
            f"/api/tasks/{task['id']}",
            json={"status": "Done"},
            headers=auth_headers(alice),
        )
        assert resp.status_code == 400

    def test_blank_title_returns_400(self, client, alice):
        task = make_task(client, alice)
        resp = client.put(
            f"/api/tasks/{task['id']}",
            json={"title": "   "},
            headers=auth_headers(alice),
        )
        assert resp.status_code == 400

    def test_unknown_id_returns_404(self, client, alice):
        resp = client.put(
            "/api/tasks/does-not-exist",
            json={"title": "x"},
            headers=auth_headers(alice),
        )
        assert resp.status_code == 404


class TestDeleteTask:

    def test_delete_then_get_returns_404(self, client, alice):
        task = make_task(client, alice)
        resp = client.delete(f"/api/tasks/{task['id']}", headers=auth_headers(alice))
        assert resp.status_code == 200
        assert resp.get_json() == {"msg": "Task deleted successfully"}

        resp = client.get(f"/api/tasks/{task['id']}", headers=auth_headers(alice))
        assert resp.status_code == 404
