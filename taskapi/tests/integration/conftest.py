"""
tests/integration/conftest.py — Fixtures and helpers for all integration tests.

Design:
  - Tests run through the Flask test client against create_app("testing"),
    which uses in-memory SQLite unless TEST_DATABASE_URL points elsewhere.
  - All tables are created once via db.create_all() at session start.
  - Between tests, all rows are deleted in FK-safe order so tests are isolated.

Helper functions (not fixtures) are provided for common operations:
  - register(client, ...)    → response JSON
  - login(client, ...)       → token string (cookies cleared afterwards)
  - auth_headers(token)      → {"Authorization": "Bearer <token>"}
  - make_task(client, ...)   → task dict

login() clears the cookies it set so that later requests authenticate only
with the header a test passes explicitly. Tests that exercise the cookie
transport call the endpoint directly.
"""

from __future__ import annotations

import pytest

from taskapi.app.extensions import db as _db


# ═══════════════════════════════════════════════════════════════════════════
# Session-scoped schema
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture(scope="session", autouse=True)
def database(app):
    """Creates all tables once for the session and drops them at teardown."""
    with app.app_context():
        _db.create_all()

    yield _db

    with app.app_context():
        _db.drop_all()


# ═══════════════════════════════════════════════════════════════════════════
# Function-scoped test isolation
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture(autouse=True)
def clean_tables(app):
    """Deletes all rows after every test, children before users."""
    yield

    with app.app_context():
        _db.session.rollback()  # discard any uncommitted state from a failed test

        from sqlalchemy import text
        with _db.engine.connect() as conn:
            conn.execute(text("DELETE FROM tasks"))
            conn.execute(text("DELETE FROM user_sessions"))
            conn.execute(text("DELETE FROM revoked_tokens"))
            conn.execute(text("DELETE FROM users"))
            conn.commit()


# ═══════════════════════════════════════════════════════════════════════════
# Client fixture
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def client(app):
    """Flask test client. Each test gets a fresh client and cookie jar."""
    return app.test_client()


# ═══════════════════════════════════════════════════════════════════════════
# Shared helper functions (not fixtures)
# ═══════════════════════════════════════════════════════════════════════════

def register(
    client,
    username: str = "alice",
    email: str | None = None,
    password: str = "password123",
    **extra,
) -> dict:
    if email is None:
        email = f"{username}@test.com"
    resp = client.post(
        "/api/users/register",
        json={"username": username, "email": email, "password": password, **extra},
    )
    assert resp.status_code == 201, f"register failed: {resp.get_json()}"
    return resp.get_json()


def login(client, email: str, password: str = "password123") -> str:
    """Logs in and returns the token. Leaves the client's cookie jar empty."""
    resp = client.post(
        "/api/users/login",
        json={"email": email, "password": password},
    )
    assert resp.status_code == 200, f"login failed: {resp.get_json()}"
    client.delete_cookie("token")
    client.delete_cookie("sid")
    return resp.get_json()["token"]


def register_and_login(client, username: str = "alice") -> str:
    register(client, username)
    return login(client, f"{username}@test.com")


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def make_task(client, token: str, **fields) -> dict:
    payload = {"title": "Write report", **fields}
    resp = client.post("/api/tasks", json=payload, headers=auth_headers(token))
    assert resp.status_code == 201, f"make_task failed: {resp.get_json()}"
    return resp.get_json()
