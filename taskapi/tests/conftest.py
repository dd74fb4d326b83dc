"""
tests/conftest.py — Fixtures shared by unit and integration tests.

create_app("testing") never touches the database on its own, so unit tests
can use the `app` fixture for an application context (config values, logger,
the injected TokenService) without needing tables.
"""

from __future__ import annotations

import pytest

from taskapi.app import create_app


@pytest.fixture(scope="session")
def app():
    """The Flask application in 'testing' mode, created once per session."""
    return create_app("testing")


@pytest.fixture
def token_service(app):
    return app.extensions["token_service"]
