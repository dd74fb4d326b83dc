"""
extensions.py — Flask extension singletons.

Initialises SQLAlchemy and marshmallow as module-level objects so they can be
imported anywhere without creating circular dependencies.

Pattern:
    1. Create the extension object here (no app attached yet).
    2. Call init_app(app) inside the app factory in app/__init__.py.
    3. Import `db` or `ma` from here wherever needed.

    from taskapi.app.extensions import db, ma

The TokenService is not a module-level singleton: it holds the signing
secret, so create_app() builds it from config and stores it on
app.extensions["token_service"]. Use get_token_service() to reach it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from flask import current_app
from flask_marshmallow import Marshmallow
from flask_sqlalchemy import SQLAlchemy

if TYPE_CHECKING:
    from taskapi.app.services.token_service import TokenService

db = SQLAlchemy()

# Marshmallow instance, initialised with the app.
#
# IMPORTANT — schema inheritance rule:
#   All validation Schema classes (in app/schemas/) inherit from
#   marshmallow.Schema directly, NOT from ma.Schema.
#
#   ma.Schema requires an active Flask application context; the unit tests
#   in tests/unit/ load schemas without one.
ma = Marshmallow()


def get_token_service() -> "TokenService":
    """Returns the TokenService bound to the current app."""
    return current_app.extensions["token_service"]
