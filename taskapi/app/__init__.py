"""
app/__init__.py — Flask application factory.

Pattern: create_app(config_name) creates and returns a configured Flask app.
         Nothing is initialised at import time — this enables:
           - Multiple isolated test app instances
           - `flask db` / Alembic tooling without starting the server

Responsibilities:
  1. Load configuration from config_by_name[config_name]
  2. Initialise extensions (SQLAlchemy, Marshmallow) via init_app()
  3. Build the TokenService from config and store it on app.extensions
  4. Register route blueprints under /api
  5. Register global error handlers (AppError → JSON, Exception → 500)
  6. Register the `flask purge-expired` housekeeping command

Note on model imports:
  All model classes are imported inside create_app() so that SQLAlchemy's
  metadata is populated before Alembic or db.create_all() inspects it.
"""

from __future__ import annotations

import logging
import traceback

import click
from flask import Flask, jsonify, request
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException

from taskapi.config import config_by_name, validate_production_config


# ── Application factory ────────────────────────────────────────────────────

def create_app(config_name: str = "development") -> Flask:
    """
    Creates and returns a configured Flask application instance.

    Args:
        config_name: One of "development", "testing", "production".
                     Resolved via config_by_name in config.py.
                     Defaults to "development".
    """
    app = Flask(__name__)

    # ── Configuration ──────────────────────────────────────────────────────
    config_class = config_by_name.get(config_name, config_by_name["development"])
    app.config.from_object(config_class)

    if config_name == "production":
        validate_production_config(app)  # raises ValueError if misconfigured

    app.logger.setLevel(getattr(logging, str(app.config["LOG_LEVEL"]).upper(), logging.INFO))

    # ── Extensions ─────────────────────────────────────────────────────────
    # Import here (not at module top) to avoid circular imports.
    from taskapi.app.extensions import db, ma
    from taskapi.app.services.token_service import TokenService
    db.init_app(app)
    ma.init_app(app)

    # The signing secret is read exactly once, here.
    app.extensions["token_service"] = TokenService.from_config(app.config)

    # ── Model registration ─────────────────────────────────────────────────
    with app.app_context():
        from taskapi.app.models import (  # noqa: F401
            revoked_token,
            task,
            user,
            user_session,
        )

    _register_blueprints(app)
    _register_error_handlers(app)
    _register_cors(app)
    _register_commands(app)

    @app.route("/", methods=["GET"])
    def index():
        return "server up!", 200

    return app


def _register_blueprints(app: Flask) -> None:
    from taskapi.app.routes.tasks import tasks_bp
    from taskapi.app.routes.users import users_bp

    app.register_blueprint(users_bp, url_prefix="/api/users")
    app.register_blueprint(tasks_bp, url_prefix="/api/tasks")


def _register_error_handlers(app: Flask) -> None:
    """
    Registers global error handlers.

    Handlers:
      AppError        → structured JSON error envelope with the correct HTTP status
      ValidationError → first marshmallow field error as MISSING_FIELD /
                        INVALID_FIELD (400)
      HTTPException   → werkzeug errors (unknown route, wrong method, bad JSON)
                        in the same envelope, original status kept
      Exception       → generic INTERNAL_ERROR (500); traceback logged only

    Stack traces never leave the server.
    """
    from taskapi.app.errors import AppError, ErrorCode

    @app.errorhandler(AppError)
    def handle_app_error(error: AppError):
        return jsonify(error.to_dict()), error.http_status

    @app.errorhandler(ValidationError)
    def handle_validation_error(error: ValidationError):
        """
        Returns the FIRST field error only. Marshmallow's messages dict is
        keyed by field name (data_key where one is set).
        """
        messages = error.messages

        field = None
        message = "Invalid input."
        code = ErrorCode.INVALID_FIELD

        if isinstance(messages, dict):
            for field_name, field_errors in messages.items():
                field = field_name if field_name != "_schema" else None
                if isinstance(field_errors, list):
                    message = field_errors[0] if field_errors else "Invalid value."
                else:
                    message = str(field_errors)
                break
        elif isinstance(messages, list) and messages:
            message = str(messages[0])

        if str(message).startswith("Missing data for required field") or \
                str(message).endswith("is required."):
            code = ErrorCode.MISSING_FIELD

        body = {"error": {"code": code, "message": message}}
        if field is not None:
            body["error"]["field"] = field
        return jsonify(body), 400

    @app.errorhandler(HTTPException)
    def handle_http_exception(error: HTTPException):
        codes = {
            404: ErrorCode.ROUTE_NOT_FOUND,
            405: ErrorCode.METHOD_NOT_ALLOWED,
        }
        status = error.code or 500
        code = codes.get(status, ErrorCode.BAD_REQUEST if status < 500 else ErrorCode.INTERNAL_ERROR)
        if status == 404:
            message = f"Not Found - {request.path}"
        else:
            message = error.description or error.name
        return jsonify({"error": {"code": code, "message": message}}), status

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        app.logger.error(
            "Unhandled exception: %s\n%s",
            str(error),
            traceback.format_exc(),
        )
        return jsonify({
            "error": {
                "code": ErrorCode.INTERNAL_ERROR,
                "message": "Server error.",
            }
        }), 500


def _register_cors(app: Flask) -> None:
    """
    Adds CORS headers so the browser frontend can send credentialed requests.

    FRONTEND_URL is allowed with credentials. In DEBUG or TESTING any origin
    is reflected so local dev servers on other ports work.
    """

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        if not origin:
            return response

        allowed = origin == app.config.get("FRONTEND_URL") or bool(
            app.config.get("DEBUG") or app.config.get("TESTING")
        )
        if allowed:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Access-Control-Allow-Credentials"] = "true"
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Methods"] = "GET, POST, PUT, DELETE, OPTIONS"
            response.headers["Access-Control-Allow-Headers"] = "Authorization, Content-Type"

        return response


def _register_commands(app: Flask) -> None:

    @app.cli.command("purge-expired")
    def purge_expired_command():
        """Delete revoked-token entries and sessions whose TTL has elapsed."""
        from taskapi.app.extensions import db
        from taskapi.app.services import revocation_service, session_service

        revoked = revocation_service.purge_expired_revocations(db.session)
        sessions = session_service.purge_expired_sessions(db.session)
        db.session.commit()
        app.logger.info("Purged %d revoked tokens and %d sessions", revoked, sessions)
        click.echo(f"Purged {revoked} revoked tokens and {sessions} sessions.")
