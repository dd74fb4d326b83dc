"""
routes/users.py — Registration, login, and logout route handlers.

Layer rules:
  - Parse request body
  - Validate with the appropriate schema (raises ValidationError on bad input)
  - Call exactly ONE service function
  - Commit the DB session (logout_user commits its own, see auth_service)
  - Set or clear auth cookies and return the JSON body

AppError propagates to the global error handler in app/__init__.py — routes
never catch it.

Endpoints (url_prefix=/api/users):
  POST   /register  → 201  {"msg"}
  POST   /login     → 200  {"token"} + http-only `token` and `sid` cookies
  POST   /logout    → 200  {"msg"}, both cookies cleared
"""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from taskapi.app.extensions import db
from taskapi.app.middleware.auth_middleware import extract_token
from taskapi.app.schemas.auth_schema import LoginSchema, RegisterSchema
from taskapi.app.services import auth_service

users_bp = Blueprint("users", __name__)


@users_bp.route("/register", methods=["POST"])
def register():
    """POST /users/register — Create account. (No auth required.)"""
    data = RegisterSchema().load(request.get_json(force=True) or {})
    auth_service.register_user(
        username=data["username"],
        email=data["email"],
        password=data["password"],
        pic=data.get("pic"),
        session=db.session,
    )
    db.session.commit()
    return jsonify({"msg": "User registered successfully"}), 201


@users_bp.route("/login", methods=["POST"])
def login():
    """POST /users/login — Authenticate; return token and set cookies. (No auth required.)"""
    data = LoginSchema().load(request.get_json(force=True) or {})
    result = auth_service.login_user(
        email=data["email"],
        password=data["password"],
        session=db.session,
    )
    db.session.commit()

    config = current_app.config
    response = jsonify({"token": result["token"]})
    for name, value, max_age in (
        (config["TOKEN_COOKIE_NAME"], result["token"], config["JWT_ACCESS_TOKEN_EXPIRES"]),
        (config["SESSION_ID_COOKIE_NAME"], result["session_id"], config["USER_SESSION_TTL"]),
    ):
        response.set_cookie(
            name,
            value,
            max_age=int(max_age.total_seconds()),
            httponly=True,
            secure=config["AUTH_COOKIE_SECURE"],
            samesite="Lax",
        )
    return response, 200


@users_bp.route("/logout", methods=["POST"])
def logout():
    """POST /users/logout — Revoke token and destroy session. (Token required, not verified.)"""
    config = current_app.config
    auth_service.logout_user(
        raw_token=extract_token(request),
        session_id=request.cookies.get(config["SESSION_ID_COOKIE_NAME"]),
        session=db.session,
    )

    response = jsonify({"msg": "Logged out successfully"})
    response.delete_cookie(config["TOKEN_COOKIE_NAME"])
    response.delete_cookie(config["SESSION_ID_COOKIE_NAME"])
    return response, 200
