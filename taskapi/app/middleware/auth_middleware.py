"""
middleware/auth_middleware.py — Bearer token authorization decorator.

The @require_auth decorator runs, in order, stopping at the first failure:
  1. Extract the candidate token: the `token` cookie first, else an
     "Authorization: Bearer <token>" header.
  2. Reject it if the revocation ledger lists it.
  3. Verify signature and expiry with the app's TokenService.
  4. Attach the identity to flask.g (user_id, user_pic, identity).

Server-side sessions:
  The bearer token is the only credential that authenticates a request. The
  `sid` cookie is not consulted here; a session cookie alone never gets a
  request through. Sessions matter only at logout (services/auth_service.py).

Error codes (all 401, response body carries only the code and a message):
  TOKEN_MISSING  — no cookie and no usable Authorization header
  TOKEN_REVOKED  — token was logged out
  TOKEN_EXPIRED  — signature valid but exp has passed
  TOKEN_INVALID  — bad signature, malformed token, or missing identity claim
"""

from __future__ import annotations

import functools
from typing import Callable

from flask import Request, current_app, g, request

from taskapi.app.errors import AppError, ErrorCode, TokenErrorKind, TokenVerificationError
from taskapi.app.extensions import db, get_token_service
from taskapi.app.services import revocation_service


def extract_token(req: Request) -> str | None:
    """
    Returns the candidate token from the request, or None.

    The cookie wins over the header when both are present.
    """
    cookie_token = req.cookies.get(current_app.config["TOKEN_COOKIE_NAME"])
    if cookie_token:
        return cookie_token

    auth_header = req.headers.get("Authorization", "")
    parts = auth_header.split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    return None


def require_auth(f: Callable) -> Callable:
    """
    Route decorator that enforces token authentication.

    Raises AppError for all auth failures — the global error handler converts
    these to the JSON error envelope. Routes never catch AppError.

    Usage:
        @tasks_bp.route("/", methods=["GET"])
        @require_auth
        def list_tasks():
            user_id = g.user_id
            ...
    """
    @functools.wraps(f)
    def decorated(*args, **kwargs):
        _authenticate_request()
        return f(*args, **kwargs)

    return decorated


def _authenticate_request() -> None:
    """
    Performs the full authorization sequence and populates flask.g.

    Separated from the decorator wrapper so tests can call it inside a
    test_request_context without a real view function.
    """
    # ── Step 1: Extract ───────────────────────────────────────────────────
    raw_token = extract_token(request)
    if raw_token is None:
        raise AppError(
            ErrorCode.TOKEN_MISSING,
            "No token, authorization denied.",
            401,
        )

    # ── Step 2: Revocation ledger ─────────────────────────────────────────
    if revocation_service.is_token_revoked(raw_token, session=db.session):
        raise AppError(
            ErrorCode.TOKEN_REVOKED,
            "Token has been revoked, authorization denied.",
            401,
        )

    # ── Step 3: Signature and expiry ──────────────────────────────────────
    try:
        identity = get_token_service().verify(raw_token)
    except TokenVerificationError as exc:
        if exc.kind is TokenErrorKind.EXPIRED:
            raise AppError(
                ErrorCode.TOKEN_EXPIRED,
                "Token has expired. Log in again to obtain a new one.",
                401,
            ) from exc
        raise AppError(
            ErrorCode.TOKEN_INVALID,
            "Token is not valid.",
            401,
        ) from exc

    # ── Step 4: Attach identity ───────────────────────────────────────────
    g.identity = identity
    g.user_id = identity.user_id
    g.user_pic = identity.pic
