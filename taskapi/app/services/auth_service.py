"""
services/auth_service.py — Registration, login, and logout.

Responsibilities:
  - User registration and credential validation
  - Password hashing (bcrypt) and verification
  - Issuing a bearer token and a server-side session at login
  - Revoking the token and destroying the session at logout

Layer rules:
  - No imports from routes or schemas
  - No use of flask.request, flask.g, or cookies
  - current_app is used only for config values and the injected TokenService
  - Only flush, except logout_user, which commits inside its own error guard

Password storage:
  - Hashed with bcrypt (cost factor from config BCRYPT_LOG_ROUNDS, default 10)
  - At most 72 bytes once UTF-8 encoded, the most bcrypt accepts
  - Raw password is never stored, never logged, never echoed back
"""

from __future__ import annotations

import bcrypt
from flask import current_app
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from taskapi.app.errors import AppError, ErrorCode, TokenVerificationError
from taskapi.app.extensions import get_token_service
from taskapi.app.models.user import User
from taskapi.app.services import revocation_service, session_service


def _already_exists() -> AppError:
    return AppError(
        ErrorCode.USER_ALREADY_EXISTS,
        "User already exists.",
        400,
        field="email",
    )


def _invalid_credentials() -> AppError:
    # One error for unknown email and wrong password, to prevent enumeration.
    return AppError(
        ErrorCode.INVALID_CREDENTIALS,
        "Invalid credentials.",
        400,
    )


# bcrypt rejects inputs longer than this.
MAX_PASSWORD_BYTES = 72


def _password_too_long(password_bytes: bytes) -> bool:
    return len(password_bytes) > MAX_PASSWORD_BYTES


def _hash_password(password: str) -> str:
    password_bytes = password.encode("utf-8")
    if _password_too_long(password_bytes):
        raise AppError(
            ErrorCode.INVALID_FIELD,
            f"Password must be at most {MAX_PASSWORD_BYTES} bytes long.",
            400,
            field="password",
        )
    rounds = current_app.config.get("BCRYPT_LOG_ROUNDS", 10)
    return bcrypt.hashpw(
        password_bytes,
        bcrypt.gensalt(rounds=rounds),
    ).decode("utf-8")


# ── Public service functions ───────────────────────────────────────────────

def register_user(
        username: str,
        email: str,
        password: str,
        session: Session,
        pic: str | None = None,
) -> User:
    """
    Creates a new user account.

    `email` must already be normalised (the schema lower-cases it).

    Raises:
      AppError(USER_ALREADY_EXISTS, 400) — email already registered, including
        when a concurrent registration wins the UNIQUE(email) race.
    """
    existing = session.execute(
        select(User).where(User.email == email)
    ).scalar_one_or_none()
    if existing is not None:
        raise _already_exists()

    user = User(
        username=username,
        email=email,
        password_hash=_hash_password(password),
    )
    if pic:
        user.pic = pic

    session.add(user)
    try:
        session.flush()
    except IntegrityError as exc:
        session.rollback()
        raise _already_exists() from exc

    current_app.logger.info("Registered user %s", user.id)
    return user


def login_user(
        email: str,
        password: str,
        session: Session,
) -> dict:
    """
    Validates credentials, issues a token, and opens a server-side session.

    Raises:
      AppError(INVALID_CREDENTIALS, 400) — email not found or password wrong.

    Returns: {"token": "...", "session_id": "...", "user_id": "..."}
    """
    user = session.execute(
        select(User).where(User.email == email)
    ).scalar_one_or_none()

    # bcrypt.checkpw does the comparison in constant time. A password too
    # long to have been registered cannot match.
    password_bytes = password.encode("utf-8")
    if user is None or _password_too_long(password_bytes) or not bcrypt.checkpw(
            password_bytes,
            user.password_hash.encode("utf-8"),
    ):
        current_app.logger.warning("Rejected login attempt")
        raise _invalid_credentials()

    token = get_token_service().issue(user.id, user.pic)
    session_id = session_service.create_session(
        user.id,
        ttl=current_app.config["USER_SESSION_TTL"],
        session=session,
    )

    current_app.logger.info("User %s logged in", user.id)
    return {
        "token": token,
        "session_id": session_id,
        "user_id": user.id,
    }


def logout_user(
        raw_token: str | None,
        session_id: str | None,
        session: Session,
) -> None:
    """
    Revokes the token, destroys the server-side session, and commits both.

    The token does not have to be valid to be revoked. The session is only
    destroyed when the token carries our signature and names the session's
    owner, so a stray `sid` cookie cannot end another user's session.

    Unlike the other service functions this one commits: a failed commit
    must surface as LOGOUT_FAILED, not as a generic server error.

    Raises:
      AppError(TOKEN_MISSING, 400) — no token supplied.
      AppError(LOGOUT_FAILED, 500) — the ledger insert, session delete, or
        commit failed. Nothing is persisted in that case.
    """
    if not raw_token:
        raise AppError(
            ErrorCode.TOKEN_MISSING,
            "No token provided.",
            400,
        )

    owner_id = _token_owner(raw_token)

    try:
        revocation_service.revoke_token(
            raw_token,
            ttl=current_app.config["REVOKED_TOKEN_TTL"],
            session=session,
        )
        if session_id and owner_id:
            session_service.destroy_session(session_id, user_id=owner_id, session=session)
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        current_app.logger.error("Logout failed: %s", exc)
        raise AppError(
            ErrorCode.LOGOUT_FAILED,
            "Unable to log out.",
            500,
        ) from exc

    current_app.logger.info("Token revoked at logout")


def _token_owner(raw_token: str) -> str | None:
    try:
        return get_token_service().verify(raw_token, allow_expired=True).user_id
    except TokenVerificationError:
        return None
