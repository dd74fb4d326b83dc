"""
services/session_service.py — Server-side session store.

A session maps the opaque id in the `sid` cookie to the user who logged in.
It is created next to the bearer token at login and destroyed at logout.

The session never authenticates a request by itself; the bearer token does.
A session is only ever destroyed on behalf of the user it belongs to.
"""

from __future__ import annotations

import secrets
from datetime import timedelta

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from taskapi.app.clock import utcnow
from taskapi.app.models.user_session import UserSession


def create_session(user_id: str, ttl: timedelta, session: Session) -> str:
    """Creates a session for user_id and returns its id (the cookie value)."""
    now = utcnow()
    session_id = secrets.token_urlsafe(32)
    session.add(
        UserSession(
            id=session_id,
            user_id=user_id,
            created_at=now,
            expires_at=now + ttl,
        )
    )
    session.flush()
    return session_id


def get_active_session(session_id: str, session: Session) -> UserSession | None:
    """Returns the session if it exists and has not expired, else None."""
    stmt = select(UserSession).where(
        UserSession.id == session_id,
        UserSession.expires_at > utcnow(),
    )
    return session.execute(stmt).scalar_one_or_none()


def destroy_session(session_id: str, user_id: str, session: Session) -> bool:
    """
    Deletes the session if it belongs to user_id. Returns False if there was
    nothing to delete, including when the session is someone else's.
    """
    result = session.execute(
        delete(UserSession).where(
            UserSession.id == session_id,
            UserSession.user_id == user_id,
        )
    )
    return bool(result.rowcount)


def purge_expired_sessions(session: Session) -> int:
    result = session.execute(
        delete(UserSession)
        .where(UserSession.expires_at <= utcnow())
        .execution_options(synchronize_session=False)
    )
    return result.rowcount or 0
