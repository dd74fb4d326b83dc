"""
services/revocation_service.py — Revocation ledger for bearer tokens.

A token listed here must never be accepted by the authorization middleware,
even when its own signature and exp claim are still valid.

Storage:
  - Tokens are stored as SHA-256 hex digests (see models/revoked_token.py).
  - Entries carry expires_at = now + ttl. Lookups skip expired entries, so an
    entry stops blocking once its TTL has elapsed whether or not
    purge_expired_revocations() has removed it yet.

Layer rules:
  - No Flask imports. Commits are the route's responsibility — only flush here.
"""

from __future__ import annotations

import hashlib
from datetime import timedelta

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from taskapi.app.clock import utcnow
from taskapi.app.models.revoked_token import RevokedToken


def hash_token(raw_token: str) -> str:
    """SHA-256 hex digest of a raw token string."""
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()


def revoke_token(raw_token: str, ttl: timedelta, session: Session) -> None:
    """
    Adds the token to the ledger. Revoking an already-revoked token adds a
    second entry, which is harmless.
    """
    now = utcnow()
    session.add(
        RevokedToken(
            token_hash=hash_token(raw_token),
            created_at=now,
            expires_at=now + ttl,
        )
    )
    session.flush()


def is_token_revoked(raw_token: str, session: Session) -> bool:
    """True if a live (not yet expired) ledger entry exists for this exact token."""
    stmt = (
        select(RevokedToken.id)
        .where(
            RevokedToken.token_hash == hash_token(raw_token),
            RevokedToken.expires_at > utcnow(),
        )
        .limit(1)
    )
    return session.execute(stmt).first() is not None


def purge_expired_revocations(session: Session) -> int:
    """Deletes ledger entries whose TTL has elapsed. Returns the number removed."""
    result = session.execute(
        delete(RevokedToken)
        .where(RevokedToken.expires_at <= utcnow())
        .execution_options(synchronize_session=False)
    )
    return result.rowcount or 0
