"""
models/revoked_token.py — RevokedToken table definition (the revocation ledger).

Each row records one logout. token_hash is the SHA-256 hex digest of the exact
bearer token string, so digest equality is token equality and the raw token is
never persisted.

token_hash is indexed but NOT unique: revoking the same token twice inserts a
second row, which is harmless because lookups are existence checks.

expires_at = created_at + REVOKED_TOKEN_TTL. Lookups ignore rows past
expires_at, which gives TTL-collection semantics whether or not the
housekeeping purge has run yet.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from taskapi.app.clock import utcnow
from taskapi.app.extensions import db


class RevokedToken(db.Model):
    __tablename__ = "revoked_tokens"

    id: Mapped[int] = mapped_column(primary_key=True)

    token_hash: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )

    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:  # pragma: no cover
        return f"<RevokedToken id={self.id} expires_at={self.expires_at}>"
