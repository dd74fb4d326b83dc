"""
models/user_session.py — UserSession table definition (server-side sessions).

The primary key is the opaque session id delivered in the `sid` cookie.
Created at login, deleted at logout. Rows past expires_at are treated as
absent by every lookup.

FK policy: user_id ON DELETE CASCADE — a session is owned by its user.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from taskapi.app.clock import utcnow
from taskapi.app.extensions import db


class UserSession(db.Model):
    __tablename__ = "user_sessions"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)

    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
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

    # ── Relationships ──────────────────────────────────────────────────────

    user: Mapped["User"] = relationship(  # noqa: F821
        "User",
        back_populates="sessions",
    )

    def __repr__(self) -> str:  # pragma: no cover
        return f"<UserSession user_id={self.user_id} expires_at={self.expires_at}>"
