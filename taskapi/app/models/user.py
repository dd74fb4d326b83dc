"""
models/user.py — User table definition (the credential store).

No business logic. No imports from services or routes.
Email is stored lower-cased; the UNIQUE constraint is what decides a race
between two concurrent registrations for the same address.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from taskapi.app.clock import utcnow
from taskapi.app.extensions import db
from taskapi.config import DEFAULT_PROFILE_PIC


def _new_id() -> str:
    return str(uuid.uuid4())


class User(db.Model):
    __tablename__ = "users"

    __table_args__ = (
        # Also enforced by the marshmallow schema.
        CheckConstraint(
            "LENGTH(TRIM(username)) > 0",
            name="ck_users_username_nonempty",
        ),
        CheckConstraint(
            "email LIKE '%@%'",
            name="ck_users_email_format",
        ),
    )

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=_new_id,
    )

    username: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
    )

    # bcrypt digest. The raw password is never stored.
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    pic: Mapped[str] = mapped_column(
        String(2048),
        nullable=False,
        default=DEFAULT_PROFILE_PIC,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
    )

    # ── Relationships ──────────────────────────────────────────────────────

    sessions: Mapped[list["UserSession"]] = relationship(  # noqa: F821
        "UserSession",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    tasks: Mapped[list["Task"]] = relationship(  # noqa: F821
        "Task",
        back_populates="owner",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:  # pragma: no cover
        return f"<User id={self.id} email={self.email!r}>"
