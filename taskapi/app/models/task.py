"""
models/task.py — Task table definition.

No business logic. No imports from services or routes.
priority and status are plain strings guarded by CHECK constraints so the
same schema works on PostgreSQL and on the SQLite test database.

FK policy: user_id ON DELETE CASCADE — tasks are owned by their user.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from taskapi.app.clock import utcnow
from taskapi.app.extensions import db


PRIORITIES = ("Low", "Medium", "High")
STATUSES = ("Pending", "In-Progress", "Completed")


def _in_list(column: str, values: tuple[str, ...]) -> str:
    quoted = ", ".join(f"'{v}'" for v in values)
    return f"{column} IN ({quoted})"


class Task(db.Model):
    __tablename__ = "tasks"

    __table_args__ = (
        CheckConstraint(
            "LENGTH(TRIM(title)) > 0",
            name="ck_tasks_title_nonempty",
        ),
        CheckConstraint(
            _in_list("priority", PRIORITIES),
            name="ck_tasks_priority",
        ),
        CheckConstraint(
            _in_list("status", STATUSES),
            name="ck_tasks_status",
        ),
    )

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    due_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    priority: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default="Low",
        server_default="Low",
    )

    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default="Pending",
        server_default="Pending",
    )

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

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
    )

    # ── Relationships ──────────────────────────────────────────────────────

    owner: Mapped["User"] = relationship(  # noqa: F821
        "User",
        back_populates="tasks",
    )

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Task id={self.id} title={self.title!r} status={self.status}>"
