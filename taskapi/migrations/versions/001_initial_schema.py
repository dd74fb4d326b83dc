"""Initial schema — users, sessions, revoked tokens, tasks.

Revision: 001_initial_schema
Created:  2026-10-19

Append-only:
  This file must NEVER be edited after it has been applied to any database.
  If a schema change is required, create a NEW migration file.

Creation order:
  1. users
  2. user_sessions, revoked_tokens, tasks
  3. Indexes

ON DELETE policies:
  user_sessions.user_id → CASCADE  (session owned by user)
  tasks.user_id         → CASCADE  (tasks owned by user)
  revoked_tokens        → no FK    (keyed by token digest only)
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

# ── Alembic revision identifiers ──────────────────────────────────────────
revision: str = "001_initial_schema"
down_revision: str | None = None      # first migration — no parent
branch_labels: tuple | None = None
depends_on: tuple | None = None


def upgrade() -> None:

    # ── users ──────────────────────────────────────────────────────────────
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("pic", sa.String(2048), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("email", name="uq_users_email"),
        sa.CheckConstraint("LENGTH(TRIM(username)) > 0", name="ck_users_username_nonempty"),
        sa.CheckConstraint("email LIKE '%@%'", name="ck_users_email_format"),
    )

    # ── user_sessions ──────────────────────────────────────────────────────
    op.create_table(
        "user_sessions",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_user_sessions"),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"],
            name="fk_user_sessions_user",
            ondelete="CASCADE",
        ),
    )

    # ── revoked_tokens ─────────────────────────────────────────────────────
    # token_hash is intentionally not unique: duplicate revocations are allowed.
    op.create_table(
        "revoked_tokens",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("token_hash", sa.String(64), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_revoked_tokens"),
    )

    # ── tasks ──────────────────────────────────────────────────────────────
    op.create_table(
        "tasks",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("priority", sa.String(16), nullable=False, server_default="Low"),
        sa.Column("status", sa.String(16), nullable=False, server_default="Pending"),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.PrimaryKeyConstraint("id", name="pk_tasks"),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"],
            name="fk_tasks_user",
            ondelete="CASCADE",
        ),
        sa.CheckConstraint("LENGTH(TRIM(title)) > 0", name="ck_tasks_title_nonempty"),
        sa.CheckConstraint("priority IN ('Low', 'Medium', 'High')", name="ck_tasks_priority"),
        sa.CheckConstraint(
            "status IN ('Pending', 'In-Progress', 'Completed')",
            name="ck_tasks_status",
        ),
    )

    # ── Indexes ────────────────────────────────────────────────────────────
    op.create_index("ix_user_sessions_user_id", "user_sessions", ["user_id"])
    op.create_index("ix_user_sessions_expires_at", "user_sessions", ["expires_at"])
    op.create_index("ix_revoked_tokens_token_hash", "revoked_tokens", ["token_hash"])
    op.create_index("ix_revoked_tokens_expires_at", "revoked_tokens", ["expires_at"])
    op.create_index("ix_tasks_user_id", "tasks", ["user_id"])


def downgrade() -> None:
    """
    Drop all objects created in upgrade(), in reverse dependency order.
    Provided for local development reset only.
    """
    op.drop_index("ix_tasks_user_id", table_name="tasks")
    op.drop_index("ix_revoked_tokens_expires_at", table_name="revoked_tokens")
    op.drop_index("ix_revoked_tokens_token_hash", table_name="revoked_tokens")
    op.drop_index("ix_user_sessions_expires_at", table_name="user_sessions")
    op.drop_index("ix_user_sessions_user_id", table_name="user_sessions")

    op.drop_table("tasks")
    op.drop_table("revoked_tokens")
    op.drop_table("user_sessions")
    op.drop_table("users")
