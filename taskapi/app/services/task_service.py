"""
services/task_service.py — Task CRUD scoped to the owning user.

Every lookup filters on both task id and owner, so another user's task is
indistinguishable from a missing one: both raise TASK_NOT_FOUND (404).

Layer rules:
  - No Flask imports. Pure Python with a SQLAlchemy session parameter.
  - Commits are the route's responsibility — only flush here.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from taskapi.app.clock import isoformat_utc
from taskapi.app.errors import AppError, ErrorCode
from taskapi.app.models.task import Task


_UPDATABLE_FIELDS = ("title", "description", "due_date", "priority", "status")


# ── Private helpers ────────────────────────────────────────────────────────

def _get_owned_task_or_404(task_id: str, user_id: str, session: Session) -> Task:
    task = session.execute(
        select(Task).where(Task.id == task_id, Task.user_id == user_id)
    ).scalar_one_or_none()
    if task is None:
        raise AppError(
            ErrorCode.TASK_NOT_FOUND,
            "Task not found.",
            404,
        )
    return task


def _build_task_dict(task: Task) -> dict:
    """Serialises a Task to the API's camelCase shape. No business logic."""
    return {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "dueDate": isoformat_utc(task.due_date),
        "priority": task.priority,
        "status": task.status,
        "user": task.user_id,
        "createdAt": isoformat_utc(task.created_at),
        "updatedAt": isoformat_utc(task.updated_at),
    }


# ── Public service functions ───────────────────────────────────────────────

def create_task(user_id: str, fields: dict, session: Session) -> dict:
    """
    Creates a task owned by user_id.

    Args:
        fields: validated schema output (title, and optionally description,
                due_date, priority, status). Ownership always comes from user_id.
    """
    task = Task(user_id=user_id, **{k: v for k, v in fields.items() if k in _UPDATABLE_FIELDS})
    session.add(task)
    session.flush()
    return _build_task_dict(task)


def list_tasks(user_id: str, session: Session) -> list[dict]:
    """Returns the caller's tasks, oldest first."""
    tasks = session.execute(
        select(Task)
        .where(Task.user_id == user_id)
        .order_by(Task.created_at.asc())
    ).scalars().all()
    return [_build_task_dict(t) for t in tasks]


def get_task(task_id: str, user_id: str, session: Session) -> dict:
    return _build_task_dict(_get_owned_task_or_404(task_id, user_id, session))


def update_task(task_id: str, user_id: str, changes: dict, session: Session) -> dict:
    """
    Applies a partial update. Only keys present in `changes` are touched.

    Raises:
      AppError(TASK_NOT_FOUND, 404) — missing or owned by someone else.
    """
    task = _get_owned_task_or_404(task_id, user_id, session)
    for key in _UPDATABLE_FIELDS:
        if key in changes:
            setattr(task, key, changes[key])
    session.flush()
    return _build_task_dict(task)


def delete_task(task_id: str, user_id: str, session: Session) -> None:
    task = _get_owned_task_or_404(task_id, user_id, session)
    session.delete(task)
    session.flush()
