"""
routes/tasks.py — Task route handlers.

Layer rules:
  - Parse, validate, call ONE service, commit, return JSON.
  - No business logic. No DB queries.

Endpoints (url_prefix=/api/tasks, all require a token):
  POST   /tasks        → 201  create task
  GET    /tasks        → 200  list caller's tasks
  GET    /tasks/:id    → 200  get task
  PUT    /tasks/:id    → 200  partial update
  DELETE /tasks/:id    → 200  delete task
"""

from __future__ import annotations

from flask import Blueprint, g, jsonify, request

from taskapi.app.extensions import db
from taskapi.app.middleware.auth_middleware import require_auth
from taskapi.app.schemas.task_schema import TaskSchema
from taskapi.app.services import task_service

tasks_bp = Blueprint("tasks", __name__)


@tasks_bp.route("", methods=["POST"])
@require_auth
def create_task():
    """POST /tasks — Create a task owned by the caller."""
    data = TaskSchema().load(request.get_json(force=True) or {})
    result = task_service.create_task(
        user_id=g.user_id,
        fields=data,
        session=db.session,
    )
    db.session.commit()
    return jsonify(result), 201


@tasks_bp.route("", methods=["GET"])
@require_auth
def list_tasks():
    """GET /tasks — List the caller's tasks."""
    result = task_service.list_tasks(
        user_id=g.user_id,
        session=db.session,
    )
    return jsonify(result), 200


@tasks_bp.route("/<task_id>", methods=["GET"])
@require_auth
def get_task(task_id: str):
    """GET /tasks/:id — Get one of the caller's tasks."""
    result = task_service.get_task(
        task_id=task_id,
        user_id=g.user_id,
        session=db.session,
    )
    return jsonify(result), 200


@tasks_bp.route("/<task_id>", methods=["PUT"])
@require_auth
def update_task(task_id: str):
    """PUT /tasks/:id — Update fields present in the body."""
    data = TaskSchema(partial=True).load(request.get_json(force=True) or {})
    result = task_service.update_task(
        task_id=task_id,
        user_id=g.user_id,
        changes=data,
        session=db.session,
    )
    db.session.commit()
    return jsonify(result), 200


@tasks_bp.route("/<task_id>", methods=["DELETE"])
@require_auth
def delete_task(task_id: str):
    """DELETE /tasks/:id — Delete one of the caller's tasks."""
    task_service.delete_task(
        task_id=task_id,
        user_id=g.user_id,
        session=db.session,
    )
    db.session.commit()
    return jsonify({"msg": "Task deleted successfully"}), 200
