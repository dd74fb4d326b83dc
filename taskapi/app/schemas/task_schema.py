"""
schemas/task_schema.py — Marshmallow schemas for the task endpoints.

Request bodies use the API's camelCase keys (dueDate); loaded dicts use the
model's attribute names (due_date). Ownership fields such as `user` or `id`
are never accepted from the body: unknown keys are excluded.

IMPORTANT: Inherits from marshmallow.Schema directly — never ma.Schema.
"""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, ValidationError, fields, validate

from taskapi.app.models.task import PRIORITIES, STATUSES


def _validate_non_empty_after_trim(value: str) -> None:
    if not value.strip():
        raise ValidationError("Title must not be blank.")


class TaskSchema(Schema):
    """
    POST /api/tasks      (load with TaskSchema())
    PUT  /api/tasks/:id  (load with TaskSchema(partial=True))
    """

    class Meta:
        unknown = EXCLUDE

    title = fields.Str(
        required=True,
        validate=[
            validate.Length(min=1, max=255),
            _validate_non_empty_after_trim,
        ],
    )

    description = fields.Str(allow_none=True, validate=validate.Length(max=10000))

    due_date = fields.DateTime(data_key="dueDate", allow_none=True)

    priority = fields.Str(
        validate=validate.OneOf(PRIORITIES, error="Priority must be one of: {choices}."),
    )

    status = fields.Str(
        validate=validate.OneOf(STATUSES, error="Status must be one of: {choices}."),
    )
