"""
schemas/auth_schema.py — Marshmallow schemas for the user endpoints.

Validation responsibility:
  - This file: field presence, types, lengths, formats, email normalisation.
  - services/auth_service.py: USER_ALREADY_EXISTS (requires a DB lookup).

IMPORTANT: All schemas inherit from marshmallow.Schema directly.
           Do NOT use ma.Schema — it requires an active Flask app context
           and breaks unit tests. See extensions.py.

Unknown keys are dropped (EXCLUDE) so clients may send extra fields without
them ever reaching the service layer.
"""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, ValidationError, fields, post_load, validate


def _validate_non_empty_after_trim(value: str) -> None:
    if not value.strip():
        raise ValidationError("Username is required.")


# bcrypt only looks at the first 72 bytes of its input and refuses longer ones.
MAX_PASSWORD_BYTES = 72


def _validate_password_bytes(value: str) -> None:
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(
            f"Password must be at most {MAX_PASSWORD_BYTES} bytes long."
        )


class _NormalisedEmailSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    email = fields.Email(
        required=True,
        validate=validate.Length(max=255),
        error_messages={"required": "Email is required."},
    )

    @post_load
    def normalise_email(self, data: dict, **kwargs) -> dict:
        # Case-insensitive uniqueness: the store only ever sees lower case.
        data["email"] = data["email"].strip().lower()
        return data


class RegisterSchema(_NormalisedEmailSchema):
    """
    POST /api/users/register

    Field rules:
      username : required, non-blank, max 100 chars (trimmed)
      email    : valid email format, lower-cased
      password : min 6 chars, at most 72 bytes once UTF-8 encoded
      pic      : optional URL; the model default is used when absent
    """

    username = fields.Str(
        required=True,
        validate=[
            validate.Length(max=100, error="Username must be at most 100 characters."),
            _validate_non_empty_after_trim,
        ],
        error_messages={"required": "Username is required."},
    )

    password = fields.Str(
        required=True,
        load_only=True,
        validate=[
            validate.Length(min=6, error="Password must be at least 6 characters long."),
            _validate_password_bytes,
        ],
    )

    pic = fields.Url(
        required=False,
        allow_none=True,
        validate=validate.Length(max=2048),
    )

    @post_load
    def trim_username(self, data: dict, **kwargs) -> dict:
        data["username"] = data["username"].strip()
        return data


class LoginSchema(_NormalisedEmailSchema):
    """
    POST /api/users/login

    Credential correctness is checked in auth_service.py
    (INVALID_CREDENTIALS, 400).
    """

    password = fields.Str(
        required=True,
        load_only=True,
        validate=[
            validate.Length(min=1, error="Password is required."),
            _validate_password_bytes,
        ],
    )
