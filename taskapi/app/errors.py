"""
errors.py — AppError base class and error code registry.

Every error returned by the task API uses a code defined here.
Do not raise strings or generic exceptions from service or route code.

Rules:
  - Error codes are a versioned contract. They do not change once published.
  - Error messages are human-readable prose. They may be improved at any time.
  - Token failures are dispatched on TokenErrorKind, never on exception names.
"""

from __future__ import annotations

import enum


class AppError(Exception):

    def __init__(
            self,
            code: str,
            message: str,
            http_status: int,
            field: str | None = None,
    ) -> None:
        super().__init__(message)
        self.code        = code
        self.message     = message
        self.http_status = http_status
        self.field       = field  # which request field caused the error

    def to_dict(self) -> dict:
        payload = {
            "code":    self.code,
            "message": self.message,
        }
        if self.field is not None:
            payload["field"] = self.field
        return {"error": payload}

    def __repr__(self) -> str:
        return (
            f"AppError(code={self.code!r}, "
            f"http_status={self.http_status}, "
            f"message={self.message!r})"
        )


class TokenErrorKind(enum.Enum):
    """Why TokenService.verify() rejected a token."""

    INVALID_SIGNATURE = "invalid_signature"
    EXPIRED           = "expired"
    MALFORMED         = "malformed"


class TokenVerificationError(Exception):
    """
    Raised by TokenService.verify(). Carries a TokenErrorKind discriminant so
    callers branch on `kind` instead of inspecting the exception type.
    """

    def __init__(self, kind: TokenErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind

    def __repr__(self) -> str:
        return f"TokenVerificationError(kind={self.kind.name})"


# ── Error Code Registry ────────────────────────────────────────────────────
#
# Organised by category. HTTP status is indicated in the comment.
#
# IMPORTANT: these are the string values sent in the API response.
# Do not rename them without a major version bump.
# ──────────────────────────────────────────────────────────────────────────

class ErrorCode:

    # ── Schema / Input Errors (400) ────────────────────────────────────────
    MISSING_FIELD              = "MISSING_FIELD"
    INVALID_FIELD              = "INVALID_FIELD"

    # ── Credential Errors (400) ────────────────────────────────────────────
    # INVALID_CREDENTIALS is deliberately the same for an unknown email and
    # a wrong password.
    USER_ALREADY_EXISTS        = "USER_ALREADY_EXISTS"
    INVALID_CREDENTIALS        = "INVALID_CREDENTIALS"

    # ── Token Errors ───────────────────────────────────────────────────────
    # 401 from the authorization middleware; TOKEN_MISSING is 400 on logout.
    TOKEN_MISSING              = "TOKEN_MISSING"
    TOKEN_REVOKED              = "TOKEN_REVOKED"
    TOKEN_INVALID              = "TOKEN_INVALID"
    TOKEN_EXPIRED              = "TOKEN_EXPIRED"

    # ── Not Found Errors (404) ─────────────────────────────────────────────
    TASK_NOT_FOUND             = "TASK_NOT_FOUND"
    ROUTE_NOT_FOUND            = "ROUTE_NOT_FOUND"

    # ── HTTP Protocol Errors ───────────────────────────────────────────────
    METHOD_NOT_ALLOWED         = "METHOD_NOT_ALLOWED"     # 405
    BAD_REQUEST                = "BAD_REQUEST"            # 400, malformed JSON etc.

    # ── System Errors (500) ────────────────────────────────────────────────
    LOGOUT_FAILED              = "LOGOUT_FAILED"
    INTERNAL_ERROR             = "INTERNAL_ERROR"
