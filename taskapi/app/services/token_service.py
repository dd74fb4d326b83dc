"""
services/token_service.py — Signed bearer token issuance and verification.

Token design:
  - JWT, HS256, signed with JWT_SECRET_KEY.
  - Payload: {"user": {"id": <user id>, "pic": <profile picture url>},
              "iat": <issued at>, "exp": <iat + 4h>, "jti": <random hex>}
  - jti only makes two tokens issued in the same second differ, so logging
    out of one login never revokes another.

The service is stateless. It keeps no record of issued tokens and does NOT
consult the revocation ledger; checking revocation is the caller's job
(see middleware/auth_middleware.py).

The secret is injected once at construction by create_app() and never
changes for the lifetime of the process.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Mapping

import jwt

from taskapi.app.clock import utcnow
from taskapi.app.errors import TokenErrorKind, TokenVerificationError


@dataclass(frozen=True)
class IdentityClaim:
    """The identity recovered from a verified token."""

    user_id: str
    pic: str | None
    issued_at: datetime
    expires_at: datetime


class TokenService:

    def __init__(
            self,
            secret: str,
            ttl: timedelta,
            algorithm: str = "HS256",
    ) -> None:
        if not secret:
            raise ValueError("TokenService requires a non-empty signing secret.")
        self._secret = secret
        self._algorithm = algorithm
        self.ttl = ttl

    @classmethod
    def from_config(cls, config: Mapping) -> "TokenService":
        return cls(
            secret=config["JWT_SECRET_KEY"],
            ttl=config["JWT_ACCESS_TOKEN_EXPIRES"],
            algorithm=config.get("JWT_ALGORITHM", "HS256"),
        )

    def issue(
            self,
            user_id: str,
            pic: str | None,
            now: datetime | None = None,
    ) -> str:
        """
        Returns a signed token for the given identity.

        `now` overrides the issuance time; callers other than tests leave it
        unset.
        """
        issued_at = now or utcnow()
        payload = {
            "user": {"id": str(user_id), "pic": pic},
            "iat": issued_at,
            "exp": issued_at + self.ttl,
            "jti": secrets.token_hex(8),
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str, allow_expired: bool = False) -> IdentityClaim:
        """
        Checks signature and expiry and returns the identity claim.

        With allow_expired=True the exp claim is still required but not
        enforced. Logout uses this to find the owner of a token that may have
        lapsed.

        Raises:
          TokenVerificationError(kind=EXPIRED)           — exp is in the past
          TokenVerificationError(kind=INVALID_SIGNATURE) — signed with another key
          TokenVerificationError(kind=MALFORMED)         — not a JWT, wrong
                                                           algorithm, or missing claims
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["exp", "iat"], "verify_exp": not allow_expired},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenVerificationError(TokenErrorKind.EXPIRED, "Token has expired.") from exc
        except jwt.InvalidSignatureError as exc:
            raise TokenVerificationError(
                TokenErrorKind.INVALID_SIGNATURE,
                "Token signature does not match.",
            ) from exc
        except jwt.InvalidTokenError as exc:
            raise TokenVerificationError(TokenErrorKind.MALFORMED, str(exc)) from exc

        user = payload.get("user")
        if not isinstance(user, dict) or not user.get("id"):
            raise TokenVerificationError(
                TokenErrorKind.MALFORMED,
                "Token is missing the 'user' identity claim.",
            )

        return IdentityClaim(
            user_id=str(user["id"]),
            pic=user.get("pic"),
            issued_at=datetime.fromtimestamp(int(payload["iat"]), tz=timezone.utc),
            expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc),
        )
