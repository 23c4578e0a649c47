"""Signed access tokens (JWT)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from accounts.core.config import Settings
from accounts.core.errors import UnauthorizedError


@dataclass(frozen=True)
class TokenSigner:
    """Issues and verifies JWTs carrying the user id in the ``id`` claim."""

    secret: str
    expires_in: int
    algorithm: str = "HS256"

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenSigner":
        return cls(
            secret=settings.jwt_secret,
            expires_in=settings.jwt_expires_in,
            algorithm=settings.jwt_algorithm,
        )

    def _require_secret(self) -> str:
        if not self.secret:
            raise RuntimeError("SECRET_STR must be configured to sign tokens.")
        return self.secret

    def sign(self, user_id: str, *, now: datetime | None = None) -> str:
        issued = now or datetime.now(timezone.utc)
        payload = {
            "id": user_id,
            "iat": issued.timestamp(),
            "exp": issued + timedelta(seconds=self.expires_in),
        }
        return jwt.encode(payload, self._require_secret(), algorithm=self.algorithm)

    def decode(self, token: str) -> dict[str, Any]:
        try:
            claims = jwt.decode(
                token,
                self._require_secret(),
                algorithms=[self.algorithm],
                options={"require": ["id", "iat", "exp"]},
            )
        except jwt.ExpiredSignatureError:
            raise UnauthorizedError("Your token has expired! Please log in again.")
        except jwt.InvalidTokenError:
            raise UnauthorizedError("Invalid token. Please log in again!")
        return claims
