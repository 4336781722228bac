from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
import jwt

from statuspage.core.config import settings


class Authenticator:
    """Password hashing and signed, expiring session tokens."""

    def __init__(
        self,
        secret: str,
        *,
        algorithm: str = "HS256",
        token_ttl: timedelta = timedelta(hours=24),
        rounds: int = 12,
    ) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self._token_ttl = token_ttl
        self._rounds = rounds

    def hash_password(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify_password(self, password: str, hashed: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
        except ValueError:
            # malformed hash or over-long password
            return False

    def issue_token(self, claims: dict[str, Any], *, now: datetime | None = None) -> str:
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            **claims,
            "iat": issued_at,
            "exp": issued_at + self._token_ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify_token(self, token: str) -> dict[str, Any] | None:
        try:
            return jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except jwt.InvalidTokenError:
            return None


def _make_authenticator() -> Authenticator:
    return Authenticator(
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        token_ttl=timedelta(hours=settings.token_expire_hours),
        rounds=settings.bcrypt_rounds,
    )


authenticator: Authenticator = _make_authenticator()
