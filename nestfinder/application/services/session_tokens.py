"""Signed, expiring session tokens carrying an identity claim."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from nestfinder.domain.users.entities import IdentityClaim
from nestfinder.domain.users.repositories import SessionTokenCodec

ALGORITHM = "HS256"
DEFAULT_LIFETIME = timedelta(days=7)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class JwtSessionTokenCodec(SessionTokenCodec):
    """HS256 JWT codec.

    ``verify`` returns ``None`` for a bad signature, an unexpected payload shape
    or an expired token, without telling the caller which one it was.
    """

    def __init__(
        self,
        secret: str,
        *,
        lifetime: timedelta = DEFAULT_LIFETIME,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not secret:
            raise ValueError("session signing secret must not be empty")
        self._secret = secret
        self._lifetime = lifetime
        self._clock = clock

    def issue(self, claim: IdentityClaim) -> str:
        expires_at = self._clock() + self._lifetime
        payload = {
            "userId": claim.user_id,
            "username": claim.username,
            "isAdmin": claim.is_admin,
            "exp": int(expires_at.timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def verify(self, token: str) -> IdentityClaim | None:
        if not token:
            return None
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={"require": ["exp"], "verify_exp": False},
            )
        except jwt.PyJWTError:
            return None

        claim = _claim_from_payload(payload)
        if claim is None:
            return None
        if self._clock().timestamp() >= payload["exp"]:
            return None
        return claim


def _claim_from_payload(payload: dict[str, Any]) -> IdentityClaim | None:
    user_id = payload.get("userId")
    username = payload.get("username")
    is_admin = payload.get("isAdmin")
    exp = payload.get("exp")
    if not isinstance(user_id, str) or not user_id:
        return None
    if not isinstance(username, str) or not isinstance(is_admin, bool):
        return None
    if isinstance(exp, bool) or not isinstance(exp, (int, float)):
        return None
    return IdentityClaim(user_id=user_id, username=username, is_admin=is_admin)


__all__ = ["ALGORITHM", "DEFAULT_LIFETIME", "JwtSessionTokenCodec"]
