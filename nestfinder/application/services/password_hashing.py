"""Password hashing strategies."""

from __future__ import annotations

import bcrypt

from nestfinder.domain.users.exceptions import HashFormatError
from nestfinder.domain.users.repositories import PasswordHasher

BCRYPT_ROUNDS = 12
BCRYPT_MAX_PASSWORD_BYTES = 72


class BcryptPasswordHasher(PasswordHasher):
    def __init__(self, rounds: int = BCRYPT_ROUNDS) -> None:
        self._rounds = rounds

    def hash(self, password: str) -> str:
        raw = password.encode("utf-8")
        if len(raw) > BCRYPT_MAX_PASSWORD_BYTES:
            raise ValueError(f"password longer than {BCRYPT_MAX_PASSWORD_BYTES} bytes")
        return bcrypt.hashpw(raw, bcrypt.gensalt(rounds=self._rounds)).decode("ascii")

    def verify(self, password: str, hashed: str) -> bool:
        raw = password.encode("utf-8")
        if len(raw) > BCRYPT_MAX_PASSWORD_BYTES:
            return False
        try:
            # checkpw compares in constant time
            return bcrypt.checkpw(raw, hashed.encode("utf-8"))
        except ValueError as exc:
            raise HashFormatError("stored password hash is not a bcrypt digest") from exc
