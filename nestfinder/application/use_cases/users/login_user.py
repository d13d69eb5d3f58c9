# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass

from nestfinder.domain.users.entities import IdentityClaim, User, normalize_username
from nestfinder.domain.users.exceptions import HashFormatError, InvalidCredentialsError
from nestfinder.domain.users.repositories import PasswordHasher, SessionTokenCodec, UserRepository
from nestfinder.shared.logging import logger


@dataclass(slots=True, frozen=True)
class LoginResult:
    user: User
    token: str


class LoginUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: SessionTokenCodec,
        password_hasher: PasswordHasher,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._password_hasher = password_hasher

    def execute(self, username: str, password: str) -> LoginResult:
        user = self._users.find_by_username(normalize_username(username))
        if user is None:
            raise InvalidCredentialsError()

        try:
            password_valid = self._password_hasher.verify(password, user.password_hash)
        except HashFormatError:
            logger.error(f"auth.login: unreadable password hash for user_id={user.id}")
            password_valid = False

        if not password_valid:
            raise InvalidCredentialsError()

        token = self._tokens.issue(
            IdentityClaim(user_id=user.id, username=user.username, is_admin=user.is_admin)
        )
        return LoginResult(user=user, token=token)


__all__ = ["LoginResult", "LoginUserUseCase"]
