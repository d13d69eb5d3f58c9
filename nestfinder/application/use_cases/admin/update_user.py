# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from nestfinder.domain.users.entities import User
from nestfinder.domain.users.exceptions import UserNotFoundError
from nestfinder.domain.users.repositories import PasswordHasher, UserRepository


class UpdateUserUseCase:
    def __init__(self, *, users: UserRepository, password_hasher: PasswordHasher) -> None:
        self._users = users
        self._password_hasher = password_hasher

    def execute(
        self,
        user_id: str,
        *,
        display_name: str | None = None,
        is_admin: bool | None = None,
        password: str | None = None,
    ) -> User:
        password_hash = self._password_hasher.hash(password) if password else None
        user = self._users.update(
            user_id,
            display_name=display_name,
            is_admin=is_admin,
            password_hash=password_hash,
        )
        if user is None:
            raise UserNotFoundError()
        return user


__all__ = ["UpdateUserUseCase"]
