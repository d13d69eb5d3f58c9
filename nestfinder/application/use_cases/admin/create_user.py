# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from nestfinder.domain.users.entities import User, normalize_username
from nestfinder.domain.users.exceptions import UserAlreadyExistsError
from nestfinder.domain.users.repositories import PasswordHasher, UserRepository
from nestfinder.shared.logging import logger


class CreateUserUseCase:
    def __init__(self, *, users: UserRepository, password_hasher: PasswordHasher) -> None:
        self._users = users
        self._password_hasher = password_hasher

    def execute(
        self,
        username: str,
        password: str,
        *,
        display_name: str | None = None,
        is_admin: bool = False,
    ) -> User:
        normalized = normalize_username(username)
        if self._users.find_by_username(normalized) is not None:
            raise UserAlreadyExistsError()

        user = self._users.add(
            User(
                id=str(uuid.uuid4()),
                username=normalized,
                password_hash=self._password_hasher.hash(password),
                display_name=display_name or username.strip(),
                is_admin=is_admin,
                created_at=datetime.now(UTC),
            )
        )
        logger.info(f"admin: created user user_id={user.id} username={user.username}")
        return user


__all__ = ["CreateUserUseCase"]
