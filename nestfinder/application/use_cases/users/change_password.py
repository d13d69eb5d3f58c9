# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from nestfinder.domain.users.exceptions import HashFormatError, UserNotFoundError
from nestfinder.domain.users.repositories import PasswordHasher, UserRepository
from nestfinder.shared.errors import ValidationError
from nestfinder.shared.logging import logger


class ChangePasswordUseCase:
    def __init__(self, *, users: UserRepository, password_hasher: PasswordHasher) -> None:
        self._users = users
        self._password_hasher = password_hasher

    def execute(self, user_id: str, current_password: str, new_password: str) -> None:
        user = self._users.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError()

        try:
            valid = self._password_hasher.verify(current_password, user.password_hash)
        except HashFormatError:
            valid = False
        if not valid:
            raise ValidationError("Current password is incorrect", code="invalid_current_password")

        self._users.update(user_id, password_hash=self._password_hasher.hash(new_password))
        logger.info(f"auth.password: changed user_id={user_id}")


__all__ = ["ChangePasswordUseCase"]
