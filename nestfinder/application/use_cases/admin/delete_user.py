# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from nestfinder.domain.users.exceptions import CannotDeleteSelfError, UserNotFoundError
from nestfinder.domain.users.repositories import UserRepository
from nestfinder.shared.logging import logger


class DeleteUserUseCase:
    def __init__(self, users: UserRepository) -> None:
        self._users = users

    def execute(self, user_id: str, *, acting_user_id: str) -> None:
        if user_id == acting_user_id:
            raise CannotDeleteSelfError()
        if not self._users.delete(user_id):
            raise UserNotFoundError()
        logger.info(f"admin: deleted user user_id={user_id} by={acting_user_id}")


__all__ = ["DeleteUserUseCase"]
