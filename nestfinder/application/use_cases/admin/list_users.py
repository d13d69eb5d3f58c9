# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from nestfinder.domain.users.entities import User
from nestfinder.domain.users.repositories import UserRepository


class ListUsersUseCase:
    def __init__(self, users: UserRepository) -> None:
        self._users = users

    def execute(self) -> list[User]:
        return sorted(self._users.list_all(), key=lambda user: user.created_at)


__all__ = ["ListUsersUseCase"]
