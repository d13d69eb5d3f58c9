# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from nestfinder.domain.users.entities import IdentityClaim, User
from nestfinder.domain.users.repositories import UserRepository


class GetCurrentUserUseCase:
    """Resolve the live user record behind a verified claim.

    The claim can be up to a week old, so display name and admin flag are
    always read from the store.
    """

    def __init__(self, users: UserRepository) -> None:
        self._users = users

    def execute(self, claim: IdentityClaim | None) -> User | None:
        if claim is None:
            return None
        return self._users.find_by_id(claim.user_id)


__all__ = ["GetCurrentUserUseCase"]
