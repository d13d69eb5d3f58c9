# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from .entities import IdentityClaim, User


class UserRepository(Protocol):
    def find_by_username(self, username: str) -> User | None: ...
    def find_by_id(self, user_id: str) -> User | None: ...
    def list_all(self) -> Sequence[User]: ...
    def add(self, user: User) -> User: ...
    def update(
        self,
        user_id: str,
        *,
        display_name: str | None = None,
        is_admin: bool | None = None,
        password_hash: str | None = None,
    ) -> User | None: ...
    def delete(self, user_id: str) -> bool: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...


class SessionTokenCodec(Protocol):
    def issue(self, claim: IdentityClaim) -> str: ...
    def verify(self, token: str) -> IdentityClaim | None: ...
