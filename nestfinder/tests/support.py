"""Shared test doubles."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace
from datetime import UTC, datetime, timedelta

from nestfinder.domain.users.entities import IdentityClaim, User
from nestfinder.domain.users.exceptions import HashFormatError
from nestfinder.domain.users.repositories import PasswordHasher, UserRepository
from nestfinder.infrastructure.container import container

T0 = datetime(2026, 1, 1, tzinfo=UTC)


def session_token_for(user: User) -> str:
    return container.token_codec.issue(
        IdentityClaim(user_id=user.id, username=user.username, is_admin=user.is_admin)
    )


def make_user(user_id: str, username: str, *, is_admin: bool = False, offset: int = 0) -> User:
    return User(
        id=user_id,
        username=username,
        password_hash=f"hashed:{username}-pw",
        display_name=username.title(),
        is_admin=is_admin,
        created_at=T0 + timedelta(minutes=offset),
    )


class InMemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self._users: dict[str, User] = {}

    def find_by_username(self, username: str) -> User | None:
        return next((u for u in self._users.values() if u.username == username), None)

    def find_by_id(self, user_id: str) -> User | None:
        return self._users.get(user_id)

    def list_all(self) -> Sequence[User]:
        return list(self._users.values())

    def add(self, user: User) -> User:
        self._users[user.id] = user
        return user

    def update(
        self,
        user_id: str,
        *,
        display_name: str | None = None,
        is_admin: bool | None = None,
        password_hash: str | None = None,
    ) -> User | None:
        user = self._users.get(user_id)
        if user is None:
            return None
        if display_name is not None:
            user = replace(user, display_name=display_name)
        if is_admin is not None:
            user = replace(user, is_admin=is_admin)
        if password_hash is not None:
            user = replace(user, password_hash=password_hash)
        self._users[user_id] = user
        return user

    def delete(self, user_id: str) -> bool:
        return self._users.pop(user_id, None) is not None


class DeterministicHasher(PasswordHasher):
    def hash(self, password: str) -> str:
        return f"hashed:{password}"

    def verify(self, password: str, hashed: str) -> bool:
        if not hashed.startswith("hashed:"):
            raise HashFormatError("unreadable digest")
        return hashed == f"hashed:{password}"
