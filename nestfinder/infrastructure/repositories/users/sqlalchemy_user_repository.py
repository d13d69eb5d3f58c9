# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from nestfinder.domain.users.entities import User as DomainUser
from nestfinder.domain.users.repositories import UserRepository
from nestfinder.infrastructure.db.models import User
from nestfinder.infrastructure.db.session import session_scope


def _to_domain(row: User) -> DomainUser:
    return DomainUser(
        id=row.id,
        username=row.username,
        password_hash=row.password_hash,
        display_name=row.display_name,
        is_admin=row.is_admin,
        created_at=row.created_at,
        onboarding_complete=bool(row.preferences and row.preferences.onboarding_complete),
    )


class SqlAlchemyUserRepository(UserRepository):
    def find_by_username(self, username: str) -> DomainUser | None:
        with session_scope() as session:
            row = session.scalars(
                select(User).options(selectinload(User.preferences)).where(User.username == username)
            ).first()
            return _to_domain(row) if row else None

    def find_by_id(self, user_id: str) -> DomainUser | None:
        with session_scope() as session:
            row = session.scalars(
                select(User).options(selectinload(User.preferences)).where(User.id == user_id)
            ).first()
            return _to_domain(row) if row else None

    def list_all(self) -> Sequence[DomainUser]:
        with session_scope() as session:
            rows = session.scalars(
                select(User).options(selectinload(User.preferences)).order_by(User.created_at)
            ).all()
            return [_to_domain(row) for row in rows]

    def add(self, user: DomainUser) -> DomainUser:
        with session_scope() as session:
            row = User(
                id=user.id,
                username=user.username,
                password_hash=user.password_hash,
                display_name=user.display_name,
                is_admin=user.is_admin,
                created_at=user.created_at,
            )
            session.add(row)
            session.flush()
            session.refresh(row)
            return _to_domain(row)

    def update(
        self,
        user_id: str,
        *,
        display_name: str | None = None,
        is_admin: bool | None = None,
        password_hash: str | None = None,
    ) -> DomainUser | None:
        with session_scope() as session:
            row = session.get(User, user_id)
            if row is None:
                return None
            if display_name is not None:
                row.display_name = display_name
            if is_admin is not None:
                row.is_admin = is_admin
            if password_hash is not None:
                row.password_hash = password_hash
            session.flush()
            return _to_domain(row)

    def delete(self, user_id: str) -> bool:
        with session_scope() as session:
            row = session.get(User, user_id)
            if row is None:
                return False
            session.delete(row)
            return True
