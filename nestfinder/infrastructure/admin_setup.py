# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from nestfinder.domain.users.entities import User, normalize_username
from nestfinder.domain.users.repositories import PasswordHasher, UserRepository
from nestfinder.shared.config.settings import AdminSeedConfig
from nestfinder.shared.logging import logger


def setup_admin_user(
    seed: AdminSeedConfig, users: UserRepository, hasher: PasswordHasher
) -> User | None:
    """Create the household administrator on first start, or re-grant the admin flag."""
    if not seed.username:
        logger.info("admin_setup: No ADMIN_USERNAME configured, skipping admin setup")
        return None

    username = normalize_username(seed.username)
    existing = users.find_by_username(username)
    if existing is not None:
        if existing.is_admin:
            logger.info(f"admin_setup: User '{username}' already has admin privileges")
            return existing
        logger.info(f"admin_setup: Granted admin privileges to user '{username}'")
        return users.update(existing.id, is_admin=True)

    if not seed.password:
        logger.warning(
            f"admin_setup: ADMIN_USERNAME '{username}' does not exist and no "
            "ADMIN_PASSWORD is set, skipping"
        )
        return None

    created = users.add(
        User(
            id=str(uuid.uuid4()),
            username=username,
            password_hash=hasher.hash(seed.password),
            display_name=seed.display_name or seed.username.strip(),
            is_admin=True,
            created_at=datetime.now(UTC),
        )
    )
    logger.info(f"admin_setup: Created admin user '{username}'")
    return created


__all__ = ["setup_admin_user"]
