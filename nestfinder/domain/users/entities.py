# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


def normalize_username(username: str) -> str:
    return username.strip().lower()


@dataclass(slots=True, frozen=True)
class User:

    id: str
    username: str
    password_hash: str
    display_name: str
    is_admin: bool
    created_at: datetime
    onboarding_complete: bool = False


@dataclass(slots=True, frozen=True)
class IdentityClaim:
    """Decoded session token content. Reissued on login, never mutated."""

    user_id: str
    username: str
    is_admin: bool
