# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .budget import TakeHome, calculate_affordable_rent, calculate_take_home
from .exceptions import DomainError, InvariantViolationError
from .listings import (
    ACTIVE_STATUSES,
    ListingStatus,
    effective_area,
    effective_score,
)
from .users.entities import IdentityClaim, User

__all__ = [
    "ACTIVE_STATUSES",
    "DomainError",
    "IdentityClaim",
    "InvariantViolationError",
    "ListingStatus",
    "TakeHome",
    "User",
    "calculate_affordable_rent",
    "calculate_take_home",
    "effective_area",
    "effective_score",
]
