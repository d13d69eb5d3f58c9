# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Listing lifecycle and scoring rules shared by the household."""

from __future__ import annotations

from enum import Enum

from .exceptions import InvariantViolationError

SCORE_MIN = 0.0
SCORE_MAX = 10.0


class ListingStatus(str, Enum):
    ACTIVE = "ACTIVE"
    ARCHIVED = "ARCHIVED"
    REJECTED = "REJECTED"
    FAVORITE = "FAVORITE"
    SELECTED = "SELECTED"


ACTIVE_STATUSES: frozenset[ListingStatus] = frozenset(
    {ListingStatus.ACTIVE, ListingStatus.FAVORITE, ListingStatus.SELECTED}
)


def validate_score(value: float | None, *, field: str) -> float | None:
    if value is None:
        return None
    if not SCORE_MIN <= value <= SCORE_MAX:
        raise InvariantViolationError(
            f"score must be between {SCORE_MIN:g} and {SCORE_MAX:g}", field=field
        )
    return float(value)


def effective_score(manual_override: float | None, ai_score: float | None) -> float | None:
    """Manual override wins when set, otherwise the AI score (which may be None)."""
    return manual_override if manual_override is not None else ai_score


def area_from_address(address: str | None) -> str:
    if not address:
        return ""
    parts = [part.strip() for part in address.split(",")]
    if len(parts) >= 2:
        return parts[-2]
    return parts[0][:20] + "..." if len(parts[0]) > 20 else parts[0]


def effective_area(neighbourhood: str | None, address: str | None) -> str:
    if neighbourhood:
        return neighbourhood
    if address:
        return area_from_address(address)
    return "Other"


__all__ = [
    "ACTIVE_STATUSES",
    "ListingStatus",
    "SCORE_MAX",
    "SCORE_MIN",
    "area_from_address",
    "effective_area",
    "effective_score",
    "validate_score",
]
