# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""BC + federal income tax estimate used by the shared budget view.

CPP/EI are excluded; this is an estimate, not tax advice.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

FEDERAL_BPA = 16129
BC_BPA = 12580
AFFORDABLE_RENT_RATIO = 0.3


@dataclass(slots=True, frozen=True)
class TaxBracket:
    low: float
    high: float
    rate: float


FEDERAL_BRACKETS: tuple[TaxBracket, ...] = (
    TaxBracket(0, 57375, 0.15),
    TaxBracket(57375, 114750, 0.205),
    TaxBracket(114750, 158468, 0.26),
    TaxBracket(158468, 220000, 0.29),
    TaxBracket(220000, math.inf, 0.33),
)

BC_BRACKETS: tuple[TaxBracket, ...] = (
    TaxBracket(0, 47937, 0.0506),
    TaxBracket(47937, 95875, 0.077),
    TaxBracket(95875, 110076, 0.105),
    TaxBracket(110076, 133664, 0.1229),
    TaxBracket(133664, 181232, 0.147),
    TaxBracket(181232, math.inf, 0.168),
)


@dataclass(slots=True, frozen=True)
class TakeHome:
    federal_tax: int
    provincial_tax: int
    total_tax: int
    annual_take_home: int
    monthly_take_home: int


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def apply_brackets(income: float, brackets: Sequence[TaxBracket]) -> float:
    tax = 0.0
    for bracket in brackets:
        if income <= bracket.low:
            break
        tax += (min(income, bracket.high) - bracket.low) * bracket.rate
    return max(0.0, tax)


def federal_tax(annual_salary: float) -> float:
    credit = FEDERAL_BPA * 0.15
    return max(0.0, apply_brackets(annual_salary, FEDERAL_BRACKETS) - credit)


def provincial_tax(annual_salary: float) -> float:
    credit = BC_BPA * 0.0506
    return max(0.0, apply_brackets(annual_salary, BC_BRACKETS) - credit)


def calculate_take_home(annual_salary: float) -> TakeHome:
    fed = federal_tax(annual_salary)
    prov = provincial_tax(annual_salary)
    total = fed + prov
    annual = annual_salary - total
    return TakeHome(
        federal_tax=_round_half_up(fed),
        provincial_tax=_round_half_up(prov),
        total_tax=_round_half_up(total),
        annual_take_home=_round_half_up(annual),
        monthly_take_home=_round_half_up(annual / 12),
    )


def calculate_affordable_rent(monthly_take_home_combined: float) -> int:
    return _round_half_up(monthly_take_home_combined * AFFORDABLE_RENT_RATIO)


def combined_monthly_take_home(salaries: Iterable[float | None]) -> int:
    return sum(calculate_take_home(s).monthly_take_home for s in salaries if s)


__all__ = [
    "BC_BRACKETS",
    "FEDERAL_BRACKETS",
    "TakeHome",
    "apply_brackets",
    "calculate_affordable_rent",
    "calculate_take_home",
    "combined_monthly_take_home",
]
