# payroll_api/services/ytd.py
"""
Year-to-date fold.

The prior snapshot is read once, before any figure is computed, and is never
mutated: `accumulate` returns a new snapshot. Persisting it is the caller's job
(same transaction as the payroll row).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Mapping, Optional

from .numbers import ZERO, dec, money

QUANTITY_FIGURES = (
    "absent_minutes",
    "absent_days",
    "late_minutes",
    "undertime_minutes",
    "overtime_minutes",
    "expected_hours_worked",
    "hours_worked",
    "regular_holiday_hours",
    "regular_holiday_hours_worked",
    "special_holiday_hours",
    "special_holiday_hours_worked",
)

MONEY_FIGURES = (
    "basic_salary",
    "absent_deductions",
    "late_deductions",
    "undertime_deductions",
    "overtime_pay",
    "regular_holiday_hours_pay",
    "special_holiday_hours_pay",
    "leaves_pay",
    "total_allowances",
    "total_commissions",
    "total_other_compensations",
    "sss_contributions",
    "pagibig_contributions",
    "philhealth_contributions",
    "total_contributions",
    "gross_income",
    "taxable_income",
    "withheld_tax",
    "net_income",
)

YTD_FIGURES = QUANTITY_FIGURES + MONEY_FIGURES


@dataclass(frozen=True)
class YTDSnapshot:
    values: Mapping[str, Decimal] = field(default_factory=dict)

    @classmethod
    def zero(cls) -> "YTDSnapshot":
        return cls({name: ZERO for name in YTD_FIGURES})

    @classmethod
    def from_row(cls, row) -> "YTDSnapshot":
        """EmployeeYTD row (or None => all zero)."""
        if row is None:
            return cls.zero()
        return cls({name: dec(getattr(row, name, None)) for name in YTD_FIGURES})

    def get(self, name: str) -> Decimal:
        return dec(self.values.get(name))

    def as_dict(self) -> Dict[str, Decimal]:
        return {name: self.get(name) for name in YTD_FIGURES}


def _fold(prior: YTDSnapshot, current: Mapping[str, Decimal], sign: int) -> YTDSnapshot:
    out = {}
    for name in YTD_FIGURES:
        out[name] = money(prior.get(name) + sign * dec(current.get(name)))
    return YTDSnapshot(out)


def accumulate(prior: YTDSnapshot, current: Mapping[str, Decimal]) -> YTDSnapshot:
    """F_ytd_new = F_ytd_prior + F_current for every figure."""
    return _fold(prior, current, 1)


def exclude(snapshot: YTDSnapshot, previous: Optional[Mapping[str, Decimal]]) -> YTDSnapshot:
    """Remove an earlier run of the same period from the base before regenerating it."""
    if not previous:
        return snapshot
    return _fold(snapshot, previous, -1)


def figures_of(row) -> Dict[str, Decimal]:
    """Current-period figures stored on a Payroll row."""
    return {name: dec(getattr(row, name, None)) for name in YTD_FIGURES}
