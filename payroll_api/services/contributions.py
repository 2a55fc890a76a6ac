# payroll_api/services/contributions.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional
import logging

from payroll_api.common.errors import ContributionProviderError
from payroll_api.models.payroll.stat_table import TYPE_SSS, TYPE_PAGIBIG, TYPE_PHILHEALTH
from .numbers import money
from .stat_tables import resolve_table, evaluate_contribution

log = logging.getLogger(__name__)


class ContributionProvider:
    """(basic_salary) -> contribution amount. Bracket tables stay behind this seam."""

    name = "contribution"

    def bind(self, on_date: date) -> "ContributionProvider":
        return self

    def compute(self, basic_salary: Decimal) -> Decimal:
        raise NotImplementedError


class StatTableContributionProvider(ContributionProvider):
    def __init__(self, table_type: str, on_date: Optional[date] = None):
        self.table_type = table_type
        self.name = table_type
        self.on_date = on_date

    def bind(self, on_date: date) -> "StatTableContributionProvider":
        return StatTableContributionProvider(self.table_type, on_date)

    def compute(self, basic_salary: Decimal) -> Decimal:
        table = resolve_table(self.table_type, self.on_date or date.today())
        return evaluate_contribution(table.value_json, basic_salary)


def default_providers():
    return (
        StatTableContributionProvider(TYPE_SSS),
        StatTableContributionProvider(TYPE_PAGIBIG),
        StatTableContributionProvider(TYPE_PHILHEALTH),
    )


@dataclass(frozen=True)
class ContributionSummary:
    sss: Decimal
    pagibig: Decimal
    philhealth: Decimal

    @property
    def total(self) -> Decimal:
        return money(self.sss + self.pagibig + self.philhealth)

    def figures(self) -> dict:
        return {
            "sss_contributions": self.sss,
            "pagibig_contributions": self.pagibig,
            "philhealth_contributions": self.philhealth,
            "total_contributions": self.total,
        }


def _call(provider, label: str, basic_salary: Decimal, employee_id=None, period_id=None) -> Decimal:
    name = getattr(provider, "name", None) or label
    try:
        return money(provider.compute(basic_salary))
    except Exception as e:
        raise ContributionProviderError(
            str(e) or e.__class__.__name__, provider=name,
            employee_id=employee_id, period_id=period_id,
        ) from e


def calculate_contributions(basic_salary: Decimal, sss, pagibig, philhealth,
                            employee_id=None, period_id=None) -> ContributionSummary:
    """Each collaborator sees the same pro-rated basic salary; the three are summed."""
    return ContributionSummary(
        sss=_call(sss, TYPE_SSS, basic_salary, employee_id, period_id),
        pagibig=_call(pagibig, TYPE_PAGIBIG, basic_salary, employee_id, period_id),
        philhealth=_call(philhealth, TYPE_PHILHEALTH, basic_salary, employee_id, period_id),
    )
