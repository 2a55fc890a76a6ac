# payroll_api/services/tax.py
from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from payroll_api.common.errors import TaxProviderError
from payroll_api.models.payroll.stat_table import TYPE_TAX
from .numbers import money
from .stat_tables import resolve_table, evaluate_tax


class TaxProvider:
    """(taxable_income, cycle_type) -> tax withheld for that pay frequency."""

    name = TYPE_TAX

    def bind(self, on_date: date) -> "TaxProvider":
        return self

    def compute(self, taxable_income: Decimal, cycle_type: str) -> Decimal:
        raise NotImplementedError


class StatTableTaxProvider(TaxProvider):
    def __init__(self, on_date: Optional[date] = None):
        self.on_date = on_date

    def bind(self, on_date: date) -> "StatTableTaxProvider":
        return StatTableTaxProvider(on_date)

    def compute(self, taxable_income: Decimal, cycle_type: str) -> Decimal:
        table = resolve_table(TYPE_TAX, self.on_date or date.today(), cycle=cycle_type)
        return evaluate_tax(table.value_json, taxable_income)


def calculate_withholding(taxable_income: Decimal, cycle_type: str, provider,
                          employee_id=None, period_id=None) -> Decimal:
    """This period's tax only; YTD is folded separately."""
    try:
        return money(provider.compute(taxable_income, cycle_type))
    except Exception as e:
        raise TaxProviderError(
            str(e) or e.__class__.__name__, employee_id=employee_id, period_id=period_id,
        ) from e
