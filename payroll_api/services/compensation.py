# payroll_api/services/compensation.py
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional

from .numbers import ZERO, dec, money, to_json_number


@dataclass(frozen=True)
class CompensationCategory:
    items: List[Dict[str, Any]] = field(default_factory=list)
    total: Decimal = ZERO
    total_ytd: Optional[Decimal] = None


@dataclass(frozen=True)
class Compensations:
    allowances: CompensationCategory
    commissions: CompensationCategory
    other_compensations: CompensationCategory


def _total(items) -> Decimal:
    return money(sum((dec(i.get("pay")) for i in items if isinstance(i, dict)), ZERO))


def assemble_category(recurring, override, divisor) -> CompensationCategory:
    """
    An override (non-empty list from the caller) is taken verbatim.
    Otherwise the salary profile's monthly line items are pro-rated by the cycle divisor.
    """
    if override:
        items = [dict(i) for i in override if isinstance(i, dict)]
        return CompensationCategory(items=items, total=_total(items))

    items = []
    for line in recurring or []:
        if not isinstance(line, dict):
            continue
        prorated = dict(line)
        prorated["pay"] = to_json_number(dec(line.get("pay")) / dec(divisor))
        items.append(prorated)
    return CompensationCategory(items=items, total=_total(items))


def assemble(profile, overrides: Optional[Dict[str, Any]], divisor) -> Compensations:
    overrides = overrides or {}
    return Compensations(
        allowances=assemble_category(
            getattr(profile, "allowances", None), overrides.get("allowances"), divisor),
        commissions=assemble_category(
            getattr(profile, "commissions", None), overrides.get("commissions"), divisor),
        other_compensations=assemble_category(
            getattr(profile, "other_compensations", None), overrides.get("other_compensations"), divisor),
    )
