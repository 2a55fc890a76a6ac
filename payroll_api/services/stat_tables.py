from __future__ import annotations
from datetime import date
from decimal import Decimal
from typing import Optional

from payroll_api.models.payroll.stat_table import StatTable
from .numbers import ZERO, dec, money


class StatTableNotFound(LookupError):
    pass


class StatTableInvalid(ValueError):
    pass


def resolve_table(table_type: str, on_date: date, cycle: Optional[str] = None) -> StatTable:
    """
    Return the StatTable of `table_type` effective on `on_date`.

    A cycle-specific table wins over a cycle-agnostic one (cycle NULL);
    within a tier the most recent effective_from wins.
    """
    q = (
        StatTable.query
        .filter(StatTable.type == table_type)
        .filter(StatTable.effective_from <= on_date)
        .filter((StatTable.effective_to.is_(None)) | (StatTable.effective_to >= on_date))
    )

    def _latest(subq):
        return subq.order_by(StatTable.effective_from.desc(), StatTable.id.desc()).first()

    row = None
    if cycle:
        row = _latest(q.filter(StatTable.cycle == cycle))
    if row is None:
        row = _latest(q.filter(StatTable.cycle.is_(None)))
    if row is None:
        scope = f" ({cycle})" if cycle else ""
        raise StatTableNotFound(f"No {table_type}{scope} table effective on {on_date.isoformat()}")
    return row


def _slabs(value_json) -> list:
    slabs = (value_json or {}).get("slabs")
    if not isinstance(slabs, list) or not slabs:
        raise StatTableInvalid("table has no slabs")
    return slabs


def _find_slab(slabs: list, amount: Decimal) -> Optional[dict]:
    for slab in slabs:
        lo = dec(slab.get("min"))
        hi = slab.get("max")
        if amount >= lo and (hi is None or amount <= dec(hi)):
            return slab
    return None


def evaluate_contribution(value_json, salary) -> Decimal:
    """
    amount + rate x basis for the slab containing the basis.

    basis is the salary clamped to optional floor/ceiling; the result is
    multiplied by optional `share` (employee share) and limited by `cap`.
    A salary above every slab uses the last slab.
    """
    value_json = value_json or {}
    slabs = _slabs(value_json)
    basis = dec(salary)
    if value_json.get("floor") is not None:
        basis = max(basis, dec(value_json["floor"]))
    if value_json.get("ceiling") is not None:
        basis = min(basis, dec(value_json["ceiling"]))

    slab = _find_slab(slabs, basis)
    if slab is None:
        slab = slabs[-1] if basis >= dec(slabs[-1].get("min")) else slabs[0]

    out = dec(slab.get("amount")) + dec(slab.get("rate")) * basis
    if value_json.get("share") is not None:
        out = out * dec(value_json["share"])
    if value_json.get("cap") is not None:
        out = min(out, dec(value_json["cap"]))
    return money(max(out, ZERO))


def evaluate_tax(value_json, income) -> Decimal:
    """base_tax + rate x (income - slab min); nothing is withheld on income <= 0."""
    income = dec(income)
    if income <= ZERO:
        return money(ZERO)
    slabs = _slabs(value_json)
    slab = _find_slab(slabs, income) or slabs[-1]
    out = dec(slab.get("base_tax")) + dec(slab.get("rate")) * (income - dec(slab.get("min")))
    return money(max(out, ZERO))
