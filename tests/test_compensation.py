from decimal import Decimal
from types import SimpleNamespace as NS

from payroll_api.services.compensation import assemble, assemble_category


def test_recurring_items_prorated_by_divisor():
    cat = assemble_category([{"name": "Rice", "pay": 1000}], None, 2)
    assert cat.total == Decimal("500.00")
    assert cat.items == [{"name": "Rice", "pay": 500.0}]


def test_override_taken_verbatim():
    cat = assemble_category([{"name": "Rice", "pay": 1000}], [{"name": "Bonus", "pay": 750}], 2)
    assert cat.total == Decimal("750.00")
    assert cat.items == [{"name": "Bonus", "pay": 750}]


def test_empty_override_falls_back_to_profile():
    cat = assemble_category([{"name": "Rice", "pay": 1000}], [], 4)
    assert cat.total == Decimal("250.00")


def test_assemble_all_categories():
    profile = NS(allowances=[{"name": "Rice", "pay": 1000}],
                 commissions=None,
                 other_compensations=[{"name": "Phone", "pay": 300}])
    comps = assemble(profile, {"commissions": [{"name": "Q1", "pay": 1200}]}, 1)
    assert comps.allowances.total == Decimal("1000.00")
    assert comps.commissions.total == Decimal("1200.00")
    assert comps.other_compensations.total == Decimal("300.00")
    assert comps.allowances.total_ytd is None
