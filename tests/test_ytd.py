from decimal import Decimal
from types import SimpleNamespace as NS

from payroll_api.services.ytd import YTDSnapshot, YTD_FIGURES, accumulate, exclude


def test_zero_snapshot_when_absent():
    snap = YTDSnapshot.from_row(None)
    assert set(snap.as_dict()) == set(YTD_FIGURES)
    assert all(v == 0 for v in snap.as_dict().values())


def test_accumulate_is_pure():
    prior = YTDSnapshot.zero()
    first = accumulate(prior, {"gross_income": Decimal("10000"), "withheld_tax": Decimal("940")})
    second = accumulate(first, {"gross_income": Decimal("9500.50"), "withheld_tax": Decimal("800")})
    assert prior.get("gross_income") == 0
    assert first.get("gross_income") == Decimal("10000.00")
    assert second.get("gross_income") == Decimal("19500.50")
    assert second.get("withheld_tax") == Decimal("1740.00")
    # figures not supplied carry forward unchanged
    assert second.get("net_income") == 0


def test_exclude_previous_run():
    base = YTDSnapshot.from_row(NS(gross_income=Decimal("30000"), late_minutes=Decimal("12")))
    out = exclude(base, {"gross_income": Decimal("10000"), "late_minutes": Decimal("5")})
    assert out.get("gross_income") == Decimal("20000.00")
    assert out.get("late_minutes") == Decimal("7.00")
    assert exclude(base, None) is base
