from datetime import date, datetime
from decimal import Decimal
from types import SimpleNamespace as NS

from payroll_api.services.attendance_reconciler import AttendanceRules, reconcile

RULES = AttendanceRules(hourly_rate=Decimal("100"), working_hours_per_day=Decimal("8"))


def _rec(day, clock_in="09:00", clock_out="17:00", exp_in="09:00", exp_out="17:00"):
    def _at(hhmm):
        if hhmm is None:
            return None
        h, m = hhmm.split(":")
        return datetime(day.year, day.month, day.day, int(h), int(m))
    return NS(date=day, expected_clock_in=_at(exp_in), expected_clock_out=_at(exp_out),
              clock_in=_at(clock_in), clock_out=_at(clock_out))


def test_perfect_day_has_no_adjustments():
    s = reconcile([_rec(date(2025, 1, 6))], [], RULES)
    f = s.figures(RULES)
    assert f["late_minutes"] == 0
    assert f["undertime_minutes"] == 0
    assert f["overtime_minutes"] == 0
    assert f["absent_minutes"] == 0
    assert f["hours_worked"] == Decimal("8.00")
    assert f["expected_hours_worked"] == Decimal("8.00")


def test_late_with_grace_period():
    rules = AttendanceRules(hourly_rate=Decimal("100"), working_hours_per_day=Decimal("8"),
                            grace_period_minutes=10)
    s = reconcile([_rec(date(2025, 1, 6), clock_in="09:15")], [], rules)
    f = s.figures(rules)
    assert f["late_minutes"] == Decimal("5")
    assert f["late_deductions"] == Decimal("8.33")


def test_full_day_absence():
    s = reconcile([_rec(date(2025, 1, 6), clock_in=None, clock_out=None)], [], RULES)
    f = s.figures(RULES)
    assert f["absent_minutes"] == Decimal("480")
    assert f["absent_days"] == Decimal("1")
    assert f["absent_deductions"] == Decimal("800.00")
    assert f["late_minutes"] == 0


def test_one_sided_punch_counts_as_absent():
    s = reconcile([_rec(date(2025, 1, 6), clock_out=None)], [], RULES)
    assert s.absent_minutes == Decimal("480")
    assert s.worked_minutes == 0


def test_missing_expected_clocks_skip_late_and_overtime():
    s = reconcile([_rec(date(2025, 1, 6), clock_in="10:00", clock_out="20:00", exp_in=None, exp_out=None)], [], RULES)
    assert s.late_minutes == 0
    assert s.overtime_minutes == 0
    assert s.worked_minutes == 600


def test_undertime_and_overtime_windows():
    rules = AttendanceRules(hourly_rate=Decimal("100"), working_hours_per_day=Decimal("8"),
                            minimum_overtime_minutes=30)
    recs = [
        _rec(date(2025, 1, 6), clock_out="16:00"),
        _rec(date(2025, 1, 7), clock_out="18:30"),
    ]
    f = reconcile(recs, [], rules).figures(rules)
    assert f["undertime_minutes"] == Decimal("60")
    assert f["undertime_deductions"] == Decimal("100.00")
    assert f["overtime_minutes"] == Decimal("60")
    assert f["overtime_pay"] == Decimal("100.00")


def test_regular_holiday_premium():
    day = date(2025, 1, 1)
    rules = AttendanceRules(hourly_rate=Decimal("100"), working_hours_per_day=Decimal("8"),
                            regular_holiday_rate=Decimal("1.0"))
    f = reconcile([_rec(day)], [NS(date=day, type="regular")], rules).figures(rules)
    assert f["regular_holiday_hours"] == Decimal("8.00")
    assert f["regular_holiday_hours_worked"] == Decimal("8.00")
    assert f["regular_holiday_hours_pay"] == Decimal("1600.00")
    assert f["special_holiday_hours_pay"] == 0


def test_holiday_absence_counts_scheduled_not_worked():
    day = date(2025, 1, 1)
    s = reconcile([_rec(day, clock_in=None, clock_out=None)], [NS(date=day, type="special")], RULES)
    f = s.figures(RULES)
    assert f["special_holiday_hours"] == Decimal("8.00")
    assert f["special_holiday_hours_worked"] == 0
    assert f["special_holiday_hours_pay"] == 0
    assert f["absent_minutes"] == Decimal("480")


def test_regular_outranks_special_on_same_day():
    day = date(2025, 1, 1)
    hol = [NS(date=day, type="special"), NS(date=day, type="regular")]
    s = reconcile([_rec(day)], hol, RULES)
    assert s.holiday_hours["regular"] == Decimal("8.00")
    assert s.holiday_hours["special"] == 0


def test_night_shift_rolls_over_midnight():
    s = reconcile([_rec(date(2025, 1, 6), clock_in="22:00", clock_out="06:00",
                        exp_in="22:00", exp_out="06:00")], [], RULES)
    assert s.worked_minutes == 480
    assert s.undertime_minutes == 0


def test_leaves_matched_by_record_date_once():
    recs = [_rec(date(2025, 1, 6)), _rec(date(2025, 1, 7))]
    leaves = [
        {"date": "2025-01-06", "hours": 4, "type": "vacation"},
        {"date": "2025-01-20", "hours": 8},
    ]
    s = reconcile(recs, [], RULES, leaves)
    assert s.leaves_pay == Decimal("400.00")
    assert len(s.leaves) == 1
    assert s.leaves[0]["pay"] == 400.0
    assert s.leaves[0]["type"] == "vacation"


def test_per_day_breakdown():
    s = reconcile([_rec(date(2025, 1, 6), clock_in="09:20"), _rec(date(2025, 1, 7), clock_in=None, clock_out=None)], [], RULES)
    assert [d["date"] for d in s.days] == ["2025-01-06", "2025-01-07"]
    assert s.days[0]["late_minutes"] == 20
    assert s.days[1]["absent_minutes"] == 480.0


def test_overtime_paid_at_hourly_rate_regardless_of_profile_multiplier():
    profile = NS(hourly_rate=Decimal("100"), working_hours_per_day=Decimal("8"),
                 overtime_rate=Decimal("1.25"), regular_holiday_rate=Decimal("1"),
                 special_holiday_rate=Decimal("0.3"))
    rules = AttendanceRules.from_profile(profile)
    f = reconcile([_rec(date(2025, 1, 6), clock_out="18:00")], [], rules).figures(rules)
    assert f["overtime_minutes"] == Decimal("60")
    assert f["overtime_pay"] == Decimal("100.00")
