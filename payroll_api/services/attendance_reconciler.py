# payroll_api/services/attendance_reconciler.py
"""
Turns a period's time records into attendance figures.

Per record (one expected attendance day):
  - no clock_in or no clock_out     -> absent for working_hours_per_day
  - both punches present            -> worked minutes; late / undertime /
                                       overtime against the expected clocks
                                       (skipped when expected clocks are missing)
  - record date is a holiday        -> scheduled hours always, worked hours
                                       only when the employee punched both sides
  - caller leaves on a record date  -> paid at hours x hourly_rate

Money equivalents use minutes / 60 x hourly_rate.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional
import logging

from payroll_api.models.attendance import HOLIDAY_REGULAR, HOLIDAY_SPECIAL, HOLIDAY_TYPES
from .clock import to_datetime, minutes_between, minutes_late, minutes_early, hours_between
from .numbers import ZERO, SIXTY, dec, money, qty, to_json_number

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttendanceRules:
    hourly_rate: Decimal
    working_hours_per_day: Decimal
    grace_period_minutes: int = 0
    minimum_overtime_minutes: int = 0
    regular_holiday_rate: Decimal = Decimal("1")
    special_holiday_rate: Decimal = Decimal("0.3")

    @classmethod
    def from_profile(cls, profile, grace_period_minutes: int = 0, minimum_overtime_minutes: int = 0) -> "AttendanceRules":
        return cls(
            hourly_rate=dec(profile.hourly_rate),
            working_hours_per_day=dec(profile.working_hours_per_day),
            grace_period_minutes=int(grace_period_minutes or 0),
            minimum_overtime_minutes=int(minimum_overtime_minutes or 0),
            regular_holiday_rate=dec(getattr(profile, "regular_holiday_rate", None)),
            special_holiday_rate=dec(getattr(profile, "special_holiday_rate", None)),
        )

    def holiday_rate(self, holiday_type: str) -> Decimal:
        if holiday_type == HOLIDAY_REGULAR:
            return self.regular_holiday_rate
        return self.special_holiday_rate


@dataclass
class AttendanceSummary:
    record_count: int = 0
    worked_minutes: int = 0
    absent_days: int = 0
    absent_minutes: Decimal = ZERO
    late_minutes: int = 0
    undertime_minutes: int = 0
    overtime_minutes: int = 0
    holiday_hours: Dict[str, Decimal] = field(default_factory=lambda: {t: ZERO for t in HOLIDAY_TYPES})
    holiday_hours_worked: Dict[str, Decimal] = field(default_factory=lambda: {t: ZERO for t in HOLIDAY_TYPES})
    leaves: List[Dict[str, Any]] = field(default_factory=list)
    leaves_pay: Decimal = ZERO
    days: List[Dict[str, Any]] = field(default_factory=list)

    def figures(self, rules: AttendanceRules) -> Dict[str, Decimal]:
        """Period figures (quantities + money) keyed by payroll column name."""
        rate = rules.hourly_rate

        def _pay(minutes) -> Decimal:
            return money(dec(minutes) / SIXTY * rate)

        def _holiday_pay(htype: str) -> Decimal:
            worked = self.holiday_hours_worked[htype]
            return money(worked * rate * (Decimal("1") + rules.holiday_rate(htype)))

        return {
            "absent_minutes": qty(self.absent_minutes),
            "absent_days": qty(self.absent_days),
            "late_minutes": qty(self.late_minutes),
            "undertime_minutes": qty(self.undertime_minutes),
            "overtime_minutes": qty(self.overtime_minutes),
            "expected_hours_worked": qty(self.record_count * rules.working_hours_per_day),
            "hours_worked": qty(Decimal(self.worked_minutes) / SIXTY),
            "absent_deductions": _pay(self.absent_minutes),
            "late_deductions": _pay(self.late_minutes),
            "undertime_deductions": _pay(self.undertime_minutes),
            "overtime_pay": _pay(self.overtime_minutes),
            "regular_holiday_hours": qty(self.holiday_hours[HOLIDAY_REGULAR]),
            "regular_holiday_hours_worked": qty(self.holiday_hours_worked[HOLIDAY_REGULAR]),
            "regular_holiday_hours_pay": _holiday_pay(HOLIDAY_REGULAR),
            "special_holiday_hours": qty(self.holiday_hours[HOLIDAY_SPECIAL]),
            "special_holiday_hours_worked": qty(self.holiday_hours_worked[HOLIDAY_SPECIAL]),
            "special_holiday_hours_pay": _holiday_pay(HOLIDAY_SPECIAL),
            "leaves_pay": money(self.leaves_pay),
        }


def _parse_date(v) -> Optional[date]:
    if v is None or v == "":
        return None
    if isinstance(v, date):
        return v
    dt = to_datetime(v)
    return dt.date() if dt else None


def record_date(record) -> Optional[date]:
    """Calendar day of a record: expected clock-in day, falling back to the stored date."""
    exp_in = to_datetime(getattr(record, "expected_clock_in", None), getattr(record, "date", None))
    if exp_in is not None:
        return exp_in.date()
    return _parse_date(getattr(record, "date", None))


def _holiday_index(holidays: Iterable) -> Dict[date, str]:
    out: Dict[date, str] = {}
    for h in holidays or []:
        d = _parse_date(getattr(h, "date", None))
        htype = getattr(h, "type", None)
        if d is None or htype not in HOLIDAY_TYPES:
            continue
        # a regular holiday outranks a special one on the same day
        if out.get(d) != HOLIDAY_REGULAR:
            out[d] = htype
    return out


def reconcile(records: Iterable, holidays: Iterable, rules: AttendanceRules,
              leaves: Optional[List[Dict[str, Any]]] = None) -> AttendanceSummary:
    s = AttendanceSummary()
    holiday_on = _holiday_index(holidays)
    day_minutes = dec(rules.working_hours_per_day) * SIXTY
    seen_dates = set()

    for rec in records:
        s.record_count += 1
        on_day = record_date(rec)
        if on_day is not None:
            seen_dates.add(on_day)

        exp_in = to_datetime(getattr(rec, "expected_clock_in", None), on_day)
        exp_out = to_datetime(getattr(rec, "expected_clock_out", None), on_day)
        clock_in = to_datetime(getattr(rec, "clock_in", None), on_day)
        clock_out = to_datetime(getattr(rec, "clock_out", None), on_day)

        exp_out = _roll_overnight(exp_in, exp_out)
        clock_out = _roll_overnight(clock_in, clock_out)

        htype = holiday_on.get(on_day) if on_day else None
        if htype and exp_in and exp_out:
            s.holiday_hours[htype] += hours_between(exp_in, exp_out)

        day = {
            "date": on_day.isoformat() if on_day else None,
            "holiday": htype,
            "worked_minutes": 0,
            "late_minutes": 0,
            "undertime_minutes": 0,
            "overtime_minutes": 0,
            "absent_minutes": 0.0,
        }

        if clock_in is None or clock_out is None:
            # both missing is a plain absence; one-sided punches count the same
            s.absent_days += 1
            s.absent_minutes += day_minutes
            day["absent_minutes"] = float(day_minutes)
            if (clock_in is None) != (clock_out is None):
                log.info("[attendance.reconcile] one-sided punch on %s treated as absent", day["date"])
            s.days.append(day)
            continue

        worked = minutes_between(clock_in, clock_out)
        s.worked_minutes += worked
        day["worked_minutes"] = worked

        if htype:
            s.holiday_hours_worked[htype] += hours_between(clock_in, clock_out)

        if exp_in and exp_out:
            late = minutes_late(clock_in, exp_in, rules.grace_period_minutes)
            under = minutes_early(clock_out, exp_out)
            over = minutes_late(clock_out, exp_out, rules.minimum_overtime_minutes)
            s.late_minutes += late
            s.undertime_minutes += under
            s.overtime_minutes += over
            day.update(late_minutes=late, undertime_minutes=under, overtime_minutes=over)

        s.days.append(day)

    _match_leaves(s, leaves, seen_dates, rules.hourly_rate)
    return s


def _roll_overnight(start, end):
    """Same-day end earlier than start is a night shift ending the next day."""
    if start and end and end < start and end.date() == start.date():
        return end + timedelta(days=1)
    return end


def _match_leaves(s: AttendanceSummary, leaves, record_dates, hourly_rate: Decimal) -> None:
    """Each leave line whose date has a time record is paid once at hours x hourly_rate."""
    for leave in leaves or []:
        if not isinstance(leave, dict):
            continue
        on_day = _parse_date(leave.get("date"))
        if on_day is None or on_day not in record_dates:
            continue
        pay = money(dec(leave.get("hours")) * hourly_rate)
        line = dict(leave)
        line["date"] = on_day.isoformat()
        line["pay"] = to_json_number(pay)
        s.leaves.append(line)
        s.leaves_pay += pay
