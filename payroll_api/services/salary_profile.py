# payroll_api/services/salary_profile.py
from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict

from payroll_api.extensions import db
from payroll_api.models.employee import Employee, SalaryProfile, FULL_TIME
from .numbers import dec

MONTHS_12 = Decimal("12")
EIGHT_HOURS_PER_DAY = Decimal("8")
FIVE_DAYS_PER_WEEK = Decimal("5")
# working days in a year on a five-day week
FIVE_DAYS_PER_WEEK_WORK_DAYS = Decimal("261")

_FIELDS = (
    "basic_salary", "daily_rate", "hourly_rate",
    "working_hours_per_day", "working_days_per_week",
    "overtime_rate", "regular_holiday_rate", "special_holiday_rate",
    "allowances", "commissions", "other_compensations",
)


def derive_rates(employee: Employee, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Full-time employees get their daily/hourly rates from the monthly basic salary
    (basic x 12 / 261, then / 8); anyone else keeps the rates supplied.
    """
    out = dict(data)
    if employee.employment_type == FULL_TIME:
        out["working_hours_per_day"] = out.get("working_hours_per_day") or EIGHT_HOURS_PER_DAY
        out["working_days_per_week"] = out.get("working_days_per_week") or FIVE_DAYS_PER_WEEK
        basic = out.get("basic_salary")
        if basic is None and employee.salary_profile is not None:
            basic = employee.salary_profile.basic_salary
        daily = dec(basic) * MONTHS_12 / FIVE_DAYS_PER_WEEK_WORK_DAYS
        out["daily_rate"] = daily.quantize(Decimal("0.0001"))
        out["hourly_rate"] = (daily / EIGHT_HOURS_PER_DAY).quantize(Decimal("0.0001"))
    return out


def initialize_salary_profile(employee: Employee, data: Dict[str, Any]) -> SalaryProfile:
    data = derive_rates(employee, data)
    prof = employee.salary_profile
    if prof is None:
        prof = SalaryProfile(employee_id=employee.id)
        db.session.add(prof)
    for k in _FIELDS:
        if k in data and data[k] is not None:
            setattr(prof, k, data[k])
    db.session.commit()
    return prof
