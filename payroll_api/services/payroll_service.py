# payroll_api/services/payroll_service.py
"""
Payroll generation for one (employee, period).

    Validating -> Computing -> Persisted
         \\            \\
          +-> Failed    +-> Failed        (nothing written)

`generate` never raises for validation or collaborator failures; it returns
Ok(payroll) or Err(error) so callers can branch without try/except.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Any, Dict, Optional, Union
import logging

from flask import current_app, has_app_context

from payroll_api.extensions import db
from payroll_api.common.errors import (
    PayrollError, NotFound, EmployeeCompanyMismatch, MissingSalaryProfile,
    NoTimeRecords, InvalidPeriodState,
)
from payroll_api.models.employee import Employee
from payroll_api.models.master import CompanySetting, PERIOD_WEEKLY, PERIOD_SEMI_MONTHLY, PERIOD_MONTHLY
from payroll_api.models.payroll.period import Period, STATUS_PENDING
from payroll_api.models.payroll.payroll import Payroll

from .attendance_reconciler import AttendanceRules, reconcile
from .compensation import Compensations, assemble
from .contributions import calculate_contributions, default_providers
from .tax import StatTableTaxProvider, calculate_withholding
from .ytd import YTD_FIGURES, accumulate, exclude, figures_of
from .sources import TimeRecordSource, HolidaySource, YTDStore, PayrollStore
from .locks import KeyedLock
from .numbers import dec, money

log = logging.getLogger(__name__)

CYCLE_DIVISOR = {
    PERIOD_WEEKLY: 4,
    PERIOD_SEMI_MONTHLY: 2,
    PERIOD_MONTHLY: 1,
}

_generation_locks = KeyedLock()


@dataclass(frozen=True)
class Ok:
    payroll: Payroll
    ok = True


@dataclass(frozen=True)
class Err:
    error: PayrollError
    ok = False


GenerationResult = Union[Ok, Err]


def _cfg(key: str, default):
    if has_app_context():
        return current_app.config.get(key, default)
    return default


class PayrollService:
    def __init__(self, sss=None, pagibig=None, philhealth=None, tax=None,
                 time_records: Optional[TimeRecordSource] = None,
                 holidays: Optional[HolidaySource] = None,
                 ytd_store: Optional[YTDStore] = None,
                 payroll_store: Optional[PayrollStore] = None):
        d_sss, d_pagibig, d_philhealth = default_providers()
        self.sss = sss or d_sss
        self.pagibig = pagibig or d_pagibig
        self.philhealth = philhealth or d_philhealth
        self.tax = tax or StatTableTaxProvider()
        self.time_records = time_records or TimeRecordSource()
        self.holidays = holidays or HolidaySource()
        self.ytd_store = ytd_store or YTDStore()
        self.payroll_store = payroll_store or PayrollStore()

    # ---------- public ----------

    def generate(self, period_id: int, employee_id: int,
                 overrides: Optional[Dict[str, Any]] = None) -> GenerationResult:
        with _generation_locks.hold((employee_id, period_id)):
            try:
                payroll = self._generate(period_id, employee_id, overrides or {})
                db.session.commit()
            except PayrollError as e:
                db.session.rollback()
                log.warning("[payroll.generate] %s employee=%s period=%s: %s",
                            e.code, e.employee_id, e.period_id, e.message)
                return Err(e)
            except Exception:
                db.session.rollback()
                raise

        log.info("[payroll.generate] employee=%s period=%s gross=%s net=%s",
                 employee_id, period_id, payroll.gross_income, payroll.net_income)
        return Ok(payroll)

    # ---------- validating ----------

    def _validate(self, period_id: int, employee_id: int):
        period = db.session.get(Period, period_id)
        if period is None:
            raise NotFound(f"Period {period_id} not found", employee_id=employee_id, period_id=period_id)
        employee = db.session.get(Employee, employee_id)
        if employee is None:
            raise NotFound(f"Employee {employee_id} not found", employee_id=employee_id, period_id=period_id)
        if employee.company_id != period.company_id:
            raise EmployeeCompanyMismatch(
                f"Employee {employee_id} does not belong to company {period.company_id}",
                employee_id=employee_id, period_id=period_id)
        if period.status != STATUS_PENDING:
            raise InvalidPeriodState(f"Period is already {period.status}",
                                     employee_id=employee_id, period_id=period_id)

        profile = employee.salary_profile
        if profile is None:
            raise MissingSalaryProfile(
                f"Salary profile of employee {employee.full_name} (ID:{employee.id}) not found.",
                employee_id=employee_id, period_id=period_id)

        records = self.time_records.for_employee_in_range(employee.id, period.start_date, period.end_date)
        if not records:
            raise NoTimeRecords(f"No time records found for {employee.full_name}",
                                employee_id=employee_id, period_id=period_id)
        return period, employee, profile, records

    def _settings(self, company_id: int):
        s = CompanySetting.query.filter_by(company_id=company_id).first()
        if s is not None:
            return s.grace_period_minutes or 0, s.minimum_overtime_minutes or 0
        return (int(_cfg("PAYROLL_DEFAULT_GRACE_MINUTES", 0)),
                int(_cfg("PAYROLL_DEFAULT_MIN_OVERTIME_MINUTES", 0)))

    # ---------- computing ----------

    def _generate(self, period_id: int, employee_id: int, overrides: Dict[str, Any]) -> Payroll:
        period, employee, profile, records = self._validate(period_id, employee_id)
        ctx = {"employee_id": employee.id, "period_id": period.id}

        # YTD row is locked first and read once; every read below happens under that lock.
        # an earlier run of this same period is taken out of the base
        prior = self.ytd_store.get(employee.id, for_update=True)
        later = self.payroll_store.later_than(period, employee.id)
        if later is not None:
            # the snapshot already holds that later period, so this one can no longer be (re)generated
            raise InvalidPeriodState(
                f"Employee already has a payroll for later period {later.period_id}",
                employee_id=employee.id, period_id=period.id)
        previous = self.payroll_store.get(period.id, employee.id)
        base = exclude(prior, figures_of(previous) if previous is not None else None)

        grace, min_ot = self._settings(period.company_id)
        holidays = self.holidays.in_range(period.start_date, period.end_date, period.company_id)
        divisor = CYCLE_DIVISOR[period.type]
        basic_salary = money(dec(profile.basic_salary) / divisor)

        # 1) attendance
        rules = AttendanceRules.from_profile(profile, grace, min_ot)
        attendance = reconcile(records, holidays, rules, overrides.get("leaves"))
        figures: Dict[str, Decimal] = {"basic_salary": basic_salary, **attendance.figures(rules)}

        # 2) compensations
        comps = assemble(profile, overrides, divisor)
        figures.update(
            total_allowances=comps.allowances.total,
            total_commissions=comps.commissions.total,
            total_other_compensations=comps.other_compensations.total,
        )

        # 3) statutory contributions on the pro-rated basic salary
        contrib = calculate_contributions(
            basic_salary,
            _bind(self.sss, period), _bind(self.pagibig, period), _bind(self.philhealth, period),
            **ctx,
        )
        figures.update(contrib.figures())

        figures["gross_income"] = money(
            basic_salary
            - figures["absent_deductions"]
            - figures["undertime_deductions"]
            - figures["late_deductions"]
            + figures["overtime_pay"]
        )
        figures["taxable_income"] = money(
            figures["gross_income"]
            + figures["leaves_pay"]
            + figures["total_allowances"]
            + figures["total_commissions"]
            - figures["total_contributions"]
        )

        # 4) withholding tax (this period only)
        figures["withheld_tax"] = calculate_withholding(
            figures["taxable_income"], period.type, _bind(self.tax, period), **ctx)
        figures["net_income"] = money(
            figures["taxable_income"]
            - figures["withheld_tax"]
            + figures["total_other_compensations"]
        )

        # 5) YTD
        ytd = accumulate(base, figures)
        comps = _with_ytd(comps, ytd)

        payroll = self.payroll_store.upsert(period.id, employee.id, self._fields(figures, ytd, attendance, comps))
        self.ytd_store.put(employee.id, ytd)
        return payroll

    @staticmethod
    def _fields(figures, ytd, attendance, comps: Compensations) -> Dict[str, Any]:
        fields: Dict[str, Any] = {}
        for name in YTD_FIGURES:
            fields[name] = figures[name]
            fields[name + "_ytd"] = ytd.get(name)
        fields["leaves"] = attendance.leaves
        fields["allowances"] = comps.allowances.items
        fields["commissions"] = comps.commissions.items
        fields["other_compensations"] = comps.other_compensations.items
        fields["calc_meta"] = {"attendance_days": attendance.days, "record_count": attendance.record_count}
        return fields


def _bind(provider, period: Period):
    bind = getattr(provider, "bind", None)
    return bind(period.end_date) if callable(bind) else provider


def _with_ytd(comps: Compensations, ytd) -> Compensations:
    return Compensations(
        allowances=replace(comps.allowances, total_ytd=ytd.get("total_allowances")),
        commissions=replace(comps.commissions, total_ytd=ytd.get("total_commissions")),
        other_compensations=replace(comps.other_compensations, total_ytd=ytd.get("total_other_compensations")),
    )
