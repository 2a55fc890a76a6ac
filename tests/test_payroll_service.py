from datetime import date
from decimal import Decimal

import pytest

from payroll_api.common.errors import (
    MissingSalaryProfile, NoTimeRecords, InvalidPeriodState, ContributionProviderError,
    TaxProviderError, NotFound, EmployeeCompanyMismatch,
)
from payroll_api.models.attendance import Holiday
from payroll_api.models.employee import Employee, SalaryProfile
from payroll_api.models.master import Company
from payroll_api.models.payroll.payroll import Payroll
from payroll_api.models.payroll.period import Period
from payroll_api.models.payroll.ytd import EmployeeYTD
from payroll_api.services.contributions import ContributionProvider
from payroll_api.services.payroll_service import PayrollService, Ok, Err
from payroll_api.services.periods import complete_period
from payroll_api.services.sources import YTDStore, PayrollStore
from payroll_api.services.tax import TaxProvider

from conftest import make_setting, punch


class Fixed(ContributionProvider):
    def __init__(self, amount):
        self.amount = Decimal(str(amount))

    def compute(self, basic_salary):
        return self.amount


class Boom(ContributionProvider):
    name = "SSS"

    def compute(self, basic_salary):
        raise RuntimeError("sss table unavailable")


class TenPercent(TaxProvider):
    def compute(self, taxable_income, cycle_type):
        return taxable_income * Decimal("0.10")


class BrokenTax(TaxProvider):
    def compute(self, taxable_income, cycle_type):
        raise ValueError(f"no bracket for {cycle_type}")


def _service(**kw):
    args = dict(sss=Fixed(800), pagibig=Fixed(100), philhealth=Fixed(200), tax=TenPercent())
    args.update(kw)
    return PayrollService(**args)


def _assert_income_invariants(p):
    assert p.gross_income == (p.basic_salary - p.absent_deductions - p.undertime_deductions
                              - p.late_deductions + p.overtime_pay)
    assert p.taxable_income == (p.gross_income + p.leaves_pay + p.total_allowances
                                + p.total_commissions - p.total_contributions)
    assert p.net_income == p.taxable_income - p.withheld_tax + p.total_other_compensations


def test_perfect_attendance(session, employee, period):
    punch(session, employee, date(2025, 1, 6))
    punch(session, employee, date(2025, 1, 7))

    res = _service().generate(period.id, employee.id)
    assert isinstance(res, Ok) and res.ok
    p = res.payroll
    assert p.basic_salary == Decimal("10000.00")
    assert p.gross_income == p.basic_salary
    assert p.total_allowances == Decimal("500.00")
    assert p.total_other_compensations == Decimal("100.00")
    assert p.total_contributions == Decimal("1100.00")
    assert p.taxable_income == Decimal("9400.00")
    assert p.withheld_tax == Decimal("940.00")
    assert p.net_income == Decimal("8560.00")
    assert p.expected_hours_worked == Decimal("16.00")
    assert p.hours_worked == Decimal("16.00")
    _assert_income_invariants(p)

    # first run: every YTD equals the period figure
    assert p.gross_income_ytd == p.gross_income
    assert p.withheld_tax_ytd == p.withheld_tax
    ytd = EmployeeYTD.query.filter_by(employee_id=employee.id).one()
    assert ytd.net_income == Decimal("8560.00")


def test_deductions_and_grace(session, company, employee, period):
    make_setting(session, company, grace=10)
    punch(session, employee, date(2025, 1, 6), clock_in="09:15")
    punch(session, employee, date(2025, 1, 7), clock_in=None, clock_out=None)

    p = _service().generate(period.id, employee.id).payroll
    assert p.late_minutes == Decimal("5")
    assert p.late_deductions == Decimal("8.33")
    assert p.absent_minutes == Decimal("480")
    assert p.absent_deductions == Decimal("800.00")
    assert p.gross_income == Decimal("9191.67")
    _assert_income_invariants(p)


def test_holiday_premium_is_reported(session, employee, period):
    session.add(Holiday(name="New Year", date=date(2025, 1, 1), type="regular"))
    session.commit()
    punch(session, employee, date(2025, 1, 1))

    p = _service().generate(period.id, employee.id).payroll
    assert p.regular_holiday_hours == Decimal("8")
    assert p.regular_holiday_hours_worked == Decimal("8")
    assert p.regular_holiday_hours_pay == Decimal("1600.00")
    assert p.gross_income == p.basic_salary


def test_company_holiday_only_for_its_company(session, employee, period):
    other = Company(code="T2", name="Other")
    session.add(other); session.commit()
    session.add(Holiday(company_id=other.id, name="Foundation Day", date=date(2025, 1, 6), type="special"))
    session.commit()
    punch(session, employee, date(2025, 1, 6))

    p = _service().generate(period.id, employee.id).payroll
    assert p.special_holiday_hours == 0


def test_overrides_and_leaves(session, employee, period):
    punch(session, employee, date(2025, 1, 6))
    overrides = {
        "allowances": [{"name": "Transport", "pay": 750}],
        "leaves": [{"date": "2025-01-06", "hours": 4}, {"date": "2025-01-09", "hours": 8}],
    }
    p = _service().generate(period.id, employee.id, overrides).payroll
    assert p.total_allowances == Decimal("750.00")
    assert p.allowances == [{"name": "Transport", "pay": 750}]
    assert p.leaves_pay == Decimal("400.00")
    assert len(p.leaves) == 1
    _assert_income_invariants(p)


def test_missing_salary_profile(session, company, period):
    e = Employee(company_id=company.id, code="E002", first_name="No", last_name="Profile")
    session.add(e); session.commit()
    punch(session, e, date(2025, 1, 6))

    res = _service().generate(period.id, e.id)
    assert isinstance(res, Err) and not res.ok
    assert isinstance(res.error, MissingSalaryProfile)
    assert res.error.code == "MISSING_SALARY_PROFILE"
    assert res.error.context() == {"employee_id": e.id, "period_id": period.id}
    assert Payroll.query.count() == 0


def test_no_time_records(session, employee, period):
    punch(session, employee, date(2025, 2, 3))  # outside the period
    res = _service().generate(period.id, employee.id)
    assert isinstance(res.error, NoTimeRecords)
    assert Payroll.query.count() == 0


def test_unknown_ids_and_company_mismatch(session, employee, period):
    assert isinstance(_service().generate(9999, employee.id).error, NotFound)
    assert isinstance(_service().generate(period.id, 9999).error, NotFound)

    other = Company(code="T3", name="Elsewhere")
    session.add(other); session.commit()
    foreign = Period(company_id=other.id, company_period_number=1, type="monthly",
                     start_date=date(2025, 1, 1), end_date=date(2025, 1, 31))
    session.add(foreign); session.commit()
    assert isinstance(_service().generate(foreign.id, employee.id).error, EmployeeCompanyMismatch)


def test_completed_period_rejected(session, employee, period):
    punch(session, employee, date(2025, 1, 6))
    assert _service().generate(period.id, employee.id).ok
    complete_period(period)

    res = _service().generate(period.id, employee.id)
    assert isinstance(res.error, InvalidPeriodState)


def test_contribution_failure_persists_nothing(session, employee, period):
    punch(session, employee, date(2025, 1, 6))
    res = _service(sss=Boom()).generate(period.id, employee.id)
    assert isinstance(res.error, ContributionProviderError)
    assert res.error.message == "sss table unavailable"
    assert isinstance(res.error.__cause__, RuntimeError)
    assert Payroll.query.count() == 0
    assert EmployeeYTD.query.count() == 0


def test_tax_failure_persists_nothing(session, employee, period):
    punch(session, employee, date(2025, 1, 6))
    res = _service(tax=BrokenTax()).generate(period.id, employee.id)
    assert isinstance(res.error, TaxProviderError)
    assert res.error.message == "no bracket for semi-monthly"
    assert Payroll.query.count() == 0


def test_regeneration_is_idempotent_for_ytd(session, employee, period):
    punch(session, employee, date(2025, 1, 6))
    first = _service().generate(period.id, employee.id).payroll
    first_id, first_net = first.id, first.net_income

    again = _service().generate(period.id, employee.id).payroll
    assert again.id == first_id
    assert Payroll.query.count() == 1
    assert again.net_income == first_net
    assert again.net_income_ytd == first_net
    assert EmployeeYTD.query.filter_by(employee_id=employee.id).one().net_income == first_net

    # a changed input replaces, not adds to, this period's contribution
    changed = _service().generate(period.id, employee.id, {"commissions": [{"name": "Deal", "pay": 1000}]}).payroll
    assert changed.total_commissions == Decimal("1000.00")
    assert changed.total_commissions_ytd == Decimal("1000.00")
    assert changed.gross_income_ytd == changed.gross_income


def test_ytd_accumulates_across_periods(session, company, employee, period):
    punch(session, employee, date(2025, 1, 6))
    punch(session, employee, date(2025, 1, 20))
    second = Period(company_id=company.id, company_period_number=2, type="semi-monthly",
                    start_date=date(2025, 1, 16), end_date=date(2025, 1, 31))
    session.add(second); session.commit()

    p1 = _service().generate(period.id, employee.id).payroll
    tax1, net1 = p1.withheld_tax, p1.net_income
    p2 = _service().generate(second.id, employee.id).payroll
    assert p2.withheld_tax == tax1
    assert p2.withheld_tax_ytd == tax1 + p2.withheld_tax
    assert p2.net_income_ytd == net1 + p2.net_income
    assert p2.total_allowances_ytd == Decimal("1000.00")
    assert p2.basic_salary_ytd == Decimal("20000.00")


def test_weekly_and_monthly_divisors(session, company, employee):
    punch(session, employee, date(2025, 3, 3))
    weekly = Period(company_id=company.id, company_period_number=5, type="weekly",
                    start_date=date(2025, 3, 3), end_date=date(2025, 3, 9))
    session.add(weekly); session.commit()
    p = _service().generate(weekly.id, employee.id).payroll
    assert p.basic_salary == Decimal("5000.00")
    assert p.total_allowances == Decimal("250.00")


def test_default_providers_read_stat_tables(session, employee, period):
    from payroll_api.models.payroll.stat_table import StatTable
    flat = {"slabs": [{"min": 0, "max": None, "amount": 100}]}
    session.add_all([
        StatTable(type="SSS", effective_from=date(2025, 1, 1), value_json=flat),
        StatTable(type="PAGIBIG", effective_from=date(2025, 1, 1), value_json=flat),
        StatTable(type="PHILHEALTH", effective_from=date(2025, 1, 1), value_json=flat),
        StatTable(type="TAX", cycle="semi-monthly", effective_from=date(2025, 1, 1),
                  value_json={"slabs": [{"min": 0, "max": None, "base_tax": 0, "rate": 0}]}),
    ])
    session.commit()
    punch(session, employee, date(2025, 1, 6))

    p = PayrollService().generate(period.id, employee.id).payroll
    assert p.total_contributions == Decimal("300.00")
    assert p.withheld_tax == Decimal("0.00")


class RecordingYTDStore(YTDStore):
    def __init__(self, calls):
        self.calls = calls

    def get(self, employee_id, for_update=False):
        self.calls.append(("ytd.get", for_update))
        return super().get(employee_id, for_update=for_update)


class RecordingPayrollStore(PayrollStore):
    def __init__(self, calls):
        self.calls = calls

    def get(self, period_id, employee_id):
        self.calls.append(("payroll.get", None))
        return super().get(period_id, employee_id)

    def later_than(self, period, employee_id):
        self.calls.append(("payroll.later_than", None))
        return super().later_than(period, employee_id)


def test_ytd_locked_before_previous_run_is_read(session, employee, period):
    punch(session, employee, date(2025, 1, 6))
    calls = []
    svc = _service(ytd_store=RecordingYTDStore(calls), payroll_store=RecordingPayrollStore(calls))
    assert svc.generate(period.id, employee.id).ok

    names = [c[0] for c in calls]
    assert names[0] == "ytd.get"
    assert calls[0][1] is True
    assert names.index("ytd.get") < names.index("payroll.later_than") < names.index("payroll.get")


def test_earlier_period_locked_once_later_period_generated(session, company, employee, period):
    punch(session, employee, date(2025, 1, 6))
    punch(session, employee, date(2025, 1, 20))
    second = Period(company_id=company.id, company_period_number=2, type="semi-monthly",
                    start_date=date(2025, 1, 16), end_date=date(2025, 1, 31))
    session.add(second); session.commit()

    first = _service().generate(period.id, employee.id).payroll
    first_basic_ytd = first.basic_salary_ytd
    p2 = _service().generate(second.id, employee.id).payroll
    p2_id, p2_basic_ytd = p2.id, p2.basic_salary_ytd

    res = _service().generate(period.id, employee.id)
    assert isinstance(res.error, InvalidPeriodState)
    assert res.error.context() == {"employee_id": employee.id, "period_id": period.id}

    # nothing moved: earlier payroll, later payroll and the snapshot keep their values
    assert Payroll.query.filter_by(period_id=period.id).one().basic_salary_ytd == first_basic_ytd
    assert session.get(Payroll, p2_id).basic_salary_ytd == p2_basic_ytd == Decimal("20000.00")
    assert EmployeeYTD.query.filter_by(employee_id=employee.id).one().basic_salary == Decimal("20000.00")

    # the latest period can still be regenerated
    assert _service().generate(second.id, employee.id).payroll.basic_salary_ytd == Decimal("20000.00")


def test_out_of_order_first_generation_rejected(session, company, employee, period):
    punch(session, employee, date(2025, 1, 6))
    punch(session, employee, date(2025, 1, 20))
    second = Period(company_id=company.id, company_period_number=2, type="semi-monthly",
                    start_date=date(2025, 1, 16), end_date=date(2025, 1, 31))
    session.add(second); session.commit()

    assert _service().generate(second.id, employee.id).ok
    assert isinstance(_service().generate(period.id, employee.id).error, InvalidPeriodState)
    assert Payroll.query.filter_by(period_id=period.id).count() == 0
