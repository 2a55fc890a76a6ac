import os
from datetime import date, datetime
from decimal import Decimal

import pytest

from payroll_api import create_app
from payroll_api.extensions import db
from payroll_api.models.master import Company, CompanySetting
from payroll_api.models.employee import Employee, SalaryProfile
from payroll_api.models.attendance import TimeRecord
from payroll_api.models.payroll.period import Period


@pytest.fixture(scope="function")
def app():
    os.environ["DATABASE_URL"] = "sqlite:///:memory:"
    app = create_app()
    app.config["TESTING"] = True
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope="function")
def session(app):
    yield db.session


@pytest.fixture
def company(session):
    c = Company(code="T1", name="Test Co")
    session.add(c); session.commit()
    return c


@pytest.fixture
def employee(session, company):
    """Contract employee (rates taken verbatim): 20000/month, 100/hour, 8h day."""
    e = Employee(company_id=company.id, code="E001", email="e1@test.local",
                 first_name="Test", last_name="Emp", employment_type="contract")
    session.add(e); session.commit()
    session.add(SalaryProfile(
        employee_id=e.id,
        basic_salary=Decimal("20000"),
        daily_rate=Decimal("800"),
        hourly_rate=Decimal("100"),
        working_hours_per_day=Decimal("8"),
        overtime_rate=Decimal("1"),
        regular_holiday_rate=Decimal("1"),
        special_holiday_rate=Decimal("0.3"),
        allowances=[{"name": "Rice", "pay": 1000}],
        commissions=[],
        other_compensations=[{"name": "Reimbursement", "pay": 200}],
    ))
    session.commit()
    return e


@pytest.fixture
def period(session, company):
    p = Period(company_id=company.id, name="Jan 1-15", company_period_number=1, type="semi-monthly",
               start_date=date(2025, 1, 1), end_date=date(2025, 1, 15))
    session.add(p); session.commit()
    return p


def make_setting(session, company, grace=0, min_ot=0, cycle="semi-monthly"):
    s = CompanySetting(company_id=company.id, period_cycle=cycle,
                       grace_period_minutes=grace, minimum_overtime_minutes=min_ot)
    session.add(s); session.commit()
    return s


def punch(session, employee, day, clock_in="09:00", clock_out="17:00", exp_in="09:00", exp_out="17:00"):
    """Add a time record; clock_in/clock_out None => absent."""
    def _at(hhmm):
        if hhmm is None:
            return None
        h, m = hhmm.split(":")
        return datetime(day.year, day.month, day.day, int(h), int(m))

    r = TimeRecord(employee_id=employee.id, date=day,
                   expected_clock_in=_at(exp_in), expected_clock_out=_at(exp_out),
                   clock_in=_at(clock_in), clock_out=_at(clock_out))
    session.add(r); session.commit()
    return r
