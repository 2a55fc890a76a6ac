# payroll_api/services/sources.py
"""SQLAlchemy-backed data access used by payroll generation."""
from __future__ import annotations

from datetime import date
from typing import List, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from payroll_api.extensions import db
from payroll_api.models.attendance import TimeRecord, Holiday
from payroll_api.models.payroll.payroll import Payroll
from payroll_api.models.payroll.period import Period
from payroll_api.models.payroll.ytd import EmployeeYTD
from .ytd import YTDSnapshot, YTD_FIGURES


class TimeRecordSource:
    def for_employee_in_range(self, employee_id: int, start: date, end: date) -> List[TimeRecord]:
        return (
            TimeRecord.query
            .filter(TimeRecord.employee_id == employee_id)
            .filter(TimeRecord.date >= start, TimeRecord.date <= end)
            .order_by(TimeRecord.date.asc(), TimeRecord.expected_clock_in.asc(), TimeRecord.id.asc())
            .all()
        )


class HolidaySource:
    def in_range(self, start: date, end: date, company_id: Optional[int] = None) -> List[Holiday]:
        q = Holiday.query.filter(Holiday.date >= start, Holiday.date <= end)
        if company_id is not None:
            q = q.filter((Holiday.company_id.is_(None)) | (Holiday.company_id == company_id))
        else:
            q = q.filter(Holiday.company_id.is_(None))
        return q.order_by(Holiday.date.asc()).all()


class YTDStore:
    def _row(self, employee_id: int, for_update: bool = False) -> Optional[EmployeeYTD]:
        stmt = select(EmployeeYTD).where(EmployeeYTD.employee_id == employee_id)
        if for_update:
            # row lock on PostgreSQL; a no-op on sqlite
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        return db.session.execute(stmt).scalar_one_or_none()

    def get(self, employee_id: int, for_update: bool = False) -> YTDSnapshot:
        """Zero-valued snapshot when the employee has none yet."""
        if for_update:
            return YTDSnapshot.from_row(self._locked_row(employee_id))
        return YTDSnapshot.from_row(self._row(employee_id))

    def _locked_row(self, employee_id: int) -> Optional[EmployeeYTD]:
        """Lock the snapshot row, creating a zero row first so there is something to lock."""
        row = self._row(employee_id, for_update=True)
        # sqlite has no row locks and serialises writers on its own
        if row is not None or db.session.get_bind().dialect.name == "sqlite":
            return row
        savepoint = db.session.begin_nested()
        try:
            row = EmployeeYTD(employee_id=employee_id, **YTDSnapshot.zero().as_dict())
            db.session.add(row)
            savepoint.commit()
            return row
        except IntegrityError:
            # another transaction created it first
            savepoint.rollback()
            return self._row(employee_id, for_update=True)

    def put(self, employee_id: int, snapshot: YTDSnapshot) -> EmployeeYTD:
        row = self._row(employee_id)
        if row is None:
            row = EmployeeYTD(employee_id=employee_id)
            db.session.add(row)
        for name in YTD_FIGURES:
            setattr(row, name, snapshot.get(name))
        db.session.flush()
        return row


class PayrollStore:
    def get(self, period_id: int, employee_id: int) -> Optional[Payroll]:
        return Payroll.query.filter_by(period_id=period_id, employee_id=employee_id).first()

    def later_than(self, period: Period, employee_id: int) -> Optional[Payroll]:
        """Any payroll of this employee in a period starting after `period` starts."""
        return (
            Payroll.query
            .join(Period, Period.id == Payroll.period_id)
            .filter(Payroll.employee_id == employee_id)
            .filter(Payroll.period_id != period.id)
            .filter(Period.start_date > period.start_date)
            .order_by(Period.start_date.asc())
            .first()
        )

    def upsert(self, period_id: int, employee_id: int, fields: Mapping) -> Payroll:
        """Insert or update keyed by (period_id, employee_id); flushed, not committed."""
        row = self.get(period_id, employee_id)
        if row is None:
            row = Payroll(period_id=period_id, employee_id=employee_id)
            db.session.add(row)
        for k, v in fields.items():
            setattr(row, k, v)
        db.session.flush()
        return row
