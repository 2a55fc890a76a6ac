# payroll_api/services/periods.py
from __future__ import annotations

from datetime import date, datetime
from typing import Optional
import logging

from sqlalchemy import func

from payroll_api.extensions import db
from payroll_api.common.errors import InvalidPeriodState, NotFound
from payroll_api.models.master import Company, CompanySetting, PERIOD_TYPES, PERIOD_SEMI_MONTHLY
from payroll_api.models.payroll.period import (
    Period, STATUS_PENDING, STATUS_COMPLETED, STATUS_CANCELLED,
)

log = logging.getLogger(__name__)


def create_period(company_id: int, start_date: date, end_date: date,
                  period_type: Optional[str] = None, name: Optional[str] = None) -> Period:
    """
    New pending period. Type defaults to the company's configured cycle;
    company_period_number continues the company's sequence.
    """
    if db.session.get(Company, company_id) is None:
        raise NotFound(f"Company {company_id} not found")
    if end_date < start_date:
        raise ValueError("end_date must be >= start_date")
    if period_type is None:
        s = CompanySetting.query.filter_by(company_id=company_id).first()
        period_type = s.period_cycle if s else PERIOD_SEMI_MONTHLY
    if period_type not in PERIOD_TYPES:
        raise ValueError(f"type must be one of: {', '.join(PERIOD_TYPES)}")

    last = (db.session.query(func.max(Period.company_period_number))
            .filter(Period.company_id == company_id).scalar()) or 0
    p = Period(
        company_id=company_id,
        name=name or f"{start_date.isoformat()} - {end_date.isoformat()}",
        company_period_number=last + 1,
        type=period_type,
        start_date=start_date,
        end_date=end_date,
        status=STATUS_PENDING,
    )
    db.session.add(p)
    db.session.commit()
    return p


def _transition(period: Period, target: str) -> Period:
    if period.status != STATUS_PENDING:
        raise InvalidPeriodState(f"Period is already {period.status}", period_id=period.id)
    period.status = target
    if target == STATUS_COMPLETED:
        period.completed_at = datetime.utcnow()
    db.session.commit()
    log.info("[periods] period=%s -> %s", period.id, target)
    return period


def complete_period(period: Period) -> Period:
    """Post-commit step once every payroll of the period is generated. Completed periods are immutable."""
    return _transition(period, STATUS_COMPLETED)


def cancel_period(period: Period) -> Period:
    return _transition(period, STATUS_CANCELLED)
