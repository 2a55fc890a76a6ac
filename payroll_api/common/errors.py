# payroll_api/common/errors.py
from flask import Blueprint, current_app
from werkzeug.exceptions import HTTPException
from sqlalchemy.exc import IntegrityError
from payroll_api.common.http import fail

bp_errors = Blueprint("errors", __name__)


# ---------- payroll domain errors ----------

class PayrollError(Exception):
    """
    Base for every failure of a single payroll generation.

    Carries a stable `code` plus the (employee, period) context so callers
    and logs can tell which generation failed without parsing the message.
    """
    code = "PAYROLL_ERROR"
    status_code = 400

    def __init__(self, message, employee_id=None, period_id=None):
        super().__init__(message)
        self.message = message
        self.employee_id = employee_id
        self.period_id = period_id

    def context(self) -> dict:
        return {"employee_id": self.employee_id, "period_id": self.period_id}

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message, **self.context()}


class NotFound(PayrollError):
    code = "NOT_FOUND"
    status_code = 404


class EmployeeCompanyMismatch(PayrollError):
    code = "EMPLOYEE_COMPANY_MISMATCH"
    status_code = 422


class MissingSalaryProfile(PayrollError):
    code = "MISSING_SALARY_PROFILE"
    status_code = 422


class NoTimeRecords(PayrollError):
    code = "NO_TIME_RECORDS"
    status_code = 422


class InvalidPeriodState(PayrollError):
    code = "INVALID_PERIOD_STATE"
    status_code = 409


class ContributionProviderError(PayrollError):
    code = "CONTRIBUTION_PROVIDER_ERROR"
    status_code = 502

    def __init__(self, message, provider=None, employee_id=None, period_id=None):
        super().__init__(message, employee_id=employee_id, period_id=period_id)
        self.provider = provider

    def context(self) -> dict:
        return {**super().context(), "provider": self.provider}


class TaxProviderError(PayrollError):
    code = "TAX_PROVIDER_ERROR"
    status_code = 502


# ---------- app-wide handlers ----------

@bp_errors.app_errorhandler(HTTPException)
def _http(e: HTTPException):
    return fail(message=e.description or "HTTP error", status=e.code or 400)


@bp_errors.app_errorhandler(IntegrityError)
def _integrity(e: IntegrityError):
    # 409 for unique/FK violations
    return fail(message="Conflict / integrity error", status=409, detail=str(e.orig) if getattr(e, "orig", None) else str(e))


@bp_errors.app_errorhandler(PayrollError)
def _payroll_error(e: PayrollError):
    return fail(message=e.message, status=e.status_code, code=e.code, detail=e.context())


@bp_errors.app_errorhandler(Exception)
def _unhandled(e: Exception):
    current_app.logger.exception(e)
    return fail(message="Internal Server Error", status=500)
