from __future__ import annotations
from decimal import Decimal

from flask import Blueprint, request, jsonify

from payroll_api.common.auth import requires_perms
from payroll_api.models.employee import Employee
from payroll_api.services.salary_profile import initialize_salary_profile

bp = Blueprint("salary_profiles", __name__, url_prefix="/api/v1/employees")

_NUMERIC = (
    "basic_salary", "daily_rate", "hourly_rate",
    "working_hours_per_day", "working_days_per_week",
    "overtime_rate", "regular_holiday_rate", "special_holiday_rate",
)
_LINES = ("allowances", "commissions", "other_compensations")

# ---------- helpers ----------
def _ok(data=None, status=200, **meta):
    payload = {"success": True, "data": data}
    if meta:
        payload["meta"] = meta
    return jsonify(payload), status

def _fail(message, status=400, code=None, detail=None):
    payload = {"success": False, "error": {"message": message}}
    if code:
        payload["error"]["code"] = code
    if detail:
        payload["error"]["detail"] = detail
    return jsonify(payload), status

def _dec(x):
    if x is None or x == "":
        return None
    try:
        return Decimal(str(x))
    except Exception:
        return None

def _num_to_float(v):
    try:
        return float(v) if v is not None else None
    except Exception:
        return None

def _row(p):
    out = {"employee_id": p.employee_id}
    for k in _NUMERIC:
        out[k] = _num_to_float(getattr(p, k))
    for k in _LINES:
        out[k] = getattr(p, k) or []
    return out

# ---------- routes ----------
@bp.get("/<int:employee_id>/salary-profile")
@requires_perms("payroll.profile.read")
def get_profile(employee_id: int):
    emp = Employee.query.get_or_404(employee_id)
    if emp.salary_profile is None:
        return _fail("Salary profile not found", 404)
    return _ok(_row(emp.salary_profile))

@bp.put("/<int:employee_id>/salary-profile")
@requires_perms("payroll.profile.write")
def put_profile(employee_id: int):
    emp = Employee.query.get_or_404(employee_id)
    j = request.get_json(silent=True) or {}

    data = {}
    for k in _NUMERIC:
        if k in j:
            v = _dec(j.get(k))
            if v is None:
                return _fail(f"{k} must be numeric", 422)
            data[k] = v
    for k in _LINES:
        if k in j:
            if not isinstance(j[k], list):
                return _fail(f"{k} must be an array", 422)
            data[k] = j[k]
    if emp.salary_profile is None and "basic_salary" not in data:
        return _fail("basic_salary is required", 422)

    prof = initialize_salary_profile(emp, data)
    return _ok(_row(prof))
