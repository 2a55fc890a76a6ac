from __future__ import annotations
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Dict

from flask import Blueprint, request, jsonify

from payroll_api.common.auth import requires_perms
from payroll_api.common.paging import page_limit, int_arg
from payroll_api.models.payroll.payroll import Payroll
from payroll_api.models.payroll.period import Period
from payroll_api.services.payroll_service import PayrollService, Ok
from payroll_api.services.ytd import YTD_FIGURES

bp = Blueprint("payrolls", __name__, url_prefix="/api/v1/payrolls")

_OVERRIDE_KEYS = ("leaves", "allowances", "commissions", "other_compensations")

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

def _is_number(v) -> bool:
    if isinstance(v, bool) or v is None or v == "":
        return False
    try:
        return Decimal(str(v)).is_finite()
    except (InvalidOperation, ValueError):
        return False

def _check_lines(key: str, items: list):
    """Error message for the first malformed override line, else None."""
    amount_key = "hours" if key == "leaves" else "pay"
    for i, item in enumerate(items):
        if not isinstance(item, dict):
            return f"{key}[{i}] must be an object"
        if not _is_number(item.get(amount_key)):
            return f"{key}[{i}].{amount_key} must be numeric"
        if key == "leaves":
            try:
                date.fromisoformat(str(item.get("date")))
            except ValueError:
                return f"{key}[{i}].date must be YYYY-MM-DD"
    return None

def _num(v):
    return float(v) if v is not None else 0.0

def _row(x: Payroll) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "id": x.id,
        "period_id": x.period_id,
        "employee_id": x.employee_id,
        "employee_name": x.employee.full_name if x.employee else None,
        "leaves": x.leaves or [],
        "allowances": x.allowances or [],
        "commissions": x.commissions or [],
        "other_compensations": x.other_compensations or [],
        "calc_meta": x.calc_meta,
        "created_at": x.created_at.isoformat() if x.created_at else None,
        "updated_at": x.updated_at.isoformat() if x.updated_at else None,
    }
    for name in YTD_FIGURES:
        out[name] = _num(getattr(x, name))
        out[name + "_ytd"] = _num(getattr(x, name + "_ytd"))
    return out

# ---------- routes ----------
@bp.post("")
@requires_perms("payroll.payroll.write")
def generate_payroll():
    """
    Generate (or regenerate) the payroll of one employee for one period.
    Body: {period_id, employee_id, leaves?, allowances?, commissions?, other_compensations?}
    """
    j = request.get_json(silent=True) or {}
    try:
        period_id = int(j.get("period_id"))
        employee_id = int(j.get("employee_id"))
    except Exception:
        return _fail("period_id and employee_id are required integers", 422)

    overrides = {}
    for k in _OVERRIDE_KEYS:
        v = j.get(k)
        if v is None:
            continue
        if not isinstance(v, list):
            return _fail(f"{k} must be an array", 422)
        err = _check_lines(k, v)
        if err:
            return _fail(err, 422)
        overrides[k] = v

    res = PayrollService().generate(period_id, employee_id, overrides)
    if isinstance(res, Ok):
        return _ok(_row(res.payroll), 201)
    e = res.error
    return _fail(e.message, e.status_code, code=e.code, detail=e.context())

@bp.get("")
@requires_perms("payroll.payroll.read")
def list_payrolls():
    q = Payroll.query
    try:
        employee_id = int_arg("employee_id")
        period_id = int_arg("period_id")
        company_id = int_arg("company_id")
    except ValueError:
        return _fail("employee_id, period_id, company_id must be integers", 422)
    if employee_id is not None:
        q = q.filter(Payroll.employee_id == employee_id)
    if period_id is not None:
        q = q.filter(Payroll.period_id == period_id)
    if company_id is not None:
        q = q.join(Period, Period.id == Payroll.period_id).filter(Period.company_id == company_id)

    page, size = page_limit()
    total = q.count()
    rows = q.order_by(Payroll.id.desc()).offset((page - 1) * size).limit(size).all()
    return _ok([_row(x) for x in rows], page=page, size=size, total=total)

@bp.get("/<int:payroll_id>")
@requires_perms("payroll.payroll.read")
def get_payroll(payroll_id: int):
    x = Payroll.query.get_or_404(payroll_id)
    return _ok(_row(x))
