from __future__ import annotations
from datetime import date

from flask import Blueprint, request, jsonify

from payroll_api.common.auth import requires_perms
from payroll_api.common.paging import page_limit, int_arg
from payroll_api.common.errors import PayrollError
from payroll_api.models.payroll.period import Period
from payroll_api.services.periods import create_period, complete_period, cancel_period

bp = Blueprint("periods", __name__, url_prefix="/api/v1/periods")

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

def _d(s):
    if not s:
        return None
    try:
        return date.fromisoformat(str(s))
    except Exception:
        return None

def _row(x: Period):
    return {
        "id": x.id,
        "company_id": x.company_id,
        "name": x.name,
        "company_period_number": x.company_period_number,
        "type": x.type,
        "start_date": x.start_date.isoformat() if x.start_date else None,
        "end_date": x.end_date.isoformat() if x.end_date else None,
        "status": x.status,
        "completed_at": x.completed_at.isoformat() if x.completed_at else None,
    }

# ---------- routes ----------
@bp.post("")
@requires_perms("payroll.period.write")
def create():
    j = request.get_json(silent=True) or {}
    company_id = j.get("company_id")
    start = _d(j.get("start_date"))
    end = _d(j.get("end_date"))
    if not (company_id and start and end):
        return _fail("company_id, start_date, end_date are required", 422)
    try:
        p = create_period(int(company_id), start, end, period_type=j.get("type"), name=j.get("name"))
    except PayrollError as e:
        return _fail(e.message, e.status_code, code=e.code)
    except ValueError as e:
        return _fail(str(e), 422)
    return _ok(_row(p), 201)

@bp.get("")
@requires_perms("payroll.period.read")
def list_periods():
    q = Period.query
    try:
        company_id = int_arg("company_id")
    except ValueError:
        return _fail("company_id must be integer", 422)
    if company_id is not None:
        q = q.filter(Period.company_id == company_id)
    if request.args.get("status"):
        q = q.filter(Period.status == request.args["status"])
    page, size = page_limit()
    total = q.count()
    rows = q.order_by(Period.start_date.desc(), Period.id.desc()).offset((page - 1) * size).limit(size).all()
    return _ok([_row(x) for x in rows], page=page, size=size, total=total)

@bp.get("/<int:period_id>")
@requires_perms("payroll.period.read")
def get_period(period_id: int):
    return _ok(_row(Period.query.get_or_404(period_id)))

@bp.post("/<int:period_id>/complete")
@requires_perms("payroll.period.write")
def complete(period_id: int):
    p = Period.query.get_or_404(period_id)
    try:
        complete_period(p)
    except PayrollError as e:
        return _fail(e.message, e.status_code, code=e.code)
    return _ok(_row(p))

@bp.post("/<int:period_id>/cancel")
@requires_perms("payroll.period.write")
def cancel(period_id: int):
    p = Period.query.get_or_404(period_id)
    try:
        cancel_period(p)
    except PayrollError as e:
        return _fail(e.message, e.status_code, code=e.code)
    return _ok(_row(p))
