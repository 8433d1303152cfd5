# ems_api/blueprints/inactivity.py
from __future__ import annotations

from datetime import date

from flask import Blueprint, request
from flask_jwt_extended import jwt_required

from ems_api.common.auth import current_company_id
from ems_api.common.errors import InvalidInput
from ems_api.common.http import ok, fail
from ems_api.services.workforce_service import WorkforceStateService

bp = Blueprint("inactivity", __name__, url_prefix="/api/v1/inactivity")

workforce = WorkforceStateService()


def _payload():
    data = request.get_json(silent=True, force=True)
    return data if isinstance(data, dict) else {}


def _d(s, field):
    if s in (None, ""):
        return None
    try:
        return date.fromisoformat(str(s))
    except ValueError:
        raise InvalidInput(f"{field} must be an ISO date (YYYY-MM-DD)")


@bp.post("")
@jwt_required()
def create_inactivity():
    d = _payload()
    if d.get("employee_id") is None:
        return fail("employee_id is required", 422)
    row = workforce.create_inactivity(
        current_company_id(),
        d["employee_id"],
        _d(d.get("start_date"), "start_date"),
        _d(d.get("end_date"), "end_date"),
        d.get("reason"),
        d.get("type"),
    )
    return ok(row, 201)


@bp.get("/employee/<int:employee_id>")
@jwt_required()
def list_for_employee(employee_id: int):
    return ok(workforce.list_inactivity(current_company_id(), employee_id))


@bp.get("/employee/<int:employee_id>/current")
@jwt_required()
def current_for_employee(employee_id: int):
    return ok(workforce.current_inactivity(current_company_id(), employee_id))


@bp.put("/<int:interval_id>")
@jwt_required()
def update_inactivity(interval_id: int):
    d = _payload()
    row = workforce.update_inactivity(
        current_company_id(),
        interval_id,
        _d(d.get("start_date"), "start_date"),
        _d(d.get("end_date"), "end_date"),
        d.get("reason"),
        d.get("type"),
    )
    return ok(row)


@bp.post("/<int:interval_id>/end")
@jwt_required()
def end_inactivity(interval_id: int):
    d = _payload()
    row = workforce.end_inactivity(current_company_id(), interval_id, _d(d.get("end_date"), "end_date"))
    return ok(row)


@bp.delete("/<int:interval_id>")
@jwt_required()
def delete_inactivity(interval_id: int):
    return ok(workforce.delete_inactivity(current_company_id(), interval_id))
