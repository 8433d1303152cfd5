# ems_api/blueprints/departments.py
from __future__ import annotations

from decimal import Decimal, InvalidOperation

from flask import Blueprint, request
from flask_jwt_extended import jwt_required

from ems_api.common.auth import current_company_id
from ems_api.common.http import ok, fail
from ems_api.extensions import db
from ems_api.models.master import BudgetPeriod, Department
from ems_api.services import budget_guard
from ems_api.services.lookups import get_department
from ems_api.services.workforce_service import WorkforceStateService

bp = Blueprint("departments", __name__, url_prefix="/api/v1/departments")

workforce = WorkforceStateService()


def _dec(x):
    if x is None or x == "":
        return None
    try:
        return Decimal(str(x))
    except (InvalidOperation, ValueError):
        return None


def _dup_name(company_id, name, exclude_id=None):
    q = Department.query.filter(
        Department.company_id == company_id,
        db.func.lower(Department.name) == name.lower(),
    )
    if exclude_id is not None:
        q = q.filter(Department.id != exclude_id)
    return q.first() is not None


# ---------- routes ----------
@bp.post("")
@jwt_required()
def create_department():
    company_id = current_company_id()
    data = request.get_json(silent=True, force=True) or {}
    name = (data.get("name") or "").strip()
    budget = _dec(data.get("budget"))
    period = BudgetPeriod.parse(data.get("budget_period", "MONTHLY"))

    if not name or budget is None:
        return fail("name and budget are required", 422)
    if budget <= 0:
        return fail("budget must be greater than 0", 422)
    if period is None:
        return fail("budget_period must be MONTHLY or YEARLY", 422)
    if _dup_name(company_id, name):
        return fail("Department with this name already exists", 409)

    obj = Department(company_id=company_id, name=name, budget=budget, budget_period=period)
    db.session.add(obj)
    db.session.commit()
    return ok(budget_guard.budget_summary(obj), 201)


@bp.get("/<int:dep_id>")
@jwt_required()
def get_department_budget(dep_id: int):
    return ok(budget_guard.budget_summary(get_department(current_company_id(), dep_id)))


@bp.put("/<int:dep_id>")
@jwt_required()
def update_department(dep_id: int):
    company_id = current_company_id()
    obj = get_department(company_id, dep_id)
    data = request.get_json(silent=True, force=True) or {}

    if "name" in data:
        candidate = (data.get("name") or "").strip()
        if not candidate:
            return fail("name cannot be empty", 422)
        if _dup_name(company_id, candidate, exclude_id=obj.id):
            return fail("Department with this name already exists", 409)
        obj.name = candidate

    if "budget" not in data and "budget_period" not in data:
        db.session.commit()
        return ok(budget_guard.budget_summary(obj))

    budget = data.get("budget", obj.budget)
    return ok(workforce.update_department_budget(company_id, obj.id, budget, data.get("budget_period")))


@bp.delete("/<int:dep_id>")
@jwt_required()
def delete_department(dep_id: int):
    return ok(workforce.delete_department(current_company_id(), dep_id))
