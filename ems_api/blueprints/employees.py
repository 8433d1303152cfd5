# ems_api/blueprints/employees.py
from __future__ import annotations

from flask import Blueprint, request
from flask_jwt_extended import jwt_required

from ems_api.common.auth import current_company_id
from ems_api.common.http import ok, fail
from ems_api.extensions import db
from ems_api.models.employee import Employee
from ems_api.services.lookups import get_department, get_employee

bp = Blueprint("employees", __name__, url_prefix="/api/v1/employees")


def _row(e: Employee):
    return {
        "id": e.id,
        "company_id": e.company_id,
        "department_id": e.department_id,
        "department_name": e.department.name if e.department else None,
        "first_name": e.first_name,
        "last_name": e.last_name,
        "full_name": e.full_name,
        "email": e.email,
        "is_active": e.is_active,
        "inactive_from": e.inactive_from.isoformat() if e.inactive_from else None,
        "inactive_to": e.inactive_to.isoformat() if e.inactive_to else None,
        "has_salary": e.salary is not None,
        "created_at": e.created_at.isoformat() if e.created_at else None,
    }


@bp.post("")
@jwt_required()
def create_employee():
    company_id = current_company_id()
    d = request.get_json(silent=True, force=True) or {}
    first_name = (d.get("first_name") or "").strip()
    email = (d.get("email") or "").strip().lower()
    if not first_name or not email:
        return fail("first_name and email are required", 422)

    dep_id = d.get("department_id")
    if dep_id is not None:
        get_department(company_id, dep_id)

    if Employee.query.filter_by(company_id=company_id, email=email).first():
        return fail("Another employee with this email already exists", 409)

    e = Employee(
        company_id=company_id,
        department_id=dep_id,
        first_name=first_name,
        last_name=(d.get("last_name") or "").strip() or None,
        email=email,
    )
    db.session.add(e)
    db.session.commit()
    return ok(_row(e), 201)


@bp.get("/<int:emp_id>")
@jwt_required()
def get_employee_row(emp_id: int):
    return ok(_row(get_employee(current_company_id(), emp_id)))


@bp.delete("/<int:emp_id>")
@jwt_required()
def delete_employee(emp_id: int):
    e = get_employee(current_company_id(), emp_id)
    # salary, deductions and inactivity rows go with it (ORM cascade)
    db.session.delete(e)
    db.session.commit()
    return ok({"id": emp_id, "deleted": True})
