# ems_api/blueprints/salaries.py
from __future__ import annotations

from flask import Blueprint, request
from flask_jwt_extended import jwt_required

from ems_api.common.auth import current_company_id
from ems_api.common.http import ok, fail
from ems_api.services.payroll_service import PayrollService

bp = Blueprint("salaries", __name__, url_prefix="/api/v1/salaries")

payroll = PayrollService()


def _payload():
    data = request.get_json(silent=True, force=True)
    return data if isinstance(data, dict) else {}


@bp.post("")
@jwt_required()
def create_salary():
    d = _payload()
    if d.get("employee_id") is None or d.get("gross_salary") is None:
        return fail("employee_id and gross_salary are required", 422)
    row = payroll.create_salary(
        current_company_id(),
        d["employee_id"],
        d["gross_salary"],
        d.get("deductions") or [],
        month=d.get("salary_month"),
        year=d.get("salary_year"),
    )
    return ok(row, 201)


@bp.get("/<int:salary_id>")
@jwt_required()
def get_salary(salary_id: int):
    return ok(payroll.get_salary(current_company_id(), salary_id))


@bp.get("/employee/<int:employee_id>")
@jwt_required()
def get_employee_salary(employee_id: int):
    return ok(payroll.get_employee_salary(current_company_id(), employee_id))


@bp.put("/<int:salary_id>")
@jwt_required()
def update_salary(salary_id: int):
    d = _payload()
    if d.get("gross_salary") is None:
        return fail("gross_salary is required", 422)
    row = payroll.update_salary(
        current_company_id(),
        salary_id,
        d["gross_salary"],
        d.get("deductions") or [],
        month=d.get("salary_month"),
        year=d.get("salary_year"),
    )
    return ok(row)


@bp.delete("/<int:salary_id>")
@jwt_required()
def delete_salary(salary_id: int):
    return ok(payroll.delete_salary(current_company_id(), salary_id))
