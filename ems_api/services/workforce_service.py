# ems_api/services/workforce_service.py
from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from ems_api.common.errors import BudgetBelowExpenses, DepartmentNotEmpty, InvalidInput
from ems_api.extensions import db
from ems_api.models.employee import Employee
from ems_api.models.inactivity import EmployeeInactivity, InactivityType
from ems_api.models.master import BudgetPeriod
from ems_api.services import budget_guard, inactivity_tracker
from ems_api.services.lookups import get_department, get_employee

log = logging.getLogger(__name__)


def inactivity_row(x: EmployeeInactivity, today: Optional[date] = None) -> dict:
    today = today or date.today()
    emp = x.employee
    return {
        "id": x.id,
        "employee_id": x.employee_id,
        "employee_name": emp.full_name if emp else None,
        "employee_email": emp.email if emp else None,
        "department_name": emp.department.name if emp and emp.department else None,
        "start_date": x.start_date.isoformat() if x.start_date else None,
        "end_date": x.end_date.isoformat() if x.end_date else None,
        "reason": x.reason,
        "type": x.type.name if x.type else None,
        "current": inactivity_tracker.is_active_on(x, today),
        "duration_in_days": inactivity_tracker.duration_in_days(x, today),
    }


def employee_status_row(e: Employee) -> dict:
    return {
        "id": e.id,
        "is_active": e.is_active,
        "inactive_from": e.inactive_from.isoformat() if e.inactive_from else None,
        "inactive_to": e.inactive_to.isoformat() if e.inactive_to else None,
    }


def _type(raw, required=True):
    t = InactivityType.parse(raw)
    if t is None and (required or raw is not None):
        raise InvalidInput("Inactivity type is required" if raw is None else f"Unknown inactivity type: {raw!r}")
    return t


class WorkforceStateService:
    """Inactivity status changes and the department rules that depend on them."""

    def create_inactivity(self, company_id, employee_id, start, end, reason, type_, today=None) -> dict:
        row = inactivity_tracker.create_interval(
            company_id, employee_id, start, end, reason, _type(type_), today=today,
        )
        db.session.commit()
        out = inactivity_row(row, today)
        out["employee_status"] = employee_status_row(row.employee)
        return out

    def update_inactivity(self, company_id, interval_id, start, end, reason, type_=None, today=None) -> dict:
        row = inactivity_tracker.update_interval(
            company_id, interval_id, start, end, reason, _type(type_, required=False), today=today,
        )
        db.session.commit()
        out = inactivity_row(row, today)
        out["employee_status"] = employee_status_row(row.employee)
        return out

    def delete_inactivity(self, company_id, interval_id, today=None) -> dict:
        employee = inactivity_tracker.delete_interval(company_id, interval_id, today=today)
        db.session.commit()
        return {"id": interval_id, "deleted": True, "employee_status": employee_status_row(employee)}

    def end_inactivity(self, company_id, interval_id, end, today=None) -> dict:
        row = inactivity_tracker.end_interval(company_id, interval_id, end, today=today)
        db.session.commit()
        out = inactivity_row(row, today)
        out["employee_status"] = employee_status_row(row.employee)
        return out

    def list_inactivity(self, company_id, employee_id, today=None) -> list:
        employee = get_employee(company_id, employee_id)
        return [inactivity_row(x, today) for x in employee.inactivities]

    def current_inactivity(self, company_id, employee_id, today=None) -> Optional[dict]:
        employee = get_employee(company_id, employee_id)
        row = inactivity_tracker.current_interval(employee, today)
        return inactivity_row(row, today) if row is not None else None

    # ---------- departments ----------

    def update_department_budget(self, company_id, department_id, budget, period=None) -> dict:
        department = get_department(company_id, department_id)
        try:
            new_budget = Decimal(str(budget))
        except Exception:
            raise InvalidInput("budget must be a number")
        if new_budget <= 0:
            raise InvalidInput("budget must be greater than 0")

        if new_budget < budget_guard.current_expenses(department):
            raise BudgetBelowExpenses(
                "New budget is less than current salary expenses. "
                "Please review employee salaries before reducing the budget."
            )

        department.budget = new_budget
        if period is not None:
            p = BudgetPeriod.parse(period)
            if p is None:
                raise InvalidInput("budget_period must be MONTHLY or YEARLY")
            department.budget_period = p
        db.session.commit()
        return budget_guard.budget_summary(department)

    def delete_department(self, company_id, department_id) -> dict:
        department = get_department(company_id, department_id)
        count = Employee.query.filter(Employee.department_id == department.id).count()
        if count:
            raise DepartmentNotEmpty(
                "Cannot delete department with employees. "
                "Please reassign or remove all employees first."
            )
        db.session.delete(department)
        db.session.commit()
        log.info("department %s deleted", department_id)
        return {"id": department_id, "deleted": True}
