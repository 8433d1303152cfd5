# ems_api/services/lookups.py
"""
Company-scoped loaders. A row that exists but belongs to another company is
reported exactly like a missing one.
"""
from __future__ import annotations

from ems_api.common.errors import NotFound
from ems_api.extensions import db
from ems_api.models.employee import Employee
from ems_api.models.inactivity import EmployeeInactivity
from ems_api.models.master import Department
from ems_api.models.payroll.salary import Salary


def get_employee(company_id: int, employee_id) -> Employee:
    emp = db.session.get(Employee, employee_id) if employee_id is not None else None
    if not emp or emp.company_id != company_id:
        raise NotFound(f"Employee not found with id: {employee_id}")
    return emp


def get_department(company_id: int, department_id) -> Department:
    dep = db.session.get(Department, department_id) if department_id is not None else None
    if not dep or dep.company_id != company_id:
        raise NotFound(f"Department not found with id: {department_id}")
    return dep


def get_salary(company_id: int, salary_id) -> Salary:
    sal = db.session.get(Salary, salary_id) if salary_id is not None else None
    if not sal or sal.employee.company_id != company_id:
        raise NotFound(f"Salary not found with id: {salary_id}")
    return sal


def get_interval(company_id: int, interval_id) -> EmployeeInactivity:
    row = db.session.get(EmployeeInactivity, interval_id) if interval_id is not None else None
    if not row or row.employee.company_id != company_id:
        raise NotFound(f"Inactivity record not found with id: {interval_id}")
    return row


def active_employees(department_id: int) -> list[Employee]:
    return (
        Employee.query
        .filter(Employee.department_id == department_id, Employee.is_active.is_(True))
        .order_by(Employee.id.asc())
        .all()
    )
