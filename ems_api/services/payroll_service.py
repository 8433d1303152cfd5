# ems_api/services/payroll_service.py
from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional

from ems_api.common.errors import DuplicateSalary, InvalidInput, NotFound
from ems_api.extensions import db
from ems_api.models.payroll.salary import Salary
from ems_api.services import budget_guard
from ems_api.services.deductions import ZERO, DeductionRule, make_rule, rule_amount, to_decimal
from ems_api.services.lookups import get_department, get_employee, get_salary

log = logging.getLogger(__name__)


def _f(x):
    return float(x) if x is not None else None


def deduction_row(d, gross) -> dict:
    return {
        "id": d.id,
        "type": d.kind.name,
        "name": d.name,
        "value": _f(d.value),
        "is_percentage": bool(d.is_percentage),
        "calculated_amount": _f(rule_amount(d, gross)),
    }


def salary_row(s: Salary) -> dict:
    emp = s.employee
    gross = Decimal(str(s.gross_salary))
    return {
        "id": s.id,
        "employee_id": s.employee_id,
        "employee_name": emp.full_name if emp else None,
        "department_id": emp.department_id if emp else None,
        "department_name": emp.department.name if emp and emp.department else None,
        "gross_salary": _f(s.gross_salary),
        "tax_amount": _f(s.tax_amount),
        "insurance_amount": _f(s.insurance_amount),
        "other_deductions_amount": _f(s.other_deductions_amount),
        "net_salary": _f(s.net_salary),
        "salary_month": s.salary_month,
        "salary_year": s.salary_year,
        "deductions": [deduction_row(d, gross) for d in s.deductions],
        "created_at": s.created_at.isoformat() if s.created_at else None,
        "updated_at": s.updated_at.isoformat() if s.updated_at else None,
    }


def _gross(x) -> Decimal:
    g = to_decimal(x, "Gross salary")
    if g <= ZERO:
        raise InvalidInput("Gross salary must be greater than 0")
    return g


def _rules(items) -> List[DeductionRule]:
    if items is None:
        return []
    if not isinstance(items, (list, tuple)):
        raise InvalidInput("deductions must be a list")
    return [r if isinstance(r, DeductionRule) else make_rule(r) for r in items]


def _period(month, year, fallback: date):
    m = fallback.month if month is None else month
    y = fallback.year if year is None else year
    try:
        m, y = int(m), int(y)
    except (TypeError, ValueError):
        raise InvalidInput("Salary month and year must be integers")
    if not 1 <= m <= 12:
        raise InvalidInput("Invalid month. Must be between 1 and 12")
    if not 2000 <= y <= 2100:
        raise InvalidInput("Invalid year. Must be between 2000 and 2100")
    return m, y


class PayrollService:
    """
    Salary mutations: budget gate → net computation → persist.
    Each public method is one transaction.
    """

    def create_salary(
        self,
        company_id: int,
        employee_id: int,
        gross,
        rules: Optional[Iterable] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
        today: Optional[date] = None,
    ) -> dict:
        gross = _gross(gross)
        rules = _rules(rules)
        month, year = _period(month, year, today or date.today())

        employee = get_employee(company_id, employee_id)
        if employee.salary is not None:
            raise DuplicateSalary(f"Salary already exists for employee with id: {employee.id}")

        if employee.department_id is None:
            raise InvalidInput("Employee must be assigned to a department")
        department = get_department(company_id, employee.department_id)
        budget_guard.validate_budget(department, gross)

        salary = Salary(
            employee=employee,
            gross_salary=gross,
            salary_month=month,
            salary_year=year,
        )
        salary.replace_deductions(rules)
        db.session.add(salary)
        db.session.commit()

        log.info("salary %s created for employee %s gross=%s net=%s",
                 salary.id, employee.id, gross, salary.net_salary)
        return salary_row(salary)

    def update_salary(
        self,
        company_id: int,
        salary_id: int,
        gross,
        rules: Optional[Iterable] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> dict:
        gross = _gross(gross)
        rules = _rules(rules)
        salary = get_salary(company_id, salary_id)

        old_gross = Decimal(str(salary.gross_salary))
        if gross > old_gross:
            employee = salary.employee
            if employee.department_id is None:
                raise InvalidInput("Employee must be assigned to a department")
            department = get_department(company_id, employee.department_id)
            budget_guard.validate_budget(department, gross, replaced_gross=old_gross, action="Updating")

        if month is not None or year is not None:
            salary.salary_month, salary.salary_year = _period(
                month if month is not None else salary.salary_month,
                year if year is not None else salary.salary_year,
                date.today(),
            )

        salary.gross_salary = gross
        salary.replace_deductions(rules)
        db.session.commit()

        log.info("salary %s updated gross %s -> %s", salary.id, old_gross, gross)
        return salary_row(salary)

    def delete_salary(self, company_id: int, salary_id: int) -> dict:
        salary = get_salary(company_id, salary_id)
        employee = salary.employee
        db.session.delete(salary)
        db.session.commit()
        return {"id": salary_id, "employee_id": employee.id, "deleted": True}

    def get_salary(self, company_id: int, salary_id: int) -> dict:
        return salary_row(get_salary(company_id, salary_id))

    def get_employee_salary(self, company_id: int, employee_id: int) -> dict:
        employee = get_employee(company_id, employee_id)
        if employee.salary is None:
            raise NotFound(f"Salary not found for employee with id: {employee_id}")
        return salary_row(employee.salary)

    def department_budget(self, company_id: int, department_id: int) -> dict:
        return budget_guard.budget_summary(get_department(company_id, department_id))
