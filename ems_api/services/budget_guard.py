# ems_api/services/budget_guard.py
"""
Department budget checks.

Expenses are always recomputed from salary rows; nothing here is cached.

    current_expenses = sum(gross_salary) of ACTIVE employees in the department
    usage            = current_expenses / budget * 100   (100 when budget is 0/None)
    overrun          = usage > 100

`validate_budget` is the gate called before a salary is created or raised.
"""
from __future__ import annotations

import logging
from decimal import Decimal

from ems_api.common.errors import BudgetExceeded
from ems_api.models.employee import Employee
from ems_api.models.master import BudgetPeriod, Department
from ems_api.services.deductions import HUNDRED, ZERO, to_decimal
from ems_api.services.lookups import active_employees

log = logging.getLogger(__name__)


def period_label(department: Department) -> str:
    period = BudgetPeriod.parse(department.budget_period) or BudgetPeriod.MONTHLY
    return period.label


def current_expenses(department: Department) -> Decimal:
    total = ZERO
    for emp in active_employees(department.id):
        if emp.salary is not None:
            total += Decimal(str(emp.salary.gross_salary))
    return total


def validate_budget(department: Department, proposed_gross, replaced_gross=0, action="Adding") -> Decimal:
    """
    Raise BudgetExceeded when the department would go over its ceiling.

    `replaced_gross` is the salary being swapped out (0 on create, the old
    gross on update). Landing exactly on the budget is allowed.
    """
    projected = (
        current_expenses(department)
        - to_decimal(replaced_gross, "replaced gross")
        + to_decimal(proposed_gross, "gross")
    )
    budget = Decimal(str(department.budget)) if department.budget is not None else ZERO
    if projected > budget:
        log.warning(
            "budget check failed dept=%s projected=%s budget=%s",
            department.id, projected, budget,
        )
        raise BudgetExceeded(
            department.name, period_label(department),
            projected=projected, budget=budget, action=action,
        )
    return projected


def budget_usage_percentage(department: Department, expenses: Decimal | None = None) -> Decimal:
    if not department.budget:
        return HUNDRED
    if expenses is None:
        expenses = current_expenses(department)
    return expenses / Decimal(str(department.budget)) * HUNDRED


def is_overrun(department: Department, expenses: Decimal | None = None) -> bool:
    return budget_usage_percentage(department, expenses) > HUNDRED


def budget_summary(department: Department) -> dict:
    expenses = current_expenses(department)
    usage = budget_usage_percentage(department, expenses)

    employees = Employee.query.filter(Employee.department_id == department.id).all()
    salaries = [e.salary for e in employees if e.is_active and e.salary is not None]
    total_net = sum((Decimal(str(s.net_salary)) for s in salaries), ZERO)

    return {
        "department_id": department.id,
        "department_name": department.name,
        "budget": float(department.budget) if department.budget is not None else None,
        "budget_period": (BudgetPeriod.parse(department.budget_period) or BudgetPeriod.MONTHLY).name,
        "current_expenses": float(expenses),
        "budget_usage_percentage": round(float(usage), 2),
        "is_overrun": usage > HUNDRED,
        "employee_count": len(employees),
        "active_employee_count": sum(1 for e in employees if e.is_active),
        "total_gross_salary": float(expenses),
        "total_net_salary": float(total_net),
        "average_gross_salary": float(expenses / len(salaries)) if salaries else 0.0,
    }
