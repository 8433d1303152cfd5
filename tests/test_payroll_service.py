from datetime import date
from decimal import Decimal

import pytest

from ems_api.common.errors import (
    BudgetBelowExpenses,
    BudgetExceeded,
    DepartmentNotEmpty,
    DuplicateSalary,
    InvalidInput,
    NotFound,
)
from ems_api.models.inactivity import InactivityType
from ems_api.models.master import Department
from ems_api.models.payroll import Deduction, Salary
from ems_api.services import budget_guard, inactivity_tracker
from ems_api.services.payroll_service import PayrollService
from ems_api.services.workforce_service import WorkforceStateService

from conftest import add_department, add_employee

TODAY = date(2025, 6, 15)


@pytest.fixture
def payroll():
    return PayrollService()


@pytest.fixture
def workforce():
    return WorkforceStateService()


def test_department_fills_up_to_budget(session, company, department, payroll):
    a = add_employee(session, company, department)
    b = add_employee(session, company, department)

    payroll.create_salary(company.id, a.id, 9000, today=TODAY)

    with pytest.raises(BudgetExceeded) as ei:
        payroll.create_salary(company.id, b.id, 1500, today=TODAY)
    assert "monthly budget" in ei.value.message
    assert Salary.query.count() == 1

    payroll.create_salary(company.id, b.id, 1000, today=TODAY)
    assert budget_guard.current_expenses(department) == Decimal("10000")


def test_create_stores_computed_amounts(session, company, department, payroll):
    emp = add_employee(session, company, department)
    row = payroll.create_salary(
        company.id, emp.id, 5000,
        [
            {"type": "TAX", "name": "Income Tax", "value": 20, "is_percentage": True},
            {"type": "INSURANCE", "name": "Health", "value": 150},
            {"type": "CUSTOM", "name": "Pension", "value": 2, "is_percentage": True},
        ],
        today=TODAY,
    )
    assert row["tax_amount"] == 1000.0
    assert row["insurance_amount"] == 150.0
    assert row["other_deductions_amount"] == 100.0
    assert row["net_salary"] == 3750.0
    assert (row["salary_month"], row["salary_year"]) == (6, 2025)
    assert [d["name"] for d in row["deductions"]] == ["Income Tax", "Health", "Pension"]
    assert row["deductions"][0]["calculated_amount"] == 1000.0

    stored = session.get(Salary, row["id"])
    assert stored.net_salary == Decimal("3750.00")


def test_duplicate_salary_rejected(session, company, department, payroll):
    emp = add_employee(session, company, department)
    payroll.create_salary(company.id, emp.id, 1000, today=TODAY)
    with pytest.raises(DuplicateSalary):
        payroll.create_salary(company.id, emp.id, 500, today=TODAY)


def test_employee_without_department_cannot_get_salary(session, company, payroll):
    emp = add_employee(session, company)
    with pytest.raises(InvalidInput):
        payroll.create_salary(company.id, emp.id, 1000, today=TODAY)


@pytest.mark.parametrize("gross", [0, -10, "abc", "NaN", "sNaN", "Infinity", Decimal("NaN")])
def test_gross_must_be_positive_number(session, company, department, payroll, gross):
    emp = add_employee(session, company, department)
    with pytest.raises(InvalidInput):
        payroll.create_salary(company.id, emp.id, gross, today=TODAY)


@pytest.mark.parametrize("month,year", [(0, 2025), (13, 2025), (6, 1999), (6, 2101)])
def test_salary_period_is_validated(session, company, department, payroll, month, year):
    emp = add_employee(session, company, department)
    with pytest.raises(InvalidInput):
        payroll.create_salary(company.id, emp.id, 1000, month=month, year=year)


def test_lowering_gross_is_never_blocked(session, company, department, payroll):
    emp = add_employee(session, company, department)
    row = payroll.create_salary(company.id, emp.id, 9000, today=TODAY)

    # department already over its ceiling
    department.budget = Decimal("5000")
    session.commit()

    out = payroll.update_salary(company.id, row["id"], 8500)
    assert out["gross_salary"] == 8500.0


def test_raise_is_checked_against_budget_minus_old_gross(session, company, department, payroll):
    a = add_employee(session, company, department)
    b = add_employee(session, company, department)
    row = payroll.create_salary(company.id, a.id, 8000, today=TODAY)
    payroll.create_salary(company.id, b.id, 1000, today=TODAY)

    out = payroll.update_salary(company.id, row["id"], 9000)
    assert out["gross_salary"] == 9000.0

    with pytest.raises(BudgetExceeded) as ei:
        payroll.update_salary(company.id, row["id"], 9001)
    assert ei.value.message.startswith("Updating")
    assert session.get(Salary, row["id"]).gross_salary == Decimal("9000.00")


def test_inactive_employees_do_not_consume_budget(session, company, department, payroll):
    a = add_employee(session, company, department)
    b = add_employee(session, company, department)
    payroll.create_salary(company.id, a.id, 9000, today=TODAY)

    inactivity_tracker.create_interval(company.id, a.id, TODAY, None, "leave", InactivityType.UNPAID_LEAVE, today=TODAY)
    session.commit()

    payroll.create_salary(company.id, b.id, 5000, today=TODAY)
    assert budget_guard.current_expenses(department) == Decimal("5000")


def test_update_replaces_deduction_list(session, company, department, payroll):
    emp = add_employee(session, company, department)
    row = payroll.create_salary(
        company.id, emp.id, 4000,
        [
            {"type": "TAX", "name": "Income Tax", "value": 10, "is_percentage": True},
            {"type": "CUSTOM", "name": "Gym", "value": 40},
        ],
        today=TODAY,
    )
    assert row["net_salary"] == 3560.0

    out = payroll.update_salary(company.id, row["id"], 4000, [{"type": "INSURANCE", "name": "Health", "value": 100}])
    assert [d["type"] for d in out["deductions"]] == ["INSURANCE"]
    assert out["tax_amount"] == 0.0
    assert out["net_salary"] == 3900.0
    assert Deduction.query.count() == 1


def test_update_without_deductions_clears_them(session, company, department, payroll):
    emp = add_employee(session, company, department)
    row = payroll.create_salary(
        company.id, emp.id, 2000, [{"type": "CUSTOM", "name": "Gym", "value": 40}], today=TODAY,
    )
    out = payroll.update_salary(company.id, row["id"], 2000)
    assert out["deductions"] == []
    assert out["net_salary"] == 2000.0


def test_delete_salary_frees_budget(session, company, department, payroll):
    emp = add_employee(session, company, department)
    row = payroll.create_salary(company.id, emp.id, 9000, today=TODAY)

    payroll.delete_salary(company.id, row["id"])
    assert Salary.query.count() == 0
    assert budget_guard.current_expenses(department) == Decimal("0")
    with pytest.raises(NotFound):
        payroll.get_employee_salary(company.id, emp.id)


def test_deleted_salary_takes_deductions_and_can_be_recreated(session, company, department, payroll):
    emp = add_employee(session, company, department)
    row = payroll.create_salary(
        company.id, emp.id, 3000, [{"type": "CUSTOM", "name": "Gym", "value": 40}], today=TODAY,
    )
    out = payroll.delete_salary(company.id, row["id"])
    assert out == {"id": row["id"], "employee_id": emp.id, "deleted": True}
    assert Deduction.query.count() == 0

    again = payroll.create_salary(company.id, emp.id, 2000, today=TODAY)
    assert again["gross_salary"] == 2000.0


def test_stored_net_is_consistent_with_stored_cents(session, company, department, payroll):
    emp = add_employee(session, company, department)
    row = payroll.create_salary(
        company.id, emp.id, "100.01",
        [{"type": "TAX", "name": "Half", "value": 50, "is_percentage": True}],
        today=TODAY,
    )
    s = session.get(Salary, row["id"])
    assert s.tax_amount == Decimal("50.01")
    assert s.net_salary == Decimal("50.00")
    assert s.net_salary == s.gross_salary - s.tax_amount - s.insurance_amount - s.other_deductions_amount


def test_salary_of_other_company_is_not_found(session, company, other_company, department, payroll):
    emp = add_employee(session, company, department)
    row = payroll.create_salary(company.id, emp.id, 1000, today=TODAY)

    with pytest.raises(NotFound):
        payroll.get_salary(other_company.id, row["id"])
    with pytest.raises(NotFound):
        payroll.update_salary(other_company.id, row["id"], 500)
    with pytest.raises(NotFound):
        payroll.create_salary(other_company.id, emp.id, 1000, today=TODAY)


def test_department_budget_summary(session, company, department, payroll):
    emp = add_employee(session, company, department)
    payroll.create_salary(company.id, emp.id, 2500, today=TODAY)
    out = payroll.department_budget(company.id, department.id)
    assert out["budget_usage_percentage"] == 25.0
    assert out["average_gross_salary"] == 2500.0


# ---------- department rules ----------

def test_budget_cannot_drop_below_expenses(session, company, department, payroll, workforce):
    emp = add_employee(session, company, department)
    payroll.create_salary(company.id, emp.id, 6000, today=TODAY)

    with pytest.raises(BudgetBelowExpenses):
        workforce.update_department_budget(company.id, department.id, 5999)

    out = workforce.update_department_budget(company.id, department.id, 6000, "yearly")
    assert out["budget"] == 6000.0
    assert out["budget_period"] == "YEARLY"


def test_budget_must_be_positive(session, company, department, workforce):
    with pytest.raises(InvalidInput):
        workforce.update_department_budget(company.id, department.id, 0)


def test_department_with_employees_cannot_be_deleted(session, company, department, workforce):
    add_employee(session, company, department)
    with pytest.raises(DepartmentNotEmpty):
        workforce.delete_department(company.id, department.id)


def test_empty_department_is_deleted(session, company, workforce):
    dep = add_department(session, company, name="Temp")
    workforce.delete_department(company.id, dep.id)
    assert session.get(Department, dep.id) is None


# ---------- inactivity orchestration ----------

def test_workforce_inactivity_round(session, company, department, workforce):
    emp = add_employee(session, company, department)

    out = workforce.create_inactivity(company.id, emp.id, date(2025, 6, 1), None, "sick", "sick_leave", today=TODAY)
    assert out["type"] == "SICK_LEAVE"
    assert out["current"] is True
    assert out["employee_status"]["is_active"] is False

    current = workforce.current_inactivity(company.id, emp.id, today=TODAY)
    assert current["id"] == out["id"]
    assert len(workforce.list_inactivity(company.id, emp.id, today=TODAY)) == 1

    ended = workforce.end_inactivity(company.id, out["id"], date(2025, 6, 14), today=TODAY)
    assert ended["end_date"] == "2025-06-14"
    assert ended["employee_status"]["is_active"] is True
    assert workforce.current_inactivity(company.id, emp.id, today=TODAY) is None

    gone = workforce.delete_inactivity(company.id, out["id"], today=TODAY)
    assert gone["deleted"] is True


def test_workforce_rejects_unknown_type(session, company, workforce):
    emp = add_employee(session, company)
    with pytest.raises(InvalidInput):
        workforce.create_inactivity(company.id, emp.id, TODAY, None, "x", "HOLIDAY")
    with pytest.raises(InvalidInput):
        workforce.create_inactivity(company.id, emp.id, TODAY, None, "x", None)
