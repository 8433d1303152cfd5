import os
from decimal import Decimal

import pytest

from ems_api import create_app
from ems_api.extensions import db
from ems_api.models.employee import Employee
from ems_api.models.master import BudgetPeriod, Company, Department


@pytest.fixture(scope="function")
def app():
    os.environ["DATABASE_URL"] = "sqlite:///:memory:"
    app = create_app()
    app.config["TESTING"] = True
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()


@pytest.fixture(scope="function")
def session(app):
    yield db.session


@pytest.fixture
def company(session):
    c = Company(code="T1", name="Test Co")
    session.add(c); session.commit()
    return c


@pytest.fixture
def other_company(session):
    c = Company(code="T2", name="Other Co")
    session.add(c); session.commit()
    return c


def add_department(session, company, name="Engineering", budget="10000", period=BudgetPeriod.MONTHLY):
    d = Department(company_id=company.id, name=name, budget=Decimal(budget), budget_period=period)
    session.add(d); session.commit()
    return d


def add_employee(session, company, department=None, email=None, first_name="Test"):
    n = Employee.query.count() + 1
    e = Employee(
        company_id=company.id,
        department_id=department.id if department else None,
        first_name=first_name,
        last_name=f"Emp{n}",
        email=email or f"e{n}@test.local",
    )
    session.add(e); session.commit()
    return e


@pytest.fixture
def department(session, company):
    return add_department(session, company)
