# ems_api/common/errors.py
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from ems_api.common.http import fail
from ems_api.extensions import db


class APIError(Exception):
    """Custom API Error class."""
    code = "API_ERROR"
    status_code = 400

    def __init__(self, message, code=None, status_code=None, payload=None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        self.payload = payload


class NotFound(APIError):
    """Entity is absent or belongs to another company."""
    code = "NOT_FOUND"
    status_code = 404


class DuplicateSalary(APIError):
    code = "DUPLICATE_SALARY"
    status_code = 409


class InvalidRange(APIError):
    code = "INVALID_RANGE"
    status_code = 422


class InvalidInput(APIError):
    code = "INVALID_INPUT"
    status_code = 422


class BudgetExceeded(APIError):
    """
    Projected department expenses would go over the budget ceiling.
    Carries the department name and the period label ("monthly budget" /
    "yearly budget") so callers can build their own message.
    """
    code = "BUDGET_EXCEEDED"
    status_code = 422

    def __init__(self, department_name, period_label, projected=None, budget=None, action="Adding"):
        super().__init__(
            f"{action} this salary would exceed the {period_label} for department: {department_name}",
            payload={
                "department": department_name,
                "period": period_label,
                "projected": float(projected) if projected is not None else None,
                "budget": float(budget) if budget is not None else None,
            },
        )
        self.department_name = department_name
        self.period_label = period_label


class DepartmentNotEmpty(APIError):
    code = "DEPARTMENT_NOT_EMPTY"
    status_code = 409


class BudgetBelowExpenses(APIError):
    code = "BUDGET_BELOW_EXPENSES"
    status_code = 422


class Unauthenticated(APIError):
    code = "UNAUTHENTICATED"
    status_code = 401


def register_error_handlers(app):
    @app.errorhandler(APIError)
    def _api_error(e: APIError):
        db.session.rollback()
        return fail(e.message, status=e.status_code, code=e.code, detail=e.payload)

    @app.errorhandler(HTTPException)
    def _http(e: HTTPException):
        return fail(e.description or e.name, status=e.code or 500)

    @app.errorhandler(IntegrityError)
    def _dup(e: IntegrityError):
        db.session.rollback()
        return fail("Duplicate or FK constraint failed", status=409, code="CONSTRAINT_ERROR")

    @app.errorhandler(Exception)
    def _500(e: Exception):
        app.logger.exception(e)
        db.session.rollback()
        return fail("Internal server error", status=500)
