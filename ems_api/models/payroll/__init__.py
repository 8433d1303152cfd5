from .salary import Salary, Deduction  # noqa: F401
