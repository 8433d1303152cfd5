import enum
from datetime import datetime

from ems_api.extensions import db


class Company(db.Model):
    """Tenant. Every department, employee and user hangs off one company."""
    __tablename__ = "companies"

    id = db.Column(db.Integer, primary_key=True)
    code = db.Column(db.String(50), unique=True, nullable=False)
    name = db.Column(db.String(255), nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)


class BudgetPeriod(enum.Enum):
    MONTHLY = "monthly"
    YEARLY = "yearly"

    @property
    def label(self) -> str:
        return f"{self.value} budget"

    @classmethod
    def parse(cls, raw):
        if isinstance(raw, cls):
            return raw
        s = (str(raw) if raw is not None else "").strip().upper()
        try:
            return cls[s]
        except KeyError:
            return None


# Department: per company, with a salary budget ceiling
class Department(db.Model):
    __tablename__ = "departments"

    id = db.Column(db.Integer, primary_key=True)
    company_id = db.Column(
        db.Integer,
        db.ForeignKey("companies.id", ondelete="RESTRICT"),
        nullable=False,
    )
    name = db.Column(db.String(120), nullable=False)
    budget = db.Column(db.Numeric(12, 2), nullable=False)
    budget_period = db.Column(
        db.Enum(BudgetPeriod, name="budget_period_enum"),
        nullable=False,
        default=BudgetPeriod.MONTHLY,
    )
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        db.UniqueConstraint("company_id", "name", name="uq_department_company_name"),
    )

    company = db.relationship(
        "Company", backref=db.backref("departments", lazy="dynamic")
    )
    # no cascade: a department with employees cannot be deleted
    employees = db.relationship("Employee", back_populates="department", lazy="select")
