from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP

from ems_api.extensions import db
from ems_api.services.deductions import DeductionKind, compute_net


CENT = Decimal("0.01")


def _money(x: Decimal) -> Decimal:
    return x.quantize(CENT, rounding=ROUND_HALF_UP)


class Salary(db.Model):
    """
    Current salary of one employee (at most one row per employee).

    The scalar amounts (tax/insurance/other/net) are derived from
    `gross_salary` + `deductions` and must be refreshed through
    `recalculate()` whenever either changes.
    """
    __tablename__ = "salaries"

    id = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(
        db.Integer, db.ForeignKey("employees.id", ondelete="CASCADE"),
        nullable=False, unique=True, index=True,
    )

    gross_salary = db.Column(db.Numeric(12, 2), nullable=False)
    tax_amount = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    insurance_amount = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    other_deductions_amount = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    net_salary = db.Column(db.Numeric(12, 2), nullable=False, default=0)

    salary_month = db.Column(db.Integer, nullable=False)
    salary_year = db.Column(db.Integer, nullable=False)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    employee = db.relationship("Employee", back_populates="salary")
    deductions = db.relationship(
        "Deduction", back_populates="salary",
        cascade="all, delete-orphan",
        order_by="Deduction.position",
    )

    def replace_deductions(self, rules):
        """Swap the whole deduction list (never merged) and recompute."""
        self.deductions = [
            Deduction(position=i, kind=r.kind, name=r.name, value=r.value, is_percentage=r.is_percentage)
            for i, r in enumerate(rules)
        ]
        return self.recalculate()

    def recalculate(self):
        gross = _money(Decimal(str(self.gross_salary)))
        out = compute_net(gross, self.deductions)
        # net comes from the stored cent amounts, not the unrounded ones
        tax, insurance, other = _money(out.tax), _money(out.insurance), _money(out.other)
        self.gross_salary = gross
        self.tax_amount = tax
        self.insurance_amount = insurance
        self.other_deductions_amount = other
        self.net_salary = max(gross - tax - insurance - other, Decimal("0.00"))
        return out


class Deduction(db.Model):
    __tablename__ = "deductions"

    id = db.Column(db.Integer, primary_key=True)
    salary_id = db.Column(
        db.Integer, db.ForeignKey("salaries.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    position = db.Column(db.Integer, nullable=False, default=0)
    kind = db.Column(db.Enum(DeductionKind, name="deduction_kind_enum"), nullable=False)
    name = db.Column(db.String(120), nullable=False)
    value = db.Column(db.Numeric(12, 4), nullable=False)
    is_percentage = db.Column(db.Boolean, nullable=False, default=False)

    salary = db.relationship("Salary", back_populates="deductions")
