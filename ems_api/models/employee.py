from datetime import datetime
from ems_api.extensions import db

class Employee(db.Model):
    __tablename__ = "employees"

    id = db.Column(db.Integer, primary_key=True)
    company_id    = db.Column(db.Integer, db.ForeignKey("companies.id", ondelete="RESTRICT"), nullable=False)
    department_id = db.Column(db.Integer, db.ForeignKey("departments.id", ondelete="RESTRICT"), nullable=True)

    email      = db.Column(db.String(255), nullable=False)
    first_name = db.Column(db.String(80), nullable=False)
    last_name  = db.Column(db.String(80), nullable=True)

    # cache of the inactivity history, written only by the inactivity tracker
    is_active     = db.Column(db.Boolean, default=True, nullable=False)
    inactive_from = db.Column(db.Date, nullable=True)
    inactive_to   = db.Column(db.Date, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint("company_id", "email", name="uq_employee_company_email"),
        db.Index("ix_emp_company_id", "company_id"),
        db.Index("ix_emp_dept_id", "department_id"),
    )

    company    = db.relationship("Company", lazy="joined")
    department = db.relationship("Department", back_populates="employees", lazy="joined")

    # owned records, removed with the employee
    salary = db.relationship(
        "Salary", back_populates="employee", uselist=False,
        cascade="all, delete-orphan",
    )
    inactivities = db.relationship(
        "EmployeeInactivity", back_populates="employee",
        cascade="all, delete-orphan",
        order_by="EmployeeInactivity.start_date.desc()",
    )

    @property
    def full_name(self):
        return " ".join(p for p in (self.first_name, self.last_name) if p)
