import enum
from datetime import datetime

from ems_api.extensions import db


class InactivityType(enum.Enum):
    ADMINISTRATIVE = "ADMINISTRATIVE"
    PAID_LEAVE = "PAID_LEAVE"
    UNPAID_LEAVE = "UNPAID_LEAVE"
    SICK_LEAVE = "SICK_LEAVE"
    SUSPENSION = "SUSPENSION"
    OTHER = "OTHER"

    @classmethod
    def parse(cls, raw):
        if isinstance(raw, cls):
            return raw
        s = (str(raw) if raw is not None else "").strip().upper()
        try:
            return cls[s]
        except KeyError:
            return None


class EmployeeInactivity(db.Model):
    """
    A dated span during which the employee is not counted as active.
    end_date NULL => open-ended.
    """
    __tablename__ = "employee_inactivity"

    id = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(
        db.Integer, db.ForeignKey("employees.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date, nullable=True)
    reason = db.Column(db.String(1000))
    type = db.Column(db.Enum(InactivityType, name="inactivity_type_enum"), nullable=False)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, onupdate=datetime.utcnow)

    employee = db.relationship("Employee", back_populates="inactivities")

    __table_args__ = (
        db.CheckConstraint(
            "end_date IS NULL OR start_date <= end_date",
            name="ck_inactivity_range",
        ),
    )
