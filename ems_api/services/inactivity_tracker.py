# ems_api/services/inactivity_tracker.py
"""
Inactivity intervals and the employee status cache.

The interval rows are the source of truth. `Employee.is_active`,
`inactive_from` and `inactive_to` are a cache of "which interval is in force
today", and only `reconcile_employee` (or `rederive_from_history`) writes it.

Per-write rules applied by `reconcile_employee`:

  CREATED : employee marked inactive, window = new interval's bounds
            (applied even when the new interval does not cover today)
  UPDATED : window refreshed only if the interval covers today AND the
            employee is currently marked inactive
  DELETED : if the removed interval covered today and the employee is
            inactive, employee flips back to active with an empty window

Overlapping intervals are accepted on write.

Functions here add/flush but never commit; the calling service owns the
transaction.
"""
from __future__ import annotations

import enum
import logging
from datetime import date
from typing import Optional

from ems_api.common.errors import InvalidInput, InvalidRange
from ems_api.extensions import db
from ems_api.models.employee import Employee
from ems_api.models.inactivity import EmployeeInactivity, InactivityType
from ems_api.services.lookups import get_employee, get_interval

log = logging.getLogger(__name__)


class IntervalChange(enum.Enum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


# ---------- pure interval helpers ----------

def is_active_on(interval, on: date) -> bool:
    return on >= interval.start_date and (interval.end_date is None or on <= interval.end_date)


def overlaps(a, b) -> bool:
    """Touching boundaries count as overlap; a missing end is open-ended."""
    if a.end_date is not None and a.end_date < b.start_date:
        return False
    if b.end_date is not None and a.start_date > b.end_date:
        return False
    return True


def duration_in_days(interval, today: Optional[date] = None) -> int:
    """Inclusive of both ends; an open interval runs to `today`."""
    end = interval.end_date or (today or date.today())
    days = end.toordinal() - interval.start_date.toordinal() + 1
    return max(days, 0)


def current_interval(employee: Employee, today: Optional[date] = None):
    today = today or date.today()
    for row in employee.inactivities:
        if is_active_on(row, today):
            return row
    return None


def _check_range(start: date, end: Optional[date]):
    if start is None:
        raise InvalidInput("Start date is required")
    if end is not None and start > end:
        raise InvalidRange("Start date must be before end date")


# ---------- cache reconciliation ----------

def _mark_inactive(employee: Employee, interval):
    employee.is_active = False
    employee.inactive_from = interval.start_date
    employee.inactive_to = interval.end_date


def _mark_active(employee: Employee):
    employee.is_active = True
    employee.inactive_from = None
    employee.inactive_to = None


def reconcile_employee(employee: Employee, interval, change: IntervalChange, today: Optional[date] = None):
    """Bring the employee's cached status in line after `change` to `interval`."""
    today = today or date.today()

    if change is IntervalChange.CREATED:
        _mark_inactive(employee, interval)
    elif change is IntervalChange.UPDATED:
        if is_active_on(interval, today) and not employee.is_active:
            _mark_inactive(employee, interval)
    elif change is IntervalChange.DELETED:
        if is_active_on(interval, today) and not employee.is_active:
            _mark_active(employee)
    else:  # pragma: no cover - enum is closed
        raise ValueError(f"unknown interval change: {change}")

    db.session.add(employee)
    return employee


def rederive_from_history(employee: Employee, today: Optional[date] = None):
    """Recompute the cache from every interval of the employee."""
    in_force = current_interval(employee, today)
    if in_force is not None:
        _mark_inactive(employee, in_force)
    else:
        _mark_active(employee)
    db.session.add(employee)
    return employee


# ---------- writes ----------

def create_interval(
    company_id: int,
    employee_id: int,
    start: date,
    end: Optional[date],
    reason: Optional[str],
    type_: InactivityType,
    today: Optional[date] = None,
) -> EmployeeInactivity:
    _check_range(start, end)
    if type_ is None:
        raise InvalidInput("Inactivity type is required")
    employee = get_employee(company_id, employee_id)

    row = EmployeeInactivity(
        employee=employee,
        start_date=start,
        end_date=end,
        reason=reason,
        type=type_,
    )
    db.session.add(row)
    db.session.flush()

    reconcile_employee(employee, row, IntervalChange.CREATED, today)
    log.info("inactivity %s created for employee %s (%s..%s)", row.id, employee.id, start, end)
    return row


def update_interval(
    company_id: int,
    interval_id: int,
    start: date,
    end: Optional[date],
    reason: Optional[str],
    type_: Optional[InactivityType] = None,
    today: Optional[date] = None,
) -> EmployeeInactivity:
    _check_range(start, end)
    row = get_interval(company_id, interval_id)

    row.start_date = start
    row.end_date = end
    row.reason = reason
    if type_ is not None:
        row.type = type_
    db.session.flush()

    reconcile_employee(row.employee, row, IntervalChange.UPDATED, today)
    return row


def delete_interval(company_id: int, interval_id: int, today: Optional[date] = None) -> Employee:
    row = get_interval(company_id, interval_id)
    employee = row.employee

    # decide against the row as it was, then drop it
    reconcile_employee(employee, row, IntervalChange.DELETED, today)
    employee.inactivities.remove(row)
    db.session.delete(row)
    db.session.flush()
    log.info("inactivity %s deleted for employee %s", interval_id, employee.id)
    return employee


def end_interval(company_id: int, interval_id: int, end: date, today: Optional[date] = None) -> EmployeeInactivity:
    if end is None:
        raise InvalidInput("End date is required")
    row = get_interval(company_id, interval_id)
    if row.start_date > end:
        raise InvalidRange("End date must be after start date")

    row.end_date = end
    db.session.flush()
    rederive_from_history(row.employee, today)
    return row
