from __future__ import annotations
from datetime import date
from typing import Optional

from .errors import MissingIdentifier
from .models import PaymentType, ResolvedRate, RateSource


def resolve_rate(store, employee_id: str, on: date) -> Optional[ResolvedRate]:
    """Hourly rate for ``employee_id`` on ``on``, or ``None`` when none applies.

    Precedence: a dated rate period (most recently created wins on overlap),
    then an hourly payroll record for that month, then the employee profile.
    """
    if not employee_id:
        raise MissingIdentifier("employee_id is required to resolve a rate")

    periods = [p for p in store.rate_periods_for(employee_id, on) if p.covers(on)]
    if periods:
        # stores list periods in creation order; equal timestamps go to the later one
        _, chosen = max(enumerate(periods), key=lambda item: (item[1].created_at, item[0]))
        return ResolvedRate(rate=chosen.hourly_rate, source=RateSource.PERIOD)

    record = store.get_payroll_record(employee_id, on.year, on.month)
    if record and record.payment_type is PaymentType.HOURLY and (record.hourly_rate or 0) > 0:
        return ResolvedRate(rate=record.hourly_rate, source=RateSource.PAYROLL)

    employee = store.get_employee(employee_id)
    if employee and employee.payment_type is PaymentType.HOURLY and (employee.hourly_rate or 0) > 0:
        return ResolvedRate(rate=employee.hourly_rate, source=RateSource.PROFILE)

    return None
