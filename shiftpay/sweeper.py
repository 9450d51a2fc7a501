from __future__ import annotations
from datetime import date

from .attendance import seed_event_log
from .clock import end_of_day
from .errors import MissingIdentifier
from .models import AttendanceDay, AttendanceEvent, EventType


def close_stale_day(day: AttendanceDay) -> AttendanceDay:
    """Close an open shift at 23:59:59.999 UTC of the record's own date."""
    checkout = end_of_day(day.day)
    seed_event_log(day)
    if day.first_check_in is None:
        day.first_check_in = day.check_in
    day.events.append(AttendanceEvent(EventType.OUT, checkout))
    day.check_out = checkout
    day.auto_checked_out = True
    return day


def sweep_auto_checkout(store, employee_id: str, today: date) -> int:
    """Close every shift left open on a day before ``today``.

    Returns the number of records remediated. Days that already have a
    check-out are never touched, so a second run returns 0.
    """
    if not employee_id:
        raise MissingIdentifier("employee_id is required for the auto-checkout sweep")

    remediated = 0
    for day in store.open_attendance_before(employee_id, today):
        if day.day >= today or not day.is_open:
            continue
        close_stale_day(day)
        store.save_attendance_day(day)
        remediated += 1
    return remediated
