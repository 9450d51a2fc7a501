from __future__ import annotations
from datetime import date, datetime
from typing import Optional

from .clock import as_utc, utcnow
from .errors import AlreadyCheckedIn, MissingIdentifier, NotCheckedIn
from .models import AttendanceDay, AttendanceEvent, EventType


def seed_event_log(day: AttendanceDay) -> None:
    """Rebuild a log for records that only carry the primary check-in/check-out."""
    if day.events or day.check_in is None:
        return
    day.events.append(AttendanceEvent(EventType.IN, day.check_in))
    if day.check_out is not None:
        day.events.append(AttendanceEvent(EventType.OUT, day.check_out))
    if day.first_check_in is None:
        day.first_check_in = day.check_in


def record_check_in(day: AttendanceDay, at: Optional[datetime] = None, notes: Optional[str] = None) -> AttendanceDay:
    if day.is_open:
        raise AlreadyCheckedIn("Already checked in. Please check out first.")
    at = as_utc(at) if at else utcnow()
    seed_event_log(day)
    day.events.append(AttendanceEvent(EventType.IN, at))
    day.check_in = at
    day.check_out = None
    if day.first_check_in is None:
        day.first_check_in = at
    if notes:
        day.notes = notes
    return day


def record_check_out(day: AttendanceDay, at: Optional[datetime] = None, notes: Optional[str] = None) -> AttendanceDay:
    if day.check_in is None:
        raise NotCheckedIn("Please check in first before checking out")
    if not day.is_open:
        raise NotCheckedIn("No open shift to check out of")
    at = as_utc(at) if at else utcnow()
    seed_event_log(day)
    day.events.append(AttendanceEvent(EventType.OUT, at))
    day.check_out = at
    if notes:
        day.notes = notes
    return day


def find_or_create_day(store, employee_id: str, day: date) -> AttendanceDay:
    if not employee_id:
        raise MissingIdentifier("employee_id is required")
    existing = store.get_attendance_day(employee_id, day)
    if existing is not None:
        return existing
    return AttendanceDay(employee_id=employee_id, day=day)
