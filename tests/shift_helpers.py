from datetime import date, datetime, timezone

from shiftpay.models import AttendanceEvent, EventType


def at(day: date, hour: int, minute: int = 0) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute, tzinfo=timezone.utc)


def log(day: date, *entries):
    """Build an event log from ``("in", 9, 0)`` style tuples."""
    return [AttendanceEvent(EventType(kind), at(day, hour, minute)) for kind, hour, minute in entries]
