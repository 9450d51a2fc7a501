from __future__ import annotations
from datetime import date, datetime, time, timezone


END_OF_DAY = time(23, 59, 59, 999000)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to already be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, END_OF_DAY, tzinfo=timezone.utc)


def resolve_as_of(day: date, now: datetime | None = None) -> datetime:
    """Cutoff for an open shift on ``day``.

    The current UTC day is measured up to ``now``; any other day is measured up
    to its own end so that past figures stay stable when recomputed later.
    """
    now = as_utc(now) if now is not None else utcnow()
    if day == now.date():
        return now
    return end_of_day(day)
