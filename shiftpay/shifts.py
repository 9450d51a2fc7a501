from __future__ import annotations
from datetime import datetime
from typing import Iterable, List, Optional

from .clock import as_utc, resolve_as_of, utcnow
from .models import Anomaly, AnomalyKind, AttendanceDay, AttendanceEvent, DayReduction, EventType


def _span_seconds(start: datetime, end: datetime, anomalies: List[Anomaly], label: str) -> float:
    seconds = (end - start).total_seconds()
    if seconds < 0:
        anomalies.append(
            Anomaly(
                kind=AnomalyKind.NEGATIVE_DURATION,
                detail=f"{label} ends before it starts ({start.isoformat()} -> {end.isoformat()})",
                at=start,
            )
        )
        seconds = abs(seconds)
    return seconds


def reduce_day(
    events: Iterable[AttendanceEvent],
    fallback_check_in: Optional[datetime] = None,
    fallback_check_out: Optional[datetime] = None,
    as_of: Optional[datetime] = None,
    *,
    current_day: bool = True,
) -> DayReduction:
    """Fold one day's event log into worked and break seconds.

    A trailing check-in is measured up to ``as_of`` (wall clock now when not
    given). Out-of-order logs are sorted, orphan check-outs and repeated
    check-ins are skipped; every correction is reported in ``anomalies``.
    When the log is empty the primary check-in/check-out fields are used, and an
    unterminated fallback shift is only projected when ``current_day`` is set.
    """
    as_of = as_utc(as_of) if as_of is not None else utcnow()
    raw = list(events)
    result = DayReduction()
    anomalies = result.anomalies

    if not raw:
        check_in = as_utc(fallback_check_in) if fallback_check_in else None
        check_out = as_utc(fallback_check_out) if fallback_check_out else None
        if check_in is not None and check_out is not None:
            result.worked_seconds = _span_seconds(check_in, check_out, anomalies, "shift")
        elif check_in is not None:
            result.currently_open = True
            if current_day:
                result.worked_seconds = _span_seconds(check_in, as_of, anomalies, "open shift")
        return result

    ordered = sorted(raw, key=lambda e: e.time)
    if ordered != raw:
        anomalies.append(Anomaly(kind=AnomalyKind.OUT_OF_ORDER, detail="event log was not in chronological order"))

    open_since: Optional[datetime] = None
    for event in ordered:
        if event.type is EventType.IN:
            if open_since is None:
                open_since = event.time
            else:
                anomalies.append(
                    Anomaly(
                        kind=AnomalyKind.DUPLICATE_CHECK_IN,
                        detail="check-in while a shift was already open",
                        at=event.time,
                    )
                )
        elif open_since is None:
            anomalies.append(
                Anomaly(
                    kind=AnomalyKind.ORPHAN_CHECK_OUT,
                    detail="check-out without a matching check-in",
                    at=event.time,
                )
            )
        else:
            result.worked_seconds += _span_seconds(open_since, event.time, anomalies, "shift")
            open_since = None

    for earlier, later in zip(ordered, ordered[1:]):
        if earlier.type is EventType.OUT and later.type is EventType.IN:
            result.break_seconds += (later.time - earlier.time).total_seconds()

    if open_since is not None:
        result.worked_seconds += _span_seconds(open_since, as_of, anomalies, "open shift")
        result.currently_open = True

    return result


def reduce_attendance_day(day: AttendanceDay, now: Optional[datetime] = None) -> DayReduction:
    """Reduce a stored day, measuring open shifts on past days to end of day."""
    now = as_utc(now) if now is not None else utcnow()
    return reduce_day(
        day.events,
        day.check_in,
        day.check_out,
        resolve_as_of(day.day, now),
        current_day=day.day == now.date(),
    )


def worked_hours(day: Optional[AttendanceDay], now: Optional[datetime] = None) -> float:
    if day is None:
        return 0.0
    return reduce_attendance_day(day, now).worked_hours
