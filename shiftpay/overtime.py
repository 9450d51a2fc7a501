from __future__ import annotations
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Dict, Mapping, Optional, Tuple

from .errors import CallerMisuse, InvalidDateRange, MissingIdentifier
from .models import DayClassification, OvertimeSplit, WeeklyOvertimeResult
from .shifts import worked_hours


MONDAY = 0
SUNDAY = 6


def week_bounds(anchor: date, week_start: int = MONDAY) -> Tuple[date, date]:
    if not MONDAY <= week_start <= SUNDAY:
        raise CallerMisuse(f"week_start must be a weekday number 0-6, got {week_start}")
    start = anchor - timedelta(days=(anchor.weekday() - week_start) % 7)
    end = start + timedelta(days=6)
    return start, end


def split_day(today_hours: float, hours_before: float, threshold: float = 40.0) -> OvertimeSplit:
    """Split one day's hours against what is left of the weekly threshold."""
    used_before = min(hours_before, threshold)
    remaining = max(0.0, threshold - used_before)
    return OvertimeSplit(
        regular_hours=min(today_hours, remaining),
        overtime_hours=max(0.0, today_hours - remaining),
    )


@dataclass
class WeeklyThresholdRule:
    threshold: float = 40.0

    def split(self, today_hours: float, hours_before: float) -> OvertimeSplit:
        return split_day(today_hours, hours_before, self.threshold)


class OvertimeEngine:
    def __init__(self, weekly_rule: WeeklyThresholdRule, week_start: int = MONDAY) -> None:
        self.weekly_rule = weekly_rule
        self.week_start = week_start

    def classify_days(self, employee_id: str, anchor: date, daily_hours: Mapping[date, float]) -> WeeklyOvertimeResult:
        start, end = week_bounds(anchor, self.week_start)
        result = WeeklyOvertimeResult(
            employee_id=employee_id, week_start=start, week_end=end, threshold=self.weekly_rule.threshold
        )
        running = 0.0
        for day, hours in sorted(daily_hours.items()):
            if not start <= day <= end:
                raise InvalidDateRange(f"{day} is outside the week {start} - {end}")
            split = self.weekly_rule.split(hours, running)
            result.add_day(DayClassification(worked_date=day, total_hours=hours, split=split))
            running += hours
        return result


def split_week(
    daily_hours: Mapping[date, float],
    threshold: float = 40.0,
    *,
    employee_id: str = "",
    week_start: int = MONDAY,
) -> WeeklyOvertimeResult:
    if not daily_hours:
        raise InvalidDateRange("split_week needs at least one day")
    engine = OvertimeEngine(WeeklyThresholdRule(threshold=threshold), week_start=week_start)
    return engine.classify_days(employee_id, min(daily_hours), daily_hours)


def week_hours(
    store,
    employee_id: str,
    anchor: date,
    *,
    now: Optional[datetime] = None,
    week_start: int = MONDAY,
    through: Optional[date] = None,
) -> Dict[date, float]:
    """Worked hours for each day of ``anchor``'s week, up to ``through``.

    A day with an administrator override counts its override total instead
    of its reduced attendance.
    """
    start, end = week_bounds(anchor, week_start)
    last = min(end, through) if through is not None else end
    hours: Dict[date, float] = {}
    if last < start:
        return hours
    for day in store.attendance_days(employee_id, start, last):
        hours[day.day] = hours.get(day.day, 0.0) + worked_hours(day, now)
    for override in store.overrides_between(employee_id, start, last):
        hours[override.day] = override.total_hours
    return hours


def split_overtime(
    store,
    employee_id: str,
    on: date,
    today_hours: float,
    threshold: float = 40.0,
    *,
    now: Optional[datetime] = None,
    week_start: int = MONDAY,
) -> OvertimeSplit:
    """Regular/overtime split of ``today_hours`` given the week so far.

    Only hours of the week's days strictly before ``on`` count against the
    threshold, so overtime starts exactly where the cumulative total crosses it.
    """
    if not employee_id:
        raise MissingIdentifier("employee_id is required to split overtime")
    before = week_hours(store, employee_id, on, now=now, week_start=week_start, through=on - timedelta(days=1))
    return split_day(today_hours, sum(before.values()), threshold)
