from __future__ import annotations
from datetime import date, datetime
from typing import Dict, Optional

from .errors import InvalidDateRange, MissingIdentifier, ShiftpayError
from .models import (
    DailyFigures,
    Timesheet,
    TimesheetError,
    TimesheetGenerationResult,
    TimesheetPeriod,
    TimesheetStatus,
)
from .payroll import daily_hours_and_earnings, get_overtime_config, month_bounds


def _check_range(employee_id: str, start: date, end: date) -> None:
    if not employee_id:
        raise MissingIdentifier("employee_id is required for timesheets")
    if end < start:
        raise InvalidDateRange("End date must be after start date")


def _apply_figures(timesheet: Timesheet, figures: DailyFigures) -> None:
    timesheet.hours = round(figures.hours, 4)
    timesheet.regular_hours = round(figures.regular_hours, 4)
    timesheet.overtime_hours = round(figures.overtime_hours, 4)
    timesheet.hourly_rate = figures.rate
    timesheet.earnings = figures.earnings


def generate_timesheets_for_period(
    store,
    employee_id: str,
    start: date,
    end: date,
    *,
    now: Optional[datetime] = None,
) -> TimesheetGenerationResult:
    """Create or refresh DRAFT timesheets from closed attendance days in ``start``..``end``.

    Each sheet carries the day's hours, overtime split, rate and earnings.
    Sheets that have left DRAFT are counted as skipped and never rewritten.
    A day whose figures cannot be derived is listed in ``errors`` and the rest
    of the period still runs.
    """
    _check_range(employee_id, start, end)
    result = TimesheetGenerationResult()
    config = get_overtime_config(store, employee_id)
    for attendance in store.attendance_days(employee_id, start, end):
        if attendance.check_in is None or attendance.is_open:
            continue
        existing = store.get_timesheet(employee_id, attendance.day)
        if existing is not None and not existing.is_draft:
            result.skipped += 1
            continue
        try:
            figures = daily_hours_and_earnings(store, employee_id, attendance.day, now=now, config=config)
        except ShiftpayError as exc:
            result.errors.append(TimesheetError(day=attendance.day, error=str(exc)))
            continue

        timesheet = existing or Timesheet(employee_id=employee_id, day=attendance.day)
        _apply_figures(timesheet, figures)
        timesheet.notes = attendance.notes or timesheet.notes
        store.save_timesheet(timesheet)
        if existing is None:
            result.created += 1
        else:
            result.updated += 1
    return result


def generate_monthly_timesheets(
    store, employee_id: str, year: int, month: int, *, now: Optional[datetime] = None
) -> TimesheetGenerationResult:
    start, end = month_bounds(year, month)
    return generate_timesheets_for_period(store, employee_id, start, end, now=now)


def generate_monthly_timesheets_for_all(
    store, year: int, month: int, *, now: Optional[datetime] = None
) -> Dict[str, TimesheetGenerationResult]:
    return {
        employee.id: generate_monthly_timesheets(store, employee.id, year, month, now=now)
        for employee in store.list_employees()
    }


def timesheets_for_period(store, employee_id: str, start: date, end: date) -> TimesheetPeriod:
    _check_range(employee_id, start, end)
    return TimesheetPeriod(
        employee_id=employee_id,
        start=start,
        end=end,
        timesheets=list(store.timesheets_between(employee_id, start, end)),
    )


def set_timesheet_status(store, employee_id: str, day: date, status: TimesheetStatus) -> Optional[Timesheet]:
    timesheet = store.get_timesheet(employee_id, day)
    if timesheet is None:
        return None
    timesheet.status = TimesheetStatus(status)
    store.save_timesheet(timesheet)
    return timesheet
