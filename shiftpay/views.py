from __future__ import annotations
from datetime import date
from typing import Mapping

from .models import (
    DailyFigures,
    DayReduction,
    PayrollStats,
    TimesheetGenerationResult,
    TimesheetPeriod,
    WeeklyOvertimeResult,
)


def _hm(seconds: float) -> str:
    minutes = int(round(seconds / 60))
    return f"{minutes // 60}h {minutes % 60:02d}m"


def format_day(day: date, reduction: DayReduction) -> str:
    rows = [
        f"Attendance {day.isoformat()}",
        f"Worked: {_hm(reduction.worked_seconds)}",
        f"Break:  {_hm(reduction.break_seconds)}",
    ]
    if reduction.currently_open:
        rows.append("Status: clocked in")
    if reduction.has_anomalies:
        rows.extend(f"Warning: {a.kind.value}: {a.detail}" for a in reduction.anomalies)
    return "\n".join(rows)


def format_week(result: WeeklyOvertimeResult) -> str:
    rows = [
        f"Week {result.week_start.isoformat()} - {result.week_end.isoformat()} (threshold {result.threshold:.2f}h)",
        "Date        Hours  Regular  Overtime",
    ]
    for day in result.days:
        rows.append(
            f"{day.worked_date.isoformat()}  {day.total_hours:>5.2f}  {day.split.regular_hours:>7.2f}  {day.split.overtime_hours:>8.2f}"
        )
    rows.append(
        f"Total hours: {result.total_hours:.2f} regular: {result.total_regular_hours:.2f} overtime: {result.total_ot_hours:.2f}"
    )
    return "\n".join(rows)


def format_calendar(figures: Mapping[int, DailyFigures], year: int, month: int) -> str:
    rows = [f"Calendar {year}-{month:02d}", "Date        Hours   Earnings"]
    total_hours = 0.0
    total_earnings = 0.0
    for day_number in sorted(figures):
        entry = figures[day_number]
        marker = " *" if entry.overridden else ""
        rows.append(f"{entry.day.isoformat()}  {entry.hours:>5.2f}  {entry.earnings:>9.2f}{marker}")
        total_hours += entry.hours
        total_earnings += entry.earnings
    rows.append(f"Total hours: {total_hours:.2f} earnings: {total_earnings:.2f}")
    return "\n".join(rows)


def format_timesheets(period: TimesheetPeriod) -> str:
    rows = [
        f"Timesheets {period.start.isoformat()} - {period.end.isoformat()}",
        "Date        Hours  Regular  Overtime   Earnings  Status",
    ]
    for sheet in period.timesheets:
        rows.append(
            f"{sheet.day.isoformat()}  {sheet.hours:>5.2f}  {sheet.regular_hours:>7.2f}  {sheet.overtime_hours:>8.2f}"
            f"  {sheet.earnings:>9.2f}  {sheet.status.value}"
        )
    rows.append(
        f"Total hours: {period.total_hours:.2f} regular: {period.total_regular_hours:.2f} "
        f"overtime: {period.total_overtime_hours:.2f} earnings: {period.total_earnings:.2f}"
    )
    return "\n".join(rows)


def format_generation(result: TimesheetGenerationResult) -> str:
    rows = [f"Created {result.created}, updated {result.updated}, skipped {result.skipped}"]
    rows.extend(f"Error {e.day.isoformat()}: {e.error}" for e in result.errors)
    return "\n".join(rows)


def format_stats(stats: PayrollStats) -> str:
    rows = [
        f"Payroll statistics for {stats.employee_id} ({stats.year}-{stats.month:02d})",
        f"This month: {stats.current_month_earnings:.2f} over {stats.current_month_hours:.2f}h",
        f"Year to date: {stats.year_to_date_total:.2f} over {stats.year_to_date_hours:.2f}h",
        f"All time: {stats.all_time_total:.2f} net over {stats.all_time_hours:.2f}h",
        f"Records: {stats.total_payrolls} (pending {stats.pending_count}), average {stats.average_monthly_earnings:.2f}",
    ]
    for entry in stats.monthly_breakdown:
        if entry.status is not None:
            rows.append(f"  {entry.month_name:<10} {entry.earnings:>10.2f}  {entry.status.value}")
    return "\n".join(rows)
