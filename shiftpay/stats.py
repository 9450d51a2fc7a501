from __future__ import annotations
from calendar import month_name
from datetime import datetime
from typing import Dict, Optional

from .clock import as_utc, utcnow
from .errors import MissingIdentifier
from .models import MonthlyBreakdown, PayrollStats, PayrollStatus, YearlyBreakdown
from .payroll import calculate_hours_worked, monthly_daily_earnings


def payroll_stats(store, employee_id: str, *, now: Optional[datetime] = None) -> PayrollStats:
    """Earnings and hours statistics for one employee as of ``now`` (UTC).

    Current-month and year-to-date figures come from daily figures, so they
    are available before any payroll record exists. All-time totals, the
    monthly average and the breakdowns come from payroll records' net salary.
    """
    if not employee_id:
        raise MissingIdentifier("employee_id is required for payroll statistics")
    now = as_utc(now) if now else utcnow()
    year, month = now.year, now.month
    records = list(store.payroll_records_for(employee_id))
    stats = PayrollStats(employee_id=employee_id, year=year, month=month)

    months = {m: monthly_daily_earnings(store, employee_id, year, m, now=now) for m in range(1, month + 1)}
    stats.current_month_earnings = round(sum(f.earnings for f in months[month].values()), 2)
    stats.current_month_hours = round(sum(f.hours for f in months[month].values()), 2)
    stats.year_to_date_total = round(sum(f.earnings for days in months.values() for f in days.values()), 2)
    stats.year_to_date_hours = round(sum(f.hours for days in months.values() for f in days.values()), 2)

    years = {r.year for r in records} or {year}
    stats.all_time_hours = round(
        sum(calculate_hours_worked(store, employee_id, y, m, now=now) for y in years for m in range(1, 13)), 2
    )

    stats.total_payrolls = len(records)
    stats.all_time_total = round(sum(r.net_salary for r in records), 2)
    if records:
        stats.average_monthly_earnings = round(stats.all_time_total / len(records), 2)
    stats.pending_count = sum(1 for r in records if r.status is PayrollStatus.PENDING)

    this_year = {r.month: r for r in records if r.year == year}
    for m in range(1, 13):
        record = this_year.get(m)
        stats.monthly_breakdown.append(
            MonthlyBreakdown(
                month=m,
                month_name=month_name[m],
                earnings=record.net_salary if record else 0.0,
                status=record.status if record else None,
            )
        )

    by_year: Dict[int, YearlyBreakdown] = {}
    for record in records:
        entry = by_year.setdefault(record.year, YearlyBreakdown(year=record.year))
        entry.total_earnings = round(entry.total_earnings + record.net_salary, 2)
        entry.payroll_count += 1
    stats.yearly_breakdown = sorted(by_year.values(), key=lambda y: y.year, reverse=True)
    return stats
