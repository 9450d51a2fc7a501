from __future__ import annotations
from calendar import monthrange
from datetime import date, datetime
from typing import Dict, Iterable, Optional

from .earnings import compute_hourly_earnings, compute_net_salary
from .errors import InvalidDateRange, MissingIdentifier, PayrollInputError
from .models import (
    DailyFigures,
    DailyOverride,
    DayReduction,
    LineItem,
    OvertimeConfig,
    PaymentType,
    PayrollRecord,
)
from .overtime import split_overtime
from .rates import resolve_rate
from .shifts import reduce_attendance_day


def get_overtime_config(store, employee_id: str) -> OvertimeConfig:
    """Return the employee's overtime config, creating the default one if absent."""
    if not employee_id:
        raise MissingIdentifier("employee_id is required")
    config = store.get_overtime_config(employee_id)
    if config is None:
        config = OvertimeConfig(employee_id=employee_id)
        store.save_overtime_config(config)
    return config


def month_bounds(year: int, month: int) -> tuple[date, date]:
    if not 1 <= month <= 12:
        raise InvalidDateRange(f"Invalid month {month}. Must be between 1 and 12.")
    _, last_day = monthrange(year, month)
    return date(year, month, 1), date(year, month, last_day)


def _figures_from_override(
    store,
    override: DailyOverride,
    config: OvertimeConfig,
    now: Optional[datetime],
) -> DailyFigures:
    resolved = resolve_rate(store, override.employee_id, override.day)
    rate = override.hourly_rate or (resolved.rate if resolved else None)
    if override.regular_hours is None and override.overtime_hours is None:
        split = split_overtime(
            store,
            override.employee_id,
            override.day,
            override.total_hours,
            config.weekly_threshold_hours,
            now=now,
        )
        regular, overtime = split.regular_hours, split.overtime_hours
    else:
        regular, overtime = override.regular_hours or 0.0, override.overtime_hours or 0.0
    if override.earnings is not None:
        earnings = override.earnings
    else:
        earnings = compute_hourly_earnings(regular, overtime, rate, config.overtime_multiplier)
    return DailyFigures(
        day=override.day,
        hours=override.total_hours,
        regular_hours=regular,
        overtime_hours=overtime,
        rate=rate,
        earnings=earnings,
        overridden=True,
    )


def daily_hours_and_earnings(
    store,
    employee_id: str,
    on: date,
    *,
    now: Optional[datetime] = None,
    config: Optional[OvertimeConfig] = None,
) -> DailyFigures:
    """Hours, overtime split and earnings for one day.

    An administrator override for the day replaces the derived figures.
    """
    config = config or get_overtime_config(store, employee_id)
    override = store.get_daily_override(employee_id, on)
    if override is not None:
        return _figures_from_override(store, override, config, now)

    day = store.get_attendance_day(employee_id, on)
    reduction = reduce_attendance_day(day, now) if day is not None else DayReduction()
    hours = reduction.worked_hours
    split = split_overtime(store, employee_id, on, hours, config.weekly_threshold_hours, now=now)
    resolved = resolve_rate(store, employee_id, on)
    return DailyFigures(
        day=on,
        hours=hours,
        regular_hours=split.regular_hours,
        overtime_hours=split.overtime_hours,
        rate=resolved.rate if resolved else None,
        earnings=compute_hourly_earnings(
            split.regular_hours, split.overtime_hours, resolved, config.overtime_multiplier
        ),
        anomalies=list(reduction.anomalies),
    )


def monthly_daily_earnings(
    store,
    employee_id: str,
    year: int,
    month: int,
    *,
    now: Optional[datetime] = None,
) -> Dict[int, DailyFigures]:
    start, end = month_bounds(year, month)
    config = get_overtime_config(store, employee_id)
    return {
        day: daily_hours_and_earnings(store, employee_id, date(year, month, day), now=now, config=config)
        for day in range(start.day, end.day + 1)
    }


def calculate_hours_worked(store, employee_id: str, year: int, month: int, *, now: Optional[datetime] = None) -> float:
    figures = monthly_daily_earnings(store, employee_id, year, month, now=now)
    return sum(f.hours for f in figures.values())


def generate_payroll_record(
    store,
    employee_id: str,
    year: int,
    month: int,
    *,
    payment_type: Optional[PaymentType] = None,
    base_salary: Optional[float] = None,
    hourly_rate: Optional[float] = None,
    bonuses: Optional[Iterable[LineItem]] = None,
    deductions: Optional[Iterable[LineItem]] = None,
    notes: Optional[str] = None,
    now: Optional[datetime] = None,
) -> PayrollRecord:
    """Create or update the (employee, month, year) payroll record.

    Bonuses and deductions default to those already on the record. Approval
    fields of an existing record are left alone.

    The record's hourly rate is the explicit ``hourly_rate``, else the rate
    already on the record, else the profile rate. It is stored before the
    month is derived, so days no rate period covers are paid at it on the
    first generation and on every recalculation alike.
    """
    month_bounds(year, month)
    employee = store.get_employee(employee_id)
    if employee is None:
        raise PayrollInputError(f"Employee {employee_id} not found")

    payment_type = PaymentType(payment_type or employee.payment_type or PaymentType.SALARY)
    record = store.get_payroll_record(employee_id, year, month)
    if record is None:
        record = PayrollRecord(employee_id=employee_id, month=month, year=year, payment_type=payment_type)
    record.payment_type = payment_type
    if bonuses is not None:
        record.bonuses = list(bonuses)
    if deductions is not None:
        record.deductions = list(deductions)
    if notes is not None:
        record.notes = notes

    if payment_type is PaymentType.HOURLY:
        rate = hourly_rate or record.hourly_rate or employee.hourly_rate
        record.hourly_rate = rate if rate and rate > 0 else None
        if record.hourly_rate is not None:
            store.save_payroll_record(record)
        figures = monthly_daily_earnings(store, employee_id, year, month, now=now).values()
        if record.hourly_rate is None and not any(f.rate for f in figures):
            raise PayrollInputError("Hourly rate is required for hourly employees")
        record.hours_worked = round(sum(f.hours for f in figures), 4)
        record.regular_hours = round(sum(f.regular_hours for f in figures), 4)
        record.overtime_hours = round(sum(f.overtime_hours for f in figures), 4)
        record.earnings = round(sum(f.earnings for f in figures), 2)
        record.base_salary = record.earnings
    else:
        base = base_salary if base_salary and base_salary > 0 else employee.monthly_salary
        if not base or base <= 0:
            raise PayrollInputError("Base salary or monthly salary is required for salaried employees")
        record.base_salary = base
        record.hours_worked = record.regular_hours = record.overtime_hours = None
        record.hourly_rate = record.earnings = None

    record.net_salary = compute_net_salary(record.base_salary, record.bonuses, record.deductions)
    store.save_payroll_record(record)
    return record


def recalculate_payroll(store, record: PayrollRecord, *, now: Optional[datetime] = None) -> PayrollRecord:
    return generate_payroll_record(
        store,
        record.employee_id,
        record.year,
        record.month,
        payment_type=record.payment_type,
        base_salary=record.base_salary if record.payment_type is PaymentType.SALARY else None,
        hourly_rate=record.hourly_rate,
        now=now,
    )
