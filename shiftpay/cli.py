from __future__ import annotations
import argparse
import sys
from datetime import date, datetime
from pathlib import Path
from uuid import uuid4

from .attendance import find_or_create_day, record_check_in, record_check_out
from .clock import as_utc, utcnow
from .errors import ShiftpayError
from .models import EmployeeProfile, LineItem, OvertimeConfig, PaymentType, RatePeriod, TimesheetStatus
from .overtime import split_week, week_hours
from .payroll import generate_payroll_record, get_overtime_config, monthly_daily_earnings
from .shifts import reduce_attendance_day
from .stats import payroll_stats
from .storage import DataStore
from .sweeper import sweep_auto_checkout
from .timesheets import (
    generate_monthly_timesheets,
    generate_monthly_timesheets_for_all,
    set_timesheet_status,
    timesheets_for_period,
)
from .views import format_calendar, format_day, format_generation, format_stats, format_timesheets, format_week


DEFAULT_DATA_PATH = Path("data/store.json")


def store_from_args(args: argparse.Namespace) -> DataStore:
    return DataStore(DEFAULT_DATA_PATH)


def parse_date(value: str) -> date:
    return date.fromisoformat(value)


def parse_timestamp(value: str | None) -> datetime:
    if not value:
        return utcnow()
    return as_utc(datetime.fromisoformat(value))


def parse_line_item(value: str) -> LineItem:
    name, _, amount = value.rpartition("=")
    if not name:
        raise argparse.ArgumentTypeError(f"Expected NAME=AMOUNT, got {value!r}")
    return LineItem(name=name, amount=float(amount))


def cmd_add_employee(args: argparse.Namespace) -> None:
    store = store_from_args(args)
    employee = EmployeeProfile(
        id=args.id or str(uuid4()),
        name=args.name,
        payment_type=args.type,
        hourly_rate=args.hourly_rate,
        monthly_salary=args.monthly_salary,
    )
    store.add_employee(employee)
    store.save()
    print(f"Added employee {employee.id} ({employee.name})")


def cmd_list_employees(args: argparse.Namespace) -> None:
    store = store_from_args(args)
    for employee in store.list_employees():
        pay_type = employee.payment_type.value if employee.payment_type else "-"
        rate = employee.hourly_rate if employee.payment_type is PaymentType.HOURLY else employee.monthly_salary
        print(f"{employee.id} {employee.name} type: {pay_type} rate: {rate or 0:.2f}")


def cmd_check_in(args: argparse.Namespace) -> None:
    store = store_from_args(args)
    at = parse_timestamp(args.at)
    day = parse_date(args.date) if args.date else at.date()
    closed = sweep_auto_checkout(store, args.employee, at.date())
    if closed:
        print(f"Auto-checked out {closed} previous day(s)")
    attendance = record_check_in(find_or_create_day(store, args.employee, day), at, args.notes)
    store.save_attendance_day(attendance)
    store.save()
    print(f"Checked in {args.employee} at {at.isoformat()}")


def cmd_check_out(args: argparse.Namespace) -> None:
    store = store_from_args(args)
    at = parse_timestamp(args.at)
    day = parse_date(args.date) if args.date else at.date()
    attendance = record_check_out(find_or_create_day(store, args.employee, day), at, args.notes)
    store.save_attendance_day(attendance)
    store.save()
    print(f"Checked out {args.employee} at {at.isoformat()}")


def cmd_sweep(args: argparse.Namespace) -> None:
    store = store_from_args(args)
    today = parse_date(args.today) if args.today else utcnow().date()
    count = sweep_auto_checkout(store, args.employee, today)
    store.save()
    print(f"Auto-checked out {count} record(s)")


def cmd_day(args: argparse.Namespace) -> None:
    store = store_from_args(args)
    day = parse_date(args.date)
    attendance = find_or_create_day(store, args.employee, day)
    print(format_day(day, reduce_attendance_day(attendance, parse_timestamp(args.now))))


def cmd_add_rate(args: argparse.Namespace) -> None:
    store = store_from_args(args)
    period = RatePeriod(
        id=args.id or str(uuid4()),
        employee_id=args.employee,
        start=parse_date(args.start),
        end=parse_date(args.end),
        hourly_rate=args.rate,
    )
    store.add_rate_period(period)
    store.save()
    print(f"Added rate period {period.id} {period.start} - {period.end} at {period.hourly_rate:.2f}")


def cmd_set_overtime(args: argparse.Namespace) -> None:
    store = store_from_args(args)
    current = get_overtime_config(store, args.employee)
    config = OvertimeConfig(
        employee_id=args.employee,
        weekly_threshold_hours=args.threshold if args.threshold is not None else current.weekly_threshold_hours,
        overtime_multiplier=args.multiplier if args.multiplier is not None else current.overtime_multiplier,
    )
    store.save_overtime_config(config)
    store.save()
    print(f"Overtime for {args.employee}: {config.weekly_threshold_hours}h at x{config.overtime_multiplier}")


def cmd_week(args: argparse.Namespace) -> None:
    store = store_from_args(args)
    anchor = parse_date(args.anchor)
    config = get_overtime_config(store, args.employee)
    hours = week_hours(store, args.employee, anchor, now=parse_timestamp(args.now))
    if not hours:
        print("No attendance recorded for this week")
        return
    print(format_week(split_week(hours, config.weekly_threshold_hours, employee_id=args.employee)))


def cmd_calendar(args: argparse.Namespace) -> None:
    store = store_from_args(args)
    figures = monthly_daily_earnings(store, args.employee, args.year, args.month)
    store.save()
    print(format_calendar(figures, args.year, args.month))


def cmd_generate_payroll(args: argparse.Namespace) -> None:
    store = store_from_args(args)
    record = generate_payroll_record(
        store,
        args.employee,
        args.year,
        args.month,
        payment_type=args.type,
        base_salary=args.base_salary,
        hourly_rate=args.rate,
        bonuses=args.bonus,
        deductions=args.deduction,
    )
    store.save()
    print(f"Payroll {record.key} {record.payment_type.value} net {record.net_salary:.2f} ({record.status.value})")


def cmd_generate_timesheets(args: argparse.Namespace) -> None:
    store = store_from_args(args)
    if args.employee:
        results = {args.employee: generate_monthly_timesheets(store, args.employee, args.year, args.month)}
    else:
        results = generate_monthly_timesheets_for_all(store, args.year, args.month)
    store.save()
    for employee_id, result in results.items():
        print(f"{employee_id}: {format_generation(result)}")


def cmd_timesheets(args: argparse.Namespace) -> None:
    store = store_from_args(args)
    period = timesheets_for_period(store, args.employee, parse_date(args.start), parse_date(args.end))
    print(format_timesheets(period))


def cmd_timesheet_status(args: argparse.Namespace) -> None:
    store = store_from_args(args)
    timesheet = set_timesheet_status(store, args.employee, parse_date(args.date), args.status)
    if timesheet is None:
        print(f"No timesheet for {args.employee} on {args.date}")
        return
    store.save()
    print(f"Timesheet {timesheet.key} is {timesheet.status.value}")


def cmd_stats(args: argparse.Namespace) -> None:
    store = store_from_args(args)
    stats = payroll_stats(store, args.employee, now=parse_timestamp(args.now))
    store.save()
    print(format_stats(stats))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Attendance and payroll CLI")
    sub = parser.add_subparsers(dest="command", required=True)

    employee = sub.add_parser("add-employee", help="Add an employee")
    employee.add_argument("name")
    employee.add_argument("--id")
    employee.add_argument("--type", choices=[t.value for t in PaymentType])
    employee.add_argument("--hourly-rate", type=float)
    employee.add_argument("--monthly-salary", type=float)
    employee.set_defaults(func=cmd_add_employee)

    list_employees = sub.add_parser("list-employees", help="List employees by name")
    list_employees.set_defaults(func=cmd_list_employees)

    check_in = sub.add_parser("check-in", help="Record a check-in")
    check_in.add_argument("employee")
    check_in.add_argument("--at", help="ISO timestamp, defaults to now (UTC)")
    check_in.add_argument("--date", help="Attendance date, defaults to the UTC date of --at")
    check_in.add_argument("--notes")
    check_in.set_defaults(func=cmd_check_in)

    check_out = sub.add_parser("check-out", help="Record a check-out")
    check_out.add_argument("employee")
    check_out.add_argument("--at")
    check_out.add_argument("--date")
    check_out.add_argument("--notes")
    check_out.set_defaults(func=cmd_check_out)

    sweep = sub.add_parser("sweep", help="Close open shifts left on previous days")
    sweep.add_argument("employee")
    sweep.add_argument("--today")
    sweep.set_defaults(func=cmd_sweep)

    day = sub.add_parser("day", help="Show worked and break time for a day")
    day.add_argument("employee")
    day.add_argument("date")
    day.add_argument("--now")
    day.set_defaults(func=cmd_day)

    rate = sub.add_parser("add-rate", help="Add an hourly rate period")
    rate.add_argument("employee")
    rate.add_argument("start")
    rate.add_argument("end")
    rate.add_argument("rate", type=float)
    rate.add_argument("--id")
    rate.set_defaults(func=cmd_add_rate)

    overtime = sub.add_parser("set-overtime", help="Set weekly overtime threshold and multiplier")
    overtime.add_argument("employee")
    overtime.add_argument("--threshold", type=float)
    overtime.add_argument("--multiplier", type=float)
    overtime.set_defaults(func=cmd_set_overtime)

    week = sub.add_parser("week", help="Show the regular/overtime split for a week")
    week.add_argument("employee")
    week.add_argument("anchor", help="Any date in the week")
    week.add_argument("--now")
    week.set_defaults(func=cmd_week)

    calendar = sub.add_parser("calendar", help="Render daily earnings for a month")
    calendar.add_argument("employee")
    calendar.add_argument("year", type=int)
    calendar.add_argument("month", type=int)
    calendar.set_defaults(func=cmd_calendar)

    payroll = sub.add_parser("generate-payroll", help="Create or update a monthly payroll record")
    payroll.add_argument("employee")
    payroll.add_argument("year", type=int)
    payroll.add_argument("month", type=int)
    payroll.add_argument("--type", choices=[t.value for t in PaymentType])
    payroll.add_argument("--base-salary", type=float)
    payroll.add_argument("--rate", type=float, help="Hourly rate for days no rate period covers")
    payroll.add_argument("--bonus", type=parse_line_item, action="append", help="NAME=AMOUNT")
    payroll.add_argument("--deduction", type=parse_line_item, action="append", help="NAME=AMOUNT")
    payroll.set_defaults(func=cmd_generate_payroll)

    generate = sub.add_parser("generate-timesheets", help="Build DRAFT timesheets from a month of attendance")
    generate.add_argument("year", type=int)
    generate.add_argument("month", type=int)
    generate.add_argument("--employee", help="Defaults to every employee")
    generate.set_defaults(func=cmd_generate_timesheets)

    timesheets = sub.add_parser("timesheets", help="List timesheets with period totals")
    timesheets.add_argument("employee")
    timesheets.add_argument("start")
    timesheets.add_argument("end")
    timesheets.set_defaults(func=cmd_timesheets)

    status = sub.add_parser("timesheet-status", help="Change the status of a timesheet")
    status.add_argument("employee")
    status.add_argument("date")
    status.add_argument("status", choices=[s.value for s in TimesheetStatus])
    status.set_defaults(func=cmd_timesheet_status)

    stats = sub.add_parser("stats", help="Show earnings and hours statistics")
    stats.add_argument("employee")
    stats.add_argument("--now")
    stats.set_defaults(func=cmd_stats)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        args.func(args)
    except ShiftpayError as exc:
        print(f"error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
