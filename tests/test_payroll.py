from datetime import date, timedelta

import pytest

from shift_helpers import at
from shiftpay.attendance import find_or_create_day, record_check_in, record_check_out
from shiftpay.errors import InvalidDateRange, PayrollInputError
from shiftpay.models import (
    DailyOverride,
    EmployeeProfile,
    LineItem,
    OvertimeConfig,
    PaymentType,
    PayrollStatus,
    RatePeriod,
)
from shiftpay.payroll import (
    calculate_hours_worked,
    daily_hours_and_earnings,
    generate_payroll_record,
    get_overtime_config,
    monthly_daily_earnings,
    recalculate_payroll,
)

MONDAY = date(2024, 3, 4)
FRIDAY = MONDAY + timedelta(days=4)


@pytest.fixture
def hourly_store(store):
    store.add_employee(EmployeeProfile(id="e1", name="Ada", payment_type=PaymentType.HOURLY, hourly_rate=20))
    for offset, hours in enumerate([10, 10, 10, 10, 6]):
        day = MONDAY + timedelta(days=offset)
        attendance = record_check_in(find_or_create_day(store, "e1", day), at(day, 8))
        store.save_attendance_day(record_check_out(attendance, at(day, 8 + hours)))
    return store


def test_overtime_config_is_created_lazily(store):
    config = get_overtime_config(store, "e9")

    assert (config.weekly_threshold_hours, config.overtime_multiplier) == (40.0, 1.5)
    assert store.get_overtime_config("e9") is config


def test_daily_figures_split_against_week(hourly_store):
    figures = daily_hours_and_earnings(hourly_store, "e1", FRIDAY)

    assert figures.hours == 6
    assert figures.regular_hours == 0
    assert figures.overtime_hours == 6
    assert figures.rate == 20
    assert figures.earnings == 180.0
    assert figures.overridden is False


def test_month_covers_every_calendar_day(hourly_store):
    figures = monthly_daily_earnings(hourly_store, "e1", 2024, 2)

    assert sorted(figures) == list(range(1, 30))
    assert all(f.hours == 0 for f in figures.values())


def test_hours_worked_for_month(hourly_store):
    assert calculate_hours_worked(hourly_store, "e1", 2024, 3) == 46


def test_hourly_payroll_record(hourly_store):
    record = generate_payroll_record(hourly_store, "e1", 2024, 3, bonuses=[LineItem("shift", 100)])

    assert record.payment_type is PaymentType.HOURLY
    assert (record.hours_worked, record.regular_hours, record.overtime_hours) == (46, 40, 6)
    assert record.hourly_rate == 20
    assert record.earnings == 980.0
    assert record.base_salary == 980.0
    assert record.net_salary == 1080.0
    assert hourly_store.get_payroll_record("e1", 2024, 3) is record


def test_override_replaces_derived_figures(hourly_store):
    hourly_store.save_daily_override(DailyOverride(employee_id="e1", day=FRIDAY, total_hours=8))

    figures = daily_hours_and_earnings(hourly_store, "e1", FRIDAY)

    assert figures.overridden is True
    assert figures.overtime_hours == 8
    assert figures.earnings == 240.0


def test_override_with_explicit_earnings(hourly_store):
    hourly_store.save_daily_override(
        DailyOverride(employee_id="e1", day=MONDAY, regular_hours=7, overtime_hours=0, earnings=99.5)
    )

    figures = daily_hours_and_earnings(hourly_store, "e1", MONDAY)

    assert figures.hours == 7
    assert figures.earnings == 99.5


def test_custom_multiplier_is_used(hourly_store):
    hourly_store.save_overtime_config(OvertimeConfig(employee_id="e1", overtime_multiplier=2.0))

    assert daily_hours_and_earnings(hourly_store, "e1", FRIDAY).earnings == 240.0


def test_salary_payroll_record(store):
    store.add_employee(EmployeeProfile(id="s1", name="Grace", payment_type=PaymentType.SALARY, monthly_salary=5000))

    record = generate_payroll_record(
        store,
        "s1",
        2024,
        3,
        bonuses=[LineItem("performance", 200), LineItem("referral", 50)],
        deductions=[LineItem("advance", 100)],
    )

    assert record.net_salary == 5150.0
    assert record.hours_worked is None


def test_hourly_without_rate_is_rejected(store):
    store.add_employee(EmployeeProfile(id="e2", name="Linus", payment_type=PaymentType.HOURLY))

    with pytest.raises(PayrollInputError):
        generate_payroll_record(store, "e2", 2024, 3)


def test_unknown_employee_is_rejected(store):
    with pytest.raises(PayrollInputError):
        generate_payroll_record(store, "nobody", 2024, 3)


def test_invalid_month_is_caller_misuse(hourly_store):
    with pytest.raises(InvalidDateRange):
        generate_payroll_record(hourly_store, "e1", 2024, 13)


def test_recalculate_keeps_line_items_and_approval(hourly_store):
    record = generate_payroll_record(hourly_store, "e1", 2024, 3, deductions=[LineItem("uniform", 30)])
    record.status = PayrollStatus.APPROVED
    hourly_store.save_daily_override(DailyOverride(employee_id="e1", day=FRIDAY, total_hours=8))

    updated = recalculate_payroll(hourly_store, record)

    assert updated.status is PayrollStatus.APPROVED
    assert updated.earnings == 1040.0
    assert updated.net_salary == 1010.0


def _work(store, day, hours):
    attendance = record_check_in(find_or_create_day(store, "e1", day), at(day, 8))
    store.save_attendance_day(record_check_out(attendance, at(day, 8 + hours)))


@pytest.fixture
def period_store(store):
    store.add_employee(EmployeeProfile(id="e1", name="Ada", payment_type=PaymentType.HOURLY, hourly_rate=20))
    store.add_rate_period(
        RatePeriod(id="p1", employee_id="e1", start=date(2024, 3, 25), end=date(2024, 3, 31), hourly_rate=30)
    )
    _work(store, MONDAY, 8)
    _work(store, date(2024, 3, 26), 8)
    return store


def test_recalculation_matches_generation_with_partial_rate_period(period_store):
    record = generate_payroll_record(period_store, "e1", 2024, 3)
    generated = record.earnings

    updated = recalculate_payroll(period_store, record)

    assert generated == 400.0
    assert updated.earnings == generated
    assert updated.hourly_rate == 20


def test_explicit_rate_covers_days_outside_rate_periods(period_store):
    record = generate_payroll_record(period_store, "e1", 2024, 3, hourly_rate=25)

    assert record.hourly_rate == 25
    assert record.earnings == 440.0
    assert recalculate_payroll(period_store, record).earnings == 440.0


def test_rate_periods_alone_are_enough_for_hourly_payroll(store):
    store.add_employee(EmployeeProfile(id="e1", name="Ada", payment_type=PaymentType.HOURLY))
    store.add_rate_period(RatePeriod(id="p1", employee_id="e1", start=MONDAY, end=MONDAY, hourly_rate=30))
    _work(store, MONDAY, 8)

    record = generate_payroll_record(store, "e1", 2024, 3)

    assert record.hourly_rate is None
    assert record.earnings == 240.0
    assert recalculate_payroll(store, record).earnings == 240.0


def test_overridden_days_count_toward_the_weekly_threshold(store):
    store.add_employee(EmployeeProfile(id="e1", name="Ada", payment_type=PaymentType.HOURLY, hourly_rate=20))
    for offset in range(4):
        store.save_daily_override(
            DailyOverride(employee_id="e1", day=MONDAY + timedelta(days=offset), total_hours=10)
        )
    _work(store, FRIDAY, 6)

    week = [daily_hours_and_earnings(store, "e1", MONDAY + timedelta(days=offset)) for offset in range(7)]
    total = sum(f.hours for f in week)

    assert total == 46
    assert sum(f.overtime_hours for f in week) == max(0.0, total - 40)
    assert week[4].overtime_hours == 6
    assert week[4].earnings == 180.0
