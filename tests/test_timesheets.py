from datetime import date, timedelta

import pytest

from shift_helpers import at
from shiftpay import timesheets
from shiftpay.attendance import find_or_create_day, record_check_in, record_check_out
from shiftpay.errors import InvalidDateRange, PayrollInputError
from shiftpay.models import EmployeeProfile, PaymentType, Timesheet, TimesheetStatus
from shiftpay.timesheets import (
    generate_monthly_timesheets,
    generate_monthly_timesheets_for_all,
    generate_timesheets_for_period,
    set_timesheet_status,
    timesheets_for_period,
)

MONDAY = date(2024, 3, 4)
FRIDAY = MONDAY + timedelta(days=4)


@pytest.fixture
def worked_store(store):
    store.add_employee(EmployeeProfile(id="e1", name="Ada", payment_type=PaymentType.HOURLY, hourly_rate=20))
    for offset, hours in enumerate([10, 10, 10, 10, 6]):
        day = MONDAY + timedelta(days=offset)
        notes = "site visit" if day == MONDAY else None
        attendance = record_check_in(find_or_create_day(store, "e1", day), at(day, 8), notes)
        store.save_attendance_day(record_check_out(attendance, at(day, 8 + hours)))
    return store


def test_month_generation_creates_draft_sheets_with_split(worked_store):
    result = generate_monthly_timesheets(worked_store, "e1", 2024, 3)

    assert (result.created, result.updated, result.skipped, result.errors) == (5, 0, 0, [])
    friday = worked_store.get_timesheet("e1", FRIDAY)
    assert friday.status is TimesheetStatus.DRAFT
    assert (friday.hours, friday.regular_hours, friday.overtime_hours) == (6, 0, 6)
    assert friday.hourly_rate == 20
    assert friday.earnings == 180.0
    assert worked_store.get_timesheet("e1", MONDAY).notes == "site visit"


def test_regeneration_updates_drafts_and_skips_submitted(worked_store):
    generate_monthly_timesheets(worked_store, "e1", 2024, 3)
    set_timesheet_status(worked_store, "e1", MONDAY, TimesheetStatus.SUBMITTED)

    result = generate_monthly_timesheets(worked_store, "e1", 2024, 3)

    assert (result.created, result.updated, result.skipped) == (0, 4, 1)


def test_approved_sheet_is_not_rewritten(worked_store):
    worked_store.save_timesheet(Timesheet(employee_id="e1", day=MONDAY, hours=7.5, status=TimesheetStatus.APPROVED))

    result = generate_timesheets_for_period(worked_store, "e1", MONDAY, MONDAY)

    assert result.skipped == 1
    assert worked_store.get_timesheet("e1", MONDAY).hours == 7.5


def test_open_days_are_left_out(store):
    store.save_attendance_day(record_check_in(find_or_create_day(store, "e1", MONDAY), at(MONDAY, 8)))

    result = generate_timesheets_for_period(store, "e1", MONDAY, MONDAY)

    assert result.processed == 0
    assert store.get_timesheet("e1", MONDAY) is None


def test_failing_day_is_reported_and_the_rest_continue(worked_store, monkeypatch):
    derive = timesheets.daily_hours_and_earnings

    def fail_on_monday(store, employee_id, on, **kwargs):
        if on == MONDAY:
            raise PayrollInputError("rate lookup failed")
        return derive(store, employee_id, on, **kwargs)

    monkeypatch.setattr(timesheets, "daily_hours_and_earnings", fail_on_monday)

    result = generate_monthly_timesheets(worked_store, "e1", 2024, 3)

    assert result.created == 4
    assert [(e.day, e.error) for e in result.errors] == [(MONDAY, "rate lookup failed")]
    assert worked_store.get_timesheet("e1", MONDAY) is None


def test_period_totals(worked_store):
    generate_monthly_timesheets(worked_store, "e1", 2024, 3)

    period = timesheets_for_period(worked_store, "e1", MONDAY, MONDAY + timedelta(days=6))

    assert [t.day for t in period.timesheets] == [MONDAY + timedelta(days=n) for n in range(5)]
    assert (period.total_hours, period.total_regular_hours, period.total_overtime_hours) == (46, 40, 6)
    assert period.total_earnings == 980.0


def test_inverted_period_is_rejected(worked_store):
    with pytest.raises(InvalidDateRange):
        timesheets_for_period(worked_store, "e1", FRIDAY, MONDAY)


def test_generation_for_every_employee(worked_store):
    worked_store.add_employee(EmployeeProfile(id="e2", name="Grace", payment_type=PaymentType.SALARY))

    results = generate_monthly_timesheets_for_all(worked_store, 2024, 3)

    assert results["e1"].created == 5
    assert results["e2"].processed == 0


def test_status_of_missing_sheet(store):
    assert set_timesheet_status(store, "e1", MONDAY, TimesheetStatus.APPROVED) is None
