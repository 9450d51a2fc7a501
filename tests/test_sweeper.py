from datetime import date

from shift_helpers import at
from shiftpay.attendance import find_or_create_day, record_check_in, record_check_out
from shiftpay.clock import end_of_day
from shiftpay.models import AttendanceDay, EventType
from shiftpay.sweeper import sweep_auto_checkout

MONDAY = date(2024, 3, 4)
TUESDAY = date(2024, 3, 5)


def test_sweep_closes_previous_open_day_once(store):
    store.save_attendance_day(record_check_in(find_or_create_day(store, "e1", MONDAY), at(MONDAY, 9)))

    assert sweep_auto_checkout(store, "e1", TUESDAY) == 1
    assert sweep_auto_checkout(store, "e1", TUESDAY) == 0

    day = store.get_attendance_day("e1", MONDAY)
    assert day.auto_checked_out is True
    assert day.check_out == end_of_day(MONDAY)
    assert day.events[-1].type is EventType.OUT


def test_sweep_leaves_today_and_closed_days_alone(store):
    closed = record_check_in(find_or_create_day(store, "e1", MONDAY), at(MONDAY, 9))
    store.save_attendance_day(record_check_out(closed, at(MONDAY, 17)))
    store.save_attendance_day(record_check_in(find_or_create_day(store, "e1", TUESDAY), at(TUESDAY, 9)))

    assert sweep_auto_checkout(store, "e1", TUESDAY) == 0
    assert store.get_attendance_day("e1", TUESDAY).is_open


def test_sweep_seeds_log_from_primary_fields(store):
    store.save_attendance_day(AttendanceDay(employee_id="e1", day=MONDAY, check_in=at(MONDAY, 10)))

    sweep_auto_checkout(store, "e1", TUESDAY)

    day = store.get_attendance_day("e1", MONDAY)
    assert [e.type for e in day.events] == [EventType.IN, EventType.OUT]
    assert day.first_check_in == at(MONDAY, 10)


def test_sweep_only_touches_one_employee(store):
    store.save_attendance_day(record_check_in(find_or_create_day(store, "e2", MONDAY), at(MONDAY, 9)))

    assert sweep_auto_checkout(store, "e1", TUESDAY) == 0
    assert store.get_attendance_day("e2", MONDAY).is_open
