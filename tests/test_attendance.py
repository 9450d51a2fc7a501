from datetime import date

import pytest

from shift_helpers import at
from shiftpay.attendance import find_or_create_day, record_check_in, record_check_out
from shiftpay.errors import AlreadyCheckedIn, MissingIdentifier, NotCheckedIn
from shiftpay.models import AttendanceDay

DAY = date(2024, 3, 4)


def test_check_in_then_out_builds_log():
    day = AttendanceDay(employee_id="e1", day=DAY)

    record_check_in(day, at(DAY, 9))
    record_check_out(day, at(DAY, 12))
    record_check_in(day, at(DAY, 13))

    assert [e.type.value for e in day.events] == ["in", "out", "in"]
    assert day.check_in == at(DAY, 13)
    assert day.first_check_in == at(DAY, 9)
    assert day.check_out is None
    assert day.is_open


def test_double_check_in_is_rejected():
    day = record_check_in(AttendanceDay(employee_id="e1", day=DAY), at(DAY, 9))

    with pytest.raises(AlreadyCheckedIn):
        record_check_in(day, at(DAY, 10))


def test_check_out_without_check_in_is_rejected():
    with pytest.raises(NotCheckedIn):
        record_check_out(AttendanceDay(employee_id="e1", day=DAY), at(DAY, 17))


def test_second_check_out_is_rejected():
    day = record_check_out(record_check_in(AttendanceDay(employee_id="e1", day=DAY), at(DAY, 9)), at(DAY, 17))

    with pytest.raises(NotCheckedIn):
        record_check_out(day, at(DAY, 18))


def test_find_or_create_requires_employee(store):
    with pytest.raises(MissingIdentifier):
        find_or_create_day(store, "", DAY)
