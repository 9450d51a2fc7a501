from datetime import date, timedelta

from shift_helpers import at, log
from shiftpay.models import AnomalyKind, AttendanceDay
from shiftpay.shifts import reduce_attendance_day, reduce_day, worked_hours

DAY = date(2024, 3, 4)


def test_two_shifts_with_lunch_break():
    events = log(DAY, ("in", 9, 0), ("out", 12, 0), ("in", 13, 0), ("out", 17, 30))

    result = reduce_day(events, as_of=at(DAY, 23))

    assert result.worked_seconds == 27000
    assert result.break_seconds == 3600
    assert result.currently_open is False
    assert result.anomalies == []


def test_open_shift_is_measured_to_as_of():
    result = reduce_day(log(DAY, ("in", 9, 0)), as_of=at(DAY, 11))

    assert result.worked_seconds == 7200
    assert result.currently_open is True


def test_worked_plus_break_spans_first_in_to_last_out():
    events = log(DAY, ("in", 8, 15), ("out", 10, 0), ("in", 10, 20), ("out", 14, 0), ("in", 14, 45), ("out", 18, 5))

    result = reduce_day(events, as_of=at(DAY, 23))

    assert result.worked_seconds + result.break_seconds == (at(DAY, 18, 5) - at(DAY, 8, 15)).total_seconds()


def test_empty_log_and_no_fallback_is_zero():
    result = reduce_day([], as_of=at(DAY, 12))

    assert result.worked_seconds == 0
    assert result.break_seconds == 0
    assert result.currently_open is False


def test_unsorted_log_is_sorted_and_flagged():
    events = log(DAY, ("out", 12, 0), ("in", 9, 0))

    result = reduce_day(events, as_of=at(DAY, 23))

    assert result.worked_seconds == 3 * 3600
    assert [a.kind for a in result.anomalies] == [AnomalyKind.OUT_OF_ORDER]


def test_orphan_check_out_is_ignored():
    events = log(DAY, ("out", 8, 0), ("in", 9, 0), ("out", 10, 0))

    result = reduce_day(events, as_of=at(DAY, 23))

    assert result.worked_seconds == 3600
    assert AnomalyKind.ORPHAN_CHECK_OUT in [a.kind for a in result.anomalies]


def test_duplicate_check_in_keeps_first_open():
    events = log(DAY, ("in", 9, 0), ("in", 10, 0), ("out", 11, 0))

    result = reduce_day(events, as_of=at(DAY, 23))

    assert result.worked_seconds == 2 * 3600
    assert [a.kind for a in result.anomalies] == [AnomalyKind.DUPLICATE_CHECK_IN]


def test_fallback_fields_with_negative_span_are_absolute():
    result = reduce_day([], at(DAY, 17), at(DAY, 9), as_of=at(DAY, 23))

    assert result.worked_seconds == 8 * 3600
    assert [a.kind for a in result.anomalies] == [AnomalyKind.NEGATIVE_DURATION]


def test_open_fallback_on_past_day_is_not_projected():
    result = reduce_day([], at(DAY, 9), None, as_of=at(DAY, 23), current_day=False)

    assert result.worked_seconds == 0
    assert result.currently_open is True


def test_past_open_day_is_measured_to_end_of_day():
    day = AttendanceDay(employee_id="e1", day=DAY, check_in=at(DAY, 20), events=log(DAY, ("in", 20, 0)))

    first = reduce_attendance_day(day, now=at(DAY + timedelta(days=1), 9))
    later = reduce_attendance_day(day, now=at(DAY + timedelta(days=5), 9))

    assert first.worked_seconds == later.worked_seconds
    assert round(first.worked_hours, 2) == 4.0


def test_worked_hours_of_missing_day_is_zero():
    assert worked_hours(None) == 0.0
