from __future__ import annotations


class ShiftpayError(Exception):
    """Base class for errors raised by shiftpay."""


class CallerMisuse(ShiftpayError, ValueError):
    """Raised for inputs that indicate a programming error upstream."""


class InvalidDateRange(CallerMisuse):
    pass


class MissingIdentifier(CallerMisuse):
    pass


class AttendanceError(ShiftpayError):
    pass


class AlreadyCheckedIn(AttendanceError):
    pass


class NotCheckedIn(AttendanceError):
    pass


class EventLogFormatError(ShiftpayError):
    pass


class PayrollInputError(ShiftpayError):
    """The data needed to build a payroll record is not available."""
