from .attendance import AttendanceEventRow, AttendanceRecord
from .daily_override import DailyPayrollOverride
from .employee import Employee
from .overtime_config import OvertimeConfig
from .payroll_record import PayrollRecord
from .rate_period import HourlyRatePeriod
from .timesheet import Timesheet

__all__ = [
    "Employee",
    "AttendanceRecord",
    "AttendanceEventRow",
    "HourlyRatePeriod",
    "OvertimeConfig",
    "PayrollRecord",
    "DailyPayrollOverride",
    "Timesheet",
]
