from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from .clock import as_utc, utcnow
from .errors import CallerMisuse, InvalidDateRange, MissingIdentifier


class EventType(str, Enum):
    IN = "in"
    OUT = "out"


class AttendanceStatus(str, Enum):
    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    LATE = "LATE"
    HALF_DAY = "HALF_DAY"


class PaymentType(str, Enum):
    HOURLY = "HOURLY"
    SALARY = "SALARY"


class PayrollStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    PAID = "PAID"


class RateSource(str, Enum):
    PERIOD = "period"
    PAYROLL = "payroll"
    PROFILE = "profile"


class AnomalyKind(str, Enum):
    OUT_OF_ORDER = "out_of_order"
    ORPHAN_CHECK_OUT = "orphan_check_out"
    DUPLICATE_CHECK_IN = "duplicate_check_in"
    NEGATIVE_DURATION = "negative_duration"


@dataclass(frozen=True)
class AttendanceEvent:
    type: EventType
    time: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", EventType(self.type))
        object.__setattr__(self, "time", as_utc(self.time))


@dataclass
class AttendanceDay:
    employee_id: str
    day: date
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    status: AttendanceStatus = AttendanceStatus.PRESENT
    events: List[AttendanceEvent] = field(default_factory=list)
    first_check_in: Optional[datetime] = None
    notes: Optional[str] = None
    auto_checked_out: bool = False

    def __post_init__(self) -> None:
        if not self.employee_id:
            raise MissingIdentifier("AttendanceDay requires an employee id")
        self.status = AttendanceStatus(self.status)
        self.check_in = as_utc(self.check_in) if self.check_in else None
        self.check_out = as_utc(self.check_out) if self.check_out else None
        self.first_check_in = as_utc(self.first_check_in) if self.first_check_in else None

    @property
    def key(self) -> str:
        return f"{self.employee_id}:{self.day.isoformat()}"

    @property
    def is_open(self) -> bool:
        return self.check_in is not None and self.check_out is None


@dataclass
class RatePeriod:
    id: str
    employee_id: str
    start: date
    end: date
    hourly_rate: float
    created_at: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise InvalidDateRange(f"Rate period ends ({self.end}) before it starts ({self.start})")
        if self.hourly_rate <= 0:
            raise CallerMisuse("Hourly rate must be positive")
        self.created_at = as_utc(self.created_at)

    def covers(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass
class OvertimeConfig:
    employee_id: str
    weekly_threshold_hours: float = 40.0
    overtime_multiplier: float = 1.5

    def __post_init__(self) -> None:
        if self.weekly_threshold_hours <= 0:
            raise CallerMisuse("Weekly threshold must be positive")
        if self.overtime_multiplier < 1:
            raise CallerMisuse("Overtime multiplier must be at least 1")


@dataclass
class EmployeeProfile:
    id: str
    name: str
    payment_type: Optional[PaymentType] = None
    hourly_rate: Optional[float] = None
    monthly_salary: Optional[float] = None

    def __post_init__(self) -> None:
        if self.payment_type is not None:
            self.payment_type = PaymentType(self.payment_type)


@dataclass
class LineItem:
    name: str
    amount: float


@dataclass
class PayrollRecord:
    employee_id: str
    month: int
    year: int
    payment_type: PaymentType
    hours_worked: Optional[float] = None
    regular_hours: Optional[float] = None
    overtime_hours: Optional[float] = None
    hourly_rate: Optional[float] = None
    earnings: Optional[float] = None
    base_salary: float = 0.0
    bonuses: List[LineItem] = field(default_factory=list)
    deductions: List[LineItem] = field(default_factory=list)
    net_salary: float = 0.0
    status: PayrollStatus = PayrollStatus.PENDING
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    notes: Optional[str] = None

    def __post_init__(self) -> None:
        self.payment_type = PaymentType(self.payment_type)
        self.status = PayrollStatus(self.status)

    @property
    def key(self) -> str:
        return f"{self.employee_id}:{self.year:04d}-{self.month:02d}"

    @property
    def total_bonuses(self) -> float:
        return round(sum(item.amount or 0 for item in self.bonuses), 2)

    @property
    def total_deductions(self) -> float:
        return round(sum(item.amount or 0 for item in self.deductions), 2)


@dataclass
class DailyOverride:
    employee_id: str
    day: date
    hourly_rate: Optional[float] = None
    regular_hours: Optional[float] = None
    overtime_hours: Optional[float] = None
    total_hours: Optional[float] = None
    earnings: Optional[float] = None
    notes: Optional[str] = None

    def __post_init__(self) -> None:
        if self.total_hours is None:
            self.total_hours = (self.regular_hours or 0.0) + (self.overtime_hours or 0.0)
        if self.total_hours > 24:
            raise CallerMisuse("Total hours cannot exceed 24 hours per day")

    @property
    def key(self) -> str:
        return f"{self.employee_id}:{self.day.isoformat()}"


@dataclass
class Anomaly:
    kind: AnomalyKind
    detail: str
    at: Optional[datetime] = None


@dataclass
class DayReduction:
    worked_seconds: float = 0.0
    break_seconds: float = 0.0
    currently_open: bool = False
    anomalies: List[Anomaly] = field(default_factory=list)

    @property
    def worked_hours(self) -> float:
        return self.worked_seconds / 3600

    @property
    def break_hours(self) -> float:
        return self.break_seconds / 3600

    @property
    def has_anomalies(self) -> bool:
        return bool(self.anomalies)


@dataclass
class OvertimeSplit:
    regular_hours: float = 0.0
    overtime_hours: float = 0.0

    @property
    def total_hours(self) -> float:
        return self.regular_hours + self.overtime_hours


@dataclass
class DayClassification:
    worked_date: date
    total_hours: float
    split: OvertimeSplit


@dataclass
class WeeklyOvertimeResult:
    employee_id: str
    week_start: date
    week_end: date
    threshold: float
    days: List[DayClassification] = field(default_factory=list)
    total_regular_hours: float = 0.0
    total_ot_hours: float = 0.0

    def add_day(self, classification: DayClassification) -> None:
        self.days.append(classification)
        self.total_regular_hours += classification.split.regular_hours
        self.total_ot_hours += classification.split.overtime_hours

    @property
    def total_hours(self) -> float:
        return sum(d.total_hours for d in self.days)


@dataclass(frozen=True)
class ResolvedRate:
    rate: float
    source: RateSource


@dataclass
class DailyFigures:
    day: date
    hours: float = 0.0
    regular_hours: float = 0.0
    overtime_hours: float = 0.0
    rate: Optional[float] = None
    earnings: float = 0.0
    overridden: bool = False
    anomalies: List[Anomaly] = field(default_factory=list)


class TimesheetStatus(str, Enum):
    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


@dataclass
class Timesheet:
    employee_id: str
    day: date
    hours: float = 0.0
    regular_hours: float = 0.0
    overtime_hours: float = 0.0
    hourly_rate: Optional[float] = None
    earnings: float = 0.0
    status: TimesheetStatus = TimesheetStatus.DRAFT
    notes: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.employee_id:
            raise MissingIdentifier("Timesheet requires an employee id")
        self.status = TimesheetStatus(self.status)

    @property
    def key(self) -> str:
        return f"{self.employee_id}:{self.day.isoformat()}"

    @property
    def is_draft(self) -> bool:
        return self.status is TimesheetStatus.DRAFT


@dataclass
class TimesheetError:
    day: date
    error: str


@dataclass
class TimesheetGenerationResult:
    created: int = 0
    updated: int = 0
    skipped: int = 0
    errors: List[TimesheetError] = field(default_factory=list)

    @property
    def processed(self) -> int:
        return self.created + self.updated + self.skipped + len(self.errors)


@dataclass
class TimesheetPeriod:
    employee_id: str
    start: date
    end: date
    timesheets: List[Timesheet] = field(default_factory=list)

    @property
    def total_hours(self) -> float:
        return round(sum(t.hours for t in self.timesheets), 4)

    @property
    def total_regular_hours(self) -> float:
        return round(sum(t.regular_hours for t in self.timesheets), 4)

    @property
    def total_overtime_hours(self) -> float:
        return round(sum(t.overtime_hours for t in self.timesheets), 4)

    @property
    def total_earnings(self) -> float:
        return round(sum(t.earnings for t in self.timesheets), 2)


@dataclass
class MonthlyBreakdown:
    month: int
    month_name: str
    earnings: float = 0.0
    status: Optional[PayrollStatus] = None


@dataclass
class YearlyBreakdown:
    year: int
    total_earnings: float = 0.0
    payroll_count: int = 0


@dataclass
class PayrollStats:
    employee_id: str
    year: int
    month: int
    current_month_earnings: float = 0.0
    year_to_date_total: float = 0.0
    all_time_total: float = 0.0
    average_monthly_earnings: float = 0.0
    pending_count: int = 0
    total_payrolls: int = 0
    current_month_hours: float = 0.0
    year_to_date_hours: float = 0.0
    all_time_hours: float = 0.0
    monthly_breakdown: List[MonthlyBreakdown] = field(default_factory=list)
    yearly_breakdown: List[YearlyBreakdown] = field(default_factory=list)
