from __future__ import annotations
import json
from dataclasses import asdict
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from .event_log import decode_event_log, encode_event_log
from .models import (
    AttendanceDay,
    DailyOverride,
    EmployeeProfile,
    LineItem,
    OvertimeConfig,
    PayrollRecord,
    RatePeriod,
    Timesheet,
)


class DataStore:
    """JSON file backed store used by the command line tools and tests."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.employees: Dict[str, EmployeeProfile] = {}
        self.attendance: Dict[str, AttendanceDay] = {}
        self.rate_periods: Dict[str, RatePeriod] = {}
        self.overtime_configs: Dict[str, OvertimeConfig] = {}
        self.payroll_records: Dict[str, PayrollRecord] = {}
        self.daily_overrides: Dict[str, DailyOverride] = {}
        self.timesheets: Dict[str, Timesheet] = {}
        if path.exists():
            self.load()

    def load(self) -> None:
        content = json.loads(self.path.read_text())
        self.employees = {e["id"]: EmployeeProfile(**e) for e in content.get("employees", [])}
        days = [self._deserialize_attendance(a) for a in content.get("attendance", [])]
        self.attendance = {d.key: d for d in days}
        self.rate_periods = {p["id"]: self._deserialize_rate_period(p) for p in content.get("rate_periods", [])}
        self.overtime_configs = {c["employee_id"]: OvertimeConfig(**c) for c in content.get("overtime_configs", [])}
        records = [self._deserialize_payroll(r) for r in content.get("payroll_records", [])]
        self.payroll_records = {r.key: r for r in records}
        overrides = [self._deserialize_override(o) for o in content.get("daily_overrides", [])]
        self.daily_overrides = {o.key: o for o in overrides}
        sheets = [self._deserialize_timesheet(t) for t in content.get("timesheets", [])]
        self.timesheets = {t.key: t for t in sheets}

    def save(self) -> None:
        payload = {
            "employees": [asdict(e) for e in self.employees.values()],
            "attendance": [self._serialize_attendance(a) for a in self.attendance.values()],
            "rate_periods": [asdict(p) for p in self.rate_periods.values()],
            "overtime_configs": [asdict(c) for c in self.overtime_configs.values()],
            "payroll_records": [asdict(r) for r in self.payroll_records.values()],
            "daily_overrides": [asdict(o) for o in self.daily_overrides.values()],
            "timesheets": [asdict(t) for t in self.timesheets.values()],
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(payload, default=self._value_serializer, indent=2))

    # employees

    def add_employee(self, employee: EmployeeProfile) -> None:
        self.employees[employee.id] = employee

    def get_employee(self, employee_id: str) -> Optional[EmployeeProfile]:
        return self.employees.get(employee_id)

    def list_employees(self) -> List[EmployeeProfile]:
        """Return employees ordered by display name."""

        return sorted(self.employees.values(), key=lambda e: e.name.lower())

    # attendance

    def get_attendance_day(self, employee_id: str, day: date) -> Optional[AttendanceDay]:
        return self.attendance.get(f"{employee_id}:{day.isoformat()}")

    def attendance_days(self, employee_id: str, start: date, end: date) -> List[AttendanceDay]:
        days = [a for a in self.attendance.values() if a.employee_id == employee_id and start <= a.day <= end]
        return sorted(days, key=lambda a: a.day)

    def open_attendance_before(self, employee_id: str, day: date) -> List[AttendanceDay]:
        days = [
            a
            for a in self.attendance.values()
            if a.employee_id == employee_id and a.day < day and a.check_in is not None and a.check_out is None
        ]
        return sorted(days, key=lambda a: a.day)

    def save_attendance_day(self, day: AttendanceDay) -> None:
        self.attendance[day.key] = day

    # rates and overtime

    def add_rate_period(self, period: RatePeriod) -> None:
        self.rate_periods[period.id] = period

    def rate_periods_for(self, employee_id: str, day: date) -> List[RatePeriod]:
        return [p for p in self.rate_periods.values() if p.employee_id == employee_id and p.covers(day)]

    def get_overtime_config(self, employee_id: str) -> Optional[OvertimeConfig]:
        return self.overtime_configs.get(employee_id)

    def save_overtime_config(self, config: OvertimeConfig) -> None:
        self.overtime_configs[config.employee_id] = config

    # payroll

    def get_payroll_record(self, employee_id: str, year: int, month: int) -> Optional[PayrollRecord]:
        return self.payroll_records.get(f"{employee_id}:{year:04d}-{month:02d}")

    def save_payroll_record(self, record: PayrollRecord) -> None:
        self.payroll_records[record.key] = record

    def payroll_records_for(self, employee_id: str) -> List[PayrollRecord]:
        records = [r for r in self.payroll_records.values() if r.employee_id == employee_id]
        return sorted(records, key=lambda r: (r.year, r.month), reverse=True)

    def get_daily_override(self, employee_id: str, day: date) -> Optional[DailyOverride]:
        return self.daily_overrides.get(f"{employee_id}:{day.isoformat()}")

    def overrides_between(self, employee_id: str, start: date, end: date) -> List[DailyOverride]:
        overrides = [
            o for o in self.daily_overrides.values() if o.employee_id == employee_id and start <= o.day <= end
        ]
        return sorted(overrides, key=lambda o: o.day)

    def save_daily_override(self, override: DailyOverride) -> None:
        self.daily_overrides[override.key] = override

    def delete_daily_override(self, employee_id: str, day: date) -> bool:
        return self.daily_overrides.pop(f"{employee_id}:{day.isoformat()}", None) is not None

    # timesheets

    def get_timesheet(self, employee_id: str, day: date) -> Optional[Timesheet]:
        return self.timesheets.get(f"{employee_id}:{day.isoformat()}")

    def timesheets_between(self, employee_id: str, start: date, end: date) -> List[Timesheet]:
        sheets = [t for t in self.timesheets.values() if t.employee_id == employee_id and start <= t.day <= end]
        return sorted(sheets, key=lambda t: t.day)

    def save_timesheet(self, timesheet: Timesheet) -> None:
        self.timesheets[timesheet.key] = timesheet

    @staticmethod
    def _value_serializer(value):
        if isinstance(value, (date, datetime)):
            return value.isoformat()
        if isinstance(value, Enum):
            return value.value
        raise TypeError(f"Type {type(value)} not serializable")

    @staticmethod
    def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
        return datetime.fromisoformat(value) if value else None

    def _serialize_attendance(self, day: AttendanceDay) -> dict:
        payload = asdict(day)
        payload["events"] = encode_event_log(day.events)
        return payload

    def _deserialize_attendance(self, data: dict) -> AttendanceDay:
        data["day"] = date.fromisoformat(data["day"])
        for name in ("check_in", "check_out", "first_check_in"):
            data[name] = self._parse_datetime(data.get(name))
        data["events"] = decode_event_log(data.get("events", []))
        return AttendanceDay(**data)

    def _deserialize_rate_period(self, data: dict) -> RatePeriod:
        data["start"] = date.fromisoformat(data["start"])
        data["end"] = date.fromisoformat(data["end"])
        data["created_at"] = self._parse_datetime(data["created_at"])
        return RatePeriod(**data)

    def _deserialize_payroll(self, data: dict) -> PayrollRecord:
        data["bonuses"] = [LineItem(**item) for item in data.get("bonuses", [])]
        data["deductions"] = [LineItem(**item) for item in data.get("deductions", [])]
        data["approved_at"] = self._parse_datetime(data.get("approved_at"))
        return PayrollRecord(**data)

    def _deserialize_override(self, data: dict) -> DailyOverride:
        data["day"] = date.fromisoformat(data["day"])
        return DailyOverride(**data)

    def _deserialize_timesheet(self, data: dict) -> Timesheet:
        data["day"] = date.fromisoformat(data["day"])
        return Timesheet(**data)
