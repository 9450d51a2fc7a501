from __future__ import annotations

from datetime import date
from typing import Iterator, Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from shiftpay import models as core
from shiftpay.clock import as_utc

from app.db.session import get_session
from app.models import (
    AttendanceEventRow,
    AttendanceRecord,
    DailyPayrollOverride,
    Employee,
    HourlyRatePeriod,
    OvertimeConfig,
    PayrollRecord,
    Timesheet,
)


def _float(value) -> Optional[float]:
    return float(value) if value is not None else None


def _utc(value):
    return as_utc(value) if value is not None else None


class SqlStore:
    """Store interface expected by ``shiftpay`` backed by a SQLAlchemy session.

    Writes are flushed but never committed; the request handler owns the
    transaction.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    # employees

    def get_employee(self, employee_id) -> Optional[core.EmployeeProfile]:
        row = self.db.get(Employee, int(employee_id))
        if row is None:
            return None
        return core.EmployeeProfile(
            id=str(row.id),
            name=row.name,
            payment_type=row.payment_type,
            hourly_rate=_float(row.hourly_rate),
            monthly_salary=_float(row.monthly_salary),
        )

    def list_employees(self) -> list[core.EmployeeProfile]:
        rows = self.db.query(Employee).order_by(Employee.name.asc()).all()
        return [self.get_employee(row.id) for row in rows]

    # attendance

    def _attendance_row(self, employee_id, day: date) -> Optional[AttendanceRecord]:
        return (
            self.db.query(AttendanceRecord)
            .filter(AttendanceRecord.employee_id == int(employee_id), AttendanceRecord.day == day)
            .one_or_none()
        )

    @staticmethod
    def to_attendance_day(row: AttendanceRecord) -> core.AttendanceDay:
        return core.AttendanceDay(
            employee_id=str(row.employee_id),
            day=row.day,
            check_in=_utc(row.check_in),
            check_out=_utc(row.check_out),
            status=row.status,
            events=[core.AttendanceEvent(type=e.event_type, time=as_utc(e.occurred_at)) for e in row.events],
            first_check_in=_utc(row.first_check_in),
            notes=row.notes,
            auto_checked_out=bool(row.auto_checked_out),
        )

    def get_attendance_day(self, employee_id, day: date) -> Optional[core.AttendanceDay]:
        row = self._attendance_row(employee_id, day)
        return self.to_attendance_day(row) if row else None

    def attendance_days(self, employee_id, start: date, end: date) -> list[core.AttendanceDay]:
        rows = (
            self.db.query(AttendanceRecord)
            .filter(
                AttendanceRecord.employee_id == int(employee_id),
                AttendanceRecord.day >= start,
                AttendanceRecord.day <= end,
            )
            .order_by(AttendanceRecord.day.asc())
            .all()
        )
        return [self.to_attendance_day(row) for row in rows]

    def open_attendance_before(self, employee_id, day: date) -> list[core.AttendanceDay]:
        rows = (
            self.db.query(AttendanceRecord)
            .filter(
                AttendanceRecord.employee_id == int(employee_id),
                AttendanceRecord.day < day,
                AttendanceRecord.check_in.isnot(None),
                AttendanceRecord.check_out.is_(None),
            )
            .order_by(AttendanceRecord.day.asc())
            .all()
        )
        return [self.to_attendance_day(row) for row in rows]

    def save_attendance_day(self, day: core.AttendanceDay) -> AttendanceRecord:
        row = self._attendance_row(day.employee_id, day.day)
        if row is None:
            row = AttendanceRecord(employee_id=int(day.employee_id), day=day.day)
            self.db.add(row)
        row.check_in = day.check_in
        row.check_out = day.check_out
        row.first_check_in = day.first_check_in
        row.status = day.status.value
        row.notes = day.notes
        row.auto_checked_out = day.auto_checked_out
        row.events = [
            AttendanceEventRow(position=index, event_type=event.type.value, occurred_at=event.time)
            for index, event in enumerate(day.events)
        ]
        self.db.flush()
        return row

    # rates and overtime

    @staticmethod
    def to_rate_period(row: HourlyRatePeriod) -> core.RatePeriod:
        return core.RatePeriod(
            id=str(row.id),
            employee_id=str(row.employee_id),
            start=row.start_date,
            end=row.end_date,
            hourly_rate=float(row.hourly_rate),
            created_at=as_utc(row.created_at),
        )

    def rate_periods_for(self, employee_id, day: date) -> list[core.RatePeriod]:
        rows = (
            self.db.query(HourlyRatePeriod)
            .filter(
                HourlyRatePeriod.employee_id == int(employee_id),
                HourlyRatePeriod.start_date <= day,
                HourlyRatePeriod.end_date >= day,
            )
            .order_by(HourlyRatePeriod.id.asc())
            .all()
        )
        return [self.to_rate_period(row) for row in rows]

    def get_overtime_config(self, employee_id) -> Optional[core.OvertimeConfig]:
        row = self.db.query(OvertimeConfig).filter(OvertimeConfig.employee_id == int(employee_id)).one_or_none()
        if row is None:
            return None
        return core.OvertimeConfig(
            employee_id=str(row.employee_id),
            weekly_threshold_hours=row.weekly_threshold_hours,
            overtime_multiplier=row.overtime_multiplier,
        )

    def save_overtime_config(self, config: core.OvertimeConfig) -> None:
        row = self.db.query(OvertimeConfig).filter(OvertimeConfig.employee_id == int(config.employee_id)).one_or_none()
        if row is None:
            row = OvertimeConfig(employee_id=int(config.employee_id))
            self.db.add(row)
        row.weekly_threshold_hours = config.weekly_threshold_hours
        row.overtime_multiplier = config.overtime_multiplier
        self.db.flush()

    # payroll

    def payroll_row(self, employee_id, year: int, month: int) -> Optional[PayrollRecord]:
        return (
            self.db.query(PayrollRecord)
            .filter(
                PayrollRecord.employee_id == int(employee_id),
                PayrollRecord.year == year,
                PayrollRecord.month == month,
            )
            .one_or_none()
        )

    def payroll_records_for(self, employee_id) -> list[core.PayrollRecord]:
        rows = (
            self.db.query(PayrollRecord)
            .filter(PayrollRecord.employee_id == int(employee_id))
            .order_by(PayrollRecord.year.desc(), PayrollRecord.month.desc())
            .all()
        )
        return [self.to_payroll_record(row) for row in rows]

    @staticmethod
    def to_payroll_record(row: PayrollRecord) -> core.PayrollRecord:
        return core.PayrollRecord(
            employee_id=str(row.employee_id),
            month=row.month,
            year=row.year,
            payment_type=row.payment_type,
            hours_worked=row.hours_worked,
            regular_hours=row.regular_hours,
            overtime_hours=row.overtime_hours,
            hourly_rate=_float(row.hourly_rate),
            earnings=_float(row.earnings),
            base_salary=float(row.base_salary or 0),
            bonuses=[core.LineItem(**item) for item in row.bonuses or []],
            deductions=[core.LineItem(**item) for item in row.deductions or []],
            net_salary=float(row.net_salary or 0),
            status=row.status,
            approved_by=row.approved_by,
            approved_at=_utc(row.approved_at),
            notes=row.notes,
        )

    def get_payroll_record(self, employee_id, year: int, month: int) -> Optional[core.PayrollRecord]:
        row = self.payroll_row(employee_id, year, month)
        return self.to_payroll_record(row) if row else None

    def save_payroll_record(self, record: core.PayrollRecord) -> PayrollRecord:
        row = self.payroll_row(record.employee_id, record.year, record.month)
        if row is None:
            row = PayrollRecord(employee_id=int(record.employee_id), month=record.month, year=record.year)
            self.db.add(row)
        row.payment_type = record.payment_type.value
        row.hours_worked = record.hours_worked
        row.regular_hours = record.regular_hours
        row.overtime_hours = record.overtime_hours
        row.hourly_rate = record.hourly_rate
        row.earnings = record.earnings
        row.base_salary = record.base_salary
        row.bonuses = [{"name": item.name, "amount": item.amount} for item in record.bonuses]
        row.deductions = [{"name": item.name, "amount": item.amount} for item in record.deductions]
        row.net_salary = record.net_salary
        row.status = record.status.value
        row.approved_by = record.approved_by
        row.approved_at = record.approved_at
        row.notes = record.notes
        self.db.flush()
        return row

    def _override_row(self, employee_id, day: date) -> Optional[DailyPayrollOverride]:
        return (
            self.db.query(DailyPayrollOverride)
            .filter(DailyPayrollOverride.employee_id == int(employee_id), DailyPayrollOverride.day == day)
            .one_or_none()
        )

    def get_daily_override(self, employee_id, day: date) -> Optional[core.DailyOverride]:
        row = self._override_row(employee_id, day)
        return self.to_daily_override(row) if row else None

    def overrides_between(self, employee_id, start: date, end: date) -> list[core.DailyOverride]:
        rows = (
            self.db.query(DailyPayrollOverride)
            .filter(
                DailyPayrollOverride.employee_id == int(employee_id),
                DailyPayrollOverride.day >= start,
                DailyPayrollOverride.day <= end,
            )
            .order_by(DailyPayrollOverride.day.asc())
            .all()
        )
        return [self.to_daily_override(row) for row in rows]

    @staticmethod
    def to_daily_override(row: DailyPayrollOverride) -> core.DailyOverride:
        return core.DailyOverride(
            employee_id=str(row.employee_id),
            day=row.day,
            hourly_rate=_float(row.hourly_rate),
            regular_hours=row.regular_hours,
            overtime_hours=row.overtime_hours,
            total_hours=row.total_hours,
            earnings=_float(row.earnings),
            notes=row.notes,
        )

    def save_daily_override(self, override: core.DailyOverride) -> DailyPayrollOverride:
        row = self._override_row(override.employee_id, override.day)
        if row is None:
            row = DailyPayrollOverride(employee_id=int(override.employee_id), day=override.day)
            self.db.add(row)
        row.hourly_rate = override.hourly_rate
        row.regular_hours = override.regular_hours
        row.overtime_hours = override.overtime_hours
        row.total_hours = override.total_hours
        row.earnings = override.earnings
        row.notes = override.notes
        self.db.flush()
        return row

    def delete_daily_override(self, employee_id, day: date) -> bool:
        row = self._override_row(employee_id, day)
        if row is None:
            return False
        self.db.delete(row)
        self.db.flush()
        return True


    # timesheets

    def timesheet_row(self, employee_id, day: date) -> Optional[Timesheet]:
        return (
            self.db.query(Timesheet)
            .filter(Timesheet.employee_id == int(employee_id), Timesheet.day == day)
            .one_or_none()
        )

    @staticmethod
    def to_timesheet(row: Timesheet) -> core.Timesheet:
        return core.Timesheet(
            employee_id=str(row.employee_id),
            day=row.day,
            hours=row.hours or 0.0,
            regular_hours=row.regular_hours or 0.0,
            overtime_hours=row.overtime_hours or 0.0,
            hourly_rate=_float(row.hourly_rate),
            earnings=float(row.earnings or 0),
            status=row.status,
            notes=row.notes,
        )

    def get_timesheet(self, employee_id, day: date) -> Optional[core.Timesheet]:
        row = self.timesheet_row(employee_id, day)
        return self.to_timesheet(row) if row else None

    def timesheets_between(self, employee_id, start: date, end: date) -> list[core.Timesheet]:
        rows = (
            self.db.query(Timesheet)
            .filter(Timesheet.employee_id == int(employee_id), Timesheet.day >= start, Timesheet.day <= end)
            .order_by(Timesheet.day.asc())
            .all()
        )
        return [self.to_timesheet(row) for row in rows]

    def save_timesheet(self, timesheet: core.Timesheet) -> Timesheet:
        row = self.timesheet_row(timesheet.employee_id, timesheet.day)
        if row is None:
            row = Timesheet(employee_id=int(timesheet.employee_id), day=timesheet.day)
            self.db.add(row)
        row.hours = timesheet.hours
        row.regular_hours = timesheet.regular_hours
        row.overtime_hours = timesheet.overtime_hours
        row.hourly_rate = timesheet.hourly_rate
        row.earnings = timesheet.earnings
        row.status = timesheet.status.value
        row.notes = timesheet.notes
        self.db.flush()
        return row

def get_store(db: Session = Depends(get_session)) -> Iterator[SqlStore]:
    yield SqlStore(db)
