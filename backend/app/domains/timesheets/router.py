from datetime import date

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field, model_validator

from shiftpay.errors import CallerMisuse
from shiftpay.models import Timesheet as TimesheetRecord
from shiftpay.models import TimesheetGenerationResult, TimesheetStatus
from shiftpay.payroll import month_bounds
from shiftpay.timesheets import generate_timesheets_for_period, set_timesheet_status, timesheets_for_period

from app.core.logging import get_logger
from app.core.observability import timesheets_generated
from app.db.store import SqlStore, get_store
from app.domains.common import require_employee
from app.models.timesheet import Timesheet

router = APIRouter(prefix="/timesheets", tags=["timesheets"])
logger = get_logger(__name__)


class TimesheetGenerateRequest(BaseModel):
    employee_id: int | None = None
    start_date: date | None = None
    end_date: date | None = None
    year: int | None = Field(default=None, ge=2000, le=9999)
    month: int | None = Field(default=None, ge=1, le=12)

    @model_validator(mode="after")
    def check_period(self):
        if not (self.year and self.month) and not (self.start_date and self.end_date):
            raise ValueError("Either provide start_date and end_date, or month and year")
        return self

    def bounds(self) -> tuple[date, date]:
        if self.year and self.month:
            return month_bounds(self.year, self.month)
        return self.start_date, self.end_date


class GenerationErrorOut(BaseModel):
    day: date
    error: str


class GenerationOut(BaseModel):
    employee_id: int
    created: int
    updated: int
    skipped: int
    errors: list[GenerationErrorOut] = []


class TimesheetOut(BaseModel):
    id: int
    employee_id: int
    day: date
    hours: float
    regular_hours: float
    overtime_hours: float
    hourly_rate: float | None = None
    earnings: float
    status: str
    notes: str | None = None


class TimesheetPeriodOut(BaseModel):
    employee_id: int
    start_date: date
    end_date: date
    timesheets: list[TimesheetOut]
    total_hours: float
    total_regular_hours: float
    total_overtime_hours: float
    total_earnings: float


class TimesheetStatusUpdate(BaseModel):
    status: TimesheetStatus


def _generation_out(employee_id: int, result: TimesheetGenerationResult) -> GenerationOut:
    return GenerationOut(
        employee_id=employee_id,
        created=result.created,
        updated=result.updated,
        skipped=result.skipped,
        errors=[GenerationErrorOut(day=e.day, error=e.error) for e in result.errors],
    )


def _timesheet_out(row_id: int, sheet: TimesheetRecord) -> TimesheetOut:
    return TimesheetOut(
        id=row_id,
        employee_id=int(sheet.employee_id),
        day=sheet.day,
        hours=sheet.hours,
        regular_hours=sheet.regular_hours,
        overtime_hours=sheet.overtime_hours,
        hourly_rate=sheet.hourly_rate,
        earnings=sheet.earnings,
        status=sheet.status.value,
        notes=sheet.notes,
    )


@router.post("/generate", response_model=list[GenerationOut])
def generate_timesheets(payload: TimesheetGenerateRequest, store: SqlStore = Depends(get_store)):
    start, end = payload.bounds()
    if end < start:
        raise HTTPException(status_code=400, detail="End date must be after start date")
    if payload.employee_id is not None:
        require_employee(store, payload.employee_id)
        employee_ids = [payload.employee_id]
    else:
        employee_ids = [int(employee.id) for employee in store.list_employees()]

    results = []
    for employee_id in employee_ids:
        result = generate_timesheets_for_period(store, str(employee_id), start, end)
        store.db.commit()
        timesheets_generated.add(result.created + result.updated)
        if result.errors:
            logger.warning("timesheet_generation_errors", employee_id=employee_id, errors=len(result.errors))
        logger.info(
            "timesheets_generated",
            employee_id=employee_id,
            start=str(start),
            end=str(end),
            created=result.created,
            updated=result.updated,
            skipped=result.skipped,
        )
        results.append(_generation_out(employee_id, result))
    return results


@router.get("", response_model=TimesheetPeriodOut)
def list_timesheets(employee_id: int, start_date: date, end_date: date, store: SqlStore = Depends(get_store)):
    require_employee(store, employee_id)
    try:
        period = timesheets_for_period(store, str(employee_id), start_date, end_date)
    except CallerMisuse as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    sheets = [_timesheet_out(store.timesheet_row(employee_id, s.day).id, s) for s in period.timesheets]
    return TimesheetPeriodOut(
        employee_id=employee_id,
        start_date=start_date,
        end_date=end_date,
        timesheets=sheets,
        total_hours=period.total_hours,
        total_regular_hours=period.total_regular_hours,
        total_overtime_hours=period.total_overtime_hours,
        total_earnings=period.total_earnings,
    )


@router.patch("/{timesheet_id}/status", response_model=TimesheetOut)
def update_status(timesheet_id: int, payload: TimesheetStatusUpdate, store: SqlStore = Depends(get_store)):
    row = store.db.get(Timesheet, timesheet_id)
    if not row:
        raise HTTPException(status_code=404, detail="Timesheet not found")
    sheet = set_timesheet_status(store, str(row.employee_id), row.day, payload.status)
    store.db.commit()
    logger.info("timesheet_status_changed", timesheet_id=timesheet_id, status=sheet.status.value)
    return _timesheet_out(timesheet_id, sheet)
