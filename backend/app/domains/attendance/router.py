from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from shiftpay.attendance import find_or_create_day, record_check_in, record_check_out
from shiftpay.clock import as_utc, utcnow
from shiftpay.errors import AttendanceError
from shiftpay.models import AttendanceDay, DayReduction
from shiftpay.payroll import month_bounds
from shiftpay.shifts import reduce_attendance_day
from shiftpay.sweeper import sweep_auto_checkout

from app.core.logging import get_logger, log_anomalies
from app.core.observability import attendance_events, auto_checkouts
from app.db.store import SqlStore, get_store
from app.domains.common import AnomalyOut, anomalies_out, require_employee

router = APIRouter(prefix="/attendance", tags=["attendance"])
logger = get_logger(__name__)


class AttendanceAction(BaseModel):
    employee_id: int
    at: datetime | None = None
    day: date | None = None
    notes: str | None = Field(default=None, max_length=500)


class EventOut(BaseModel):
    type: str
    time: datetime


class AttendanceDayOut(BaseModel):
    employee_id: int
    day: date
    check_in: datetime | None = None
    check_out: datetime | None = None
    first_check_in: datetime | None = None
    status: str
    notes: str | None = None
    auto_checked_out: bool = False
    events: list[EventOut] = []
    worked_hours: float
    break_hours: float
    currently_open: bool
    anomalies: list[AnomalyOut] = []


class SweepRequest(BaseModel):
    employee_id: int
    today: date | None = None


class SweepOut(BaseModel):
    employee_id: int
    remediated: int


class AttendanceSummaryOut(BaseModel):
    employee_id: int
    year: int
    month: int
    days_recorded: int
    present_days: int
    auto_checked_out_days: int
    worked_hours: float
    break_hours: float
    anomaly_count: int


def _day_out(day: AttendanceDay, reduction: DayReduction) -> AttendanceDayOut:
    return AttendanceDayOut(
        employee_id=int(day.employee_id),
        day=day.day,
        check_in=day.check_in,
        check_out=day.check_out,
        first_check_in=day.first_check_in,
        status=day.status.value,
        notes=day.notes,
        auto_checked_out=day.auto_checked_out,
        events=[EventOut(type=e.type.value, time=e.time) for e in day.events],
        worked_hours=round(reduction.worked_hours, 4),
        break_hours=round(reduction.break_hours, 4),
        currently_open=reduction.currently_open,
        anomalies=anomalies_out(reduction.anomalies),
    )


def _sweep(store: SqlStore, employee_id: int, today: date) -> int:
    remediated = sweep_auto_checkout(store, str(employee_id), today)
    if remediated:
        store.db.commit()
        auto_checkouts.add(remediated)
        logger.info("auto_checkout_swept", employee_id=employee_id, remediated=remediated, today=str(today))
    return remediated


@router.post("/check-in", response_model=AttendanceDayOut, status_code=201)
def check_in(payload: AttendanceAction, store: SqlStore = Depends(get_store)):
    require_employee(store, payload.employee_id)
    at = as_utc(payload.at) if payload.at else utcnow()
    _sweep(store, payload.employee_id, at.date())

    day = find_or_create_day(store, str(payload.employee_id), payload.day or at.date())
    try:
        record_check_in(day, at, payload.notes)
    except AttendanceError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    store.save_attendance_day(day)
    store.db.commit()
    attendance_events.add(1, {"type": "in"})

    logger.info("check_in_recorded", employee_id=payload.employee_id, day=str(day.day), at=at.isoformat())
    return _day_out(day, reduce_attendance_day(day, at))


@router.post("/check-out", response_model=AttendanceDayOut)
def check_out(payload: AttendanceAction, store: SqlStore = Depends(get_store)):
    require_employee(store, payload.employee_id)
    at = as_utc(payload.at) if payload.at else utcnow()

    day = find_or_create_day(store, str(payload.employee_id), payload.day or at.date())
    try:
        record_check_out(day, at, payload.notes)
    except AttendanceError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    store.save_attendance_day(day)
    store.db.commit()
    attendance_events.add(1, {"type": "out"})

    reduction = reduce_attendance_day(day, at)
    log_anomalies(logger, payload.employee_id, day.day, reduction.anomalies)
    logger.info(
        "check_out_recorded",
        employee_id=payload.employee_id,
        day=str(day.day),
        worked_hours=round(reduction.worked_hours, 2),
    )
    return _day_out(day, reduction)


@router.post("/sweep", response_model=SweepOut)
def sweep(payload: SweepRequest, store: SqlStore = Depends(get_store)):
    require_employee(store, payload.employee_id)
    remediated = _sweep(store, payload.employee_id, payload.today or utcnow().date())
    return SweepOut(employee_id=payload.employee_id, remediated=remediated)


@router.get("", response_model=list[AttendanceDayOut])
def list_attendance(
    employee_id: int,
    start_date: date | None = None,
    end_date: date | None = None,
    store: SqlStore = Depends(get_store),
):
    require_employee(store, employee_id)
    now = utcnow()
    end = end_date or now.date()
    start = start_date or end.replace(day=1)
    if start > end:
        raise HTTPException(status_code=400, detail="start_date must not be after end_date")

    _sweep(store, employee_id, now.date())
    rows = []
    for day in store.attendance_days(str(employee_id), start, end):
        reduction = reduce_attendance_day(day, now)
        log_anomalies(logger, employee_id, day.day, reduction.anomalies)
        rows.append(_day_out(day, reduction))
    return rows


@router.get("/summary", response_model=AttendanceSummaryOut)
def attendance_summary(
    employee_id: int,
    year: int = Query(ge=1970, le=9999),
    month: int = Query(ge=1, le=12),
    store: SqlStore = Depends(get_store),
):
    require_employee(store, employee_id)
    start, end = month_bounds(year, month)
    now = utcnow()
    days = store.attendance_days(str(employee_id), start, end)
    reductions = [reduce_attendance_day(day, now) for day in days]
    return AttendanceSummaryOut(
        employee_id=employee_id,
        year=year,
        month=month,
        days_recorded=len(days),
        present_days=sum(1 for day in days if day.check_in is not None),
        auto_checked_out_days=sum(1 for day in days if day.auto_checked_out),
        worked_hours=round(sum(r.worked_hours for r in reductions), 2),
        break_hours=round(sum(r.break_hours for r in reductions), 2),
        anomaly_count=sum(len(r.anomalies) for r in reductions),
    )
