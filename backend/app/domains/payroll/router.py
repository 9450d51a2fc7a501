from datetime import date, datetime
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from shiftpay.clock import utcnow
from shiftpay.errors import CallerMisuse, PayrollInputError
from shiftpay.models import DailyFigures, DailyOverride, LineItem, PayrollStatus
from shiftpay.payroll import (
    daily_hours_and_earnings,
    generate_payroll_record,
    get_overtime_config,
    monthly_daily_earnings,
    recalculate_payroll,
)
from shiftpay.stats import payroll_stats

from app.core.logging import get_logger, log_anomalies
from app.core.observability import get_tracer, payroll_generations
from app.db.store import SqlStore, get_store
from app.domains.common import AnomalyOut, anomalies_out, require_employee
from app.models.payroll_record import PayrollRecord

router = APIRouter(prefix="/payroll", tags=["payroll"])
logger = get_logger(__name__)


class LineItemIn(BaseModel):
    name: Annotated[str, Field(min_length=1, max_length=100)]
    amount: float


class PayrollGenerateRequest(BaseModel):
    employee_id: int
    year: int = Field(ge=1970, le=9999)
    month: int = Field(ge=1, le=12)
    payment_type: Literal["HOURLY", "SALARY"] | None = None
    base_salary: float | None = None
    hourly_rate: float | None = Field(default=None, gt=0)
    bonuses: list[LineItemIn] = []
    deductions: list[LineItemIn] = []
    notes: str | None = None


class PayrollStatusUpdate(BaseModel):
    status: Literal["PENDING", "APPROVED", "REJECTED", "PAID"]
    approved_by: str | None = None


class PayrollRecordOut(BaseModel):
    id: int
    employee_id: int
    year: int
    month: int
    payment_type: str
    hours_worked: float | None = None
    regular_hours: float | None = None
    overtime_hours: float | None = None
    hourly_rate: float | None = None
    earnings: float | None = None
    base_salary: float
    bonuses: list[LineItemIn] = []
    deductions: list[LineItemIn] = []
    net_salary: float
    status: str
    approved_by: str | None = None
    approved_at: datetime | None = None
    notes: str | None = None


class DailyFiguresOut(BaseModel):
    day: date
    hours: float
    regular_hours: float
    overtime_hours: float
    rate: float | None = None
    earnings: float
    overridden: bool
    anomalies: list[AnomalyOut] = []


class OvertimeSplitOut(BaseModel):
    employee_id: int
    on: date
    hours: float
    regular_hours: float
    overtime_hours: float
    weekly_threshold_hours: float


class MonthlyBreakdownOut(BaseModel):
    month: int
    month_name: str
    earnings: float
    status: str | None = None


class YearlyBreakdownOut(BaseModel):
    year: int
    total_earnings: float
    payroll_count: int


class PayrollStatsOut(BaseModel):
    employee_id: int
    current_month_earnings: float
    year_to_date_total: float
    all_time_total: float
    average_monthly_earnings: float
    pending_count: int
    total_payrolls: int
    current_month_hours: float
    year_to_date_hours: float
    all_time_hours: float
    monthly_breakdown: list[MonthlyBreakdownOut]
    yearly_breakdown: list[YearlyBreakdownOut]


class DailyOverrideIn(BaseModel):
    employee_id: int
    day: date
    hourly_rate: float | None = Field(default=None, gt=0)
    regular_hours: float | None = Field(default=None, ge=0)
    overtime_hours: float | None = Field(default=None, ge=0)
    total_hours: float | None = Field(default=None, ge=0, le=24)
    earnings: float | None = Field(default=None, ge=0)
    notes: str | None = None


def _record_out(row: PayrollRecord) -> PayrollRecordOut:
    record = SqlStore.to_payroll_record(row)
    return PayrollRecordOut(
        id=row.id,
        employee_id=row.employee_id,
        year=record.year,
        month=record.month,
        payment_type=record.payment_type.value,
        hours_worked=record.hours_worked,
        regular_hours=record.regular_hours,
        overtime_hours=record.overtime_hours,
        hourly_rate=record.hourly_rate,
        earnings=record.earnings,
        base_salary=record.base_salary,
        bonuses=[LineItemIn(name=b.name, amount=b.amount) for b in record.bonuses],
        deductions=[LineItemIn(name=d.name, amount=d.amount) for d in record.deductions],
        net_salary=record.net_salary,
        status=record.status.value,
        approved_by=record.approved_by,
        approved_at=record.approved_at,
        notes=record.notes,
    )


def _figures_out(figures: DailyFigures) -> DailyFiguresOut:
    return DailyFiguresOut(
        day=figures.day,
        hours=round(figures.hours, 4),
        regular_hours=round(figures.regular_hours, 4),
        overtime_hours=round(figures.overtime_hours, 4),
        rate=figures.rate,
        earnings=figures.earnings,
        overridden=figures.overridden,
        anomalies=anomalies_out(figures.anomalies),
    )


def _get_record_row(store: SqlStore, record_id: int) -> PayrollRecord:
    row = store.db.get(PayrollRecord, record_id)
    if not row:
        raise HTTPException(status_code=404, detail="Payroll record not found")
    return row


def _recalculate_month(store: SqlStore, employee_id: int, day: date) -> None:
    record = store.get_payroll_record(str(employee_id), day.year, day.month)
    if record is None or record.status is PayrollStatus.PAID:
        return
    try:
        recalculate_payroll(store, record)
    except PayrollInputError as exc:
        logger.warning("payroll_recalculation_skipped", employee_id=employee_id, reason=str(exc))
        return
    logger.info("payroll_recalculated", employee_id=employee_id, year=day.year, month=day.month)


@router.get("", response_model=list[PayrollRecordOut])
def list_payroll(
    employee_id: int | None = None,
    year: int | None = None,
    month: int | None = None,
    store: SqlStore = Depends(get_store),
):
    query = store.db.query(PayrollRecord)
    if employee_id is not None:
        query = query.filter(PayrollRecord.employee_id == employee_id)
    if year is not None:
        query = query.filter(PayrollRecord.year == year)
    if month is not None:
        query = query.filter(PayrollRecord.month == month)
    rows = query.order_by(PayrollRecord.year.desc(), PayrollRecord.month.desc(), PayrollRecord.id.desc()).all()
    return [_record_out(r) for r in rows]


@router.post("/generate", response_model=PayrollRecordOut, status_code=201)
def generate_payroll(payload: PayrollGenerateRequest, store: SqlStore = Depends(get_store)):
    require_employee(store, payload.employee_id)
    employee_id = str(payload.employee_id)
    if store.get_payroll_record(employee_id, payload.year, payload.month) is not None:
        raise HTTPException(status_code=400, detail="Payroll already exists for this period")

    try:
        generate_payroll_record(
            store,
            employee_id,
            payload.year,
            payload.month,
            payment_type=payload.payment_type,
            base_salary=payload.base_salary,
            hourly_rate=payload.hourly_rate,
            bonuses=[LineItem(name=b.name, amount=b.amount) for b in payload.bonuses],
            deductions=[LineItem(name=d.name, amount=d.amount) for d in payload.deductions],
            notes=payload.notes,
        )
    except (PayrollInputError, CallerMisuse) as exc:
        store.db.rollback()
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    store.db.commit()
    payroll_generations.add(1, {"action": "generate"})

    row = store.payroll_row(employee_id, payload.year, payload.month)
    logger.info(
        "payroll_generated",
        employee_id=payload.employee_id,
        year=payload.year,
        month=payload.month,
        net_salary=float(row.net_salary),
    )
    return _record_out(row)


@router.patch("/{record_id}/recalculate", response_model=PayrollRecordOut)
def recalculate(record_id: int, store: SqlStore = Depends(get_store)):
    row = _get_record_row(store, record_id)
    if row.status == PayrollStatus.PAID.value:
        raise HTTPException(status_code=409, detail="Paid payroll records cannot be recalculated")
    try:
        recalculate_payroll(store, SqlStore.to_payroll_record(row))
    except PayrollInputError as exc:
        store.db.rollback()
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    store.db.commit()
    store.db.refresh(row)
    payroll_generations.add(1, {"action": "recalculate"})
    logger.info("payroll_recalculated", record_id=record_id, net_salary=float(row.net_salary))
    return _record_out(row)


@router.patch("/{record_id}/status", response_model=PayrollRecordOut)
def update_status(record_id: int, payload: PayrollStatusUpdate, store: SqlStore = Depends(get_store)):
    row = _get_record_row(store, record_id)
    if row.status == PayrollStatus.PAID.value and payload.status != PayrollStatus.PAID.value:
        raise HTTPException(status_code=409, detail="Paid payroll records cannot change status")
    row.status = payload.status
    if payload.status in (PayrollStatus.APPROVED.value, PayrollStatus.PAID.value):
        row.approved_by = payload.approved_by or row.approved_by
        row.approved_at = row.approved_at or utcnow()
    store.db.commit()
    store.db.refresh(row)
    logger.info("payroll_status_changed", record_id=record_id, status=row.status)
    return _record_out(row)


@router.get("/daily-earnings", response_model=list[DailyFiguresOut])
def daily_earnings(
    employee_id: int,
    year: int = Query(ge=1970, le=9999),
    month: int = Query(ge=1, le=12),
    store: SqlStore = Depends(get_store),
):
    require_employee(store, employee_id)
    with get_tracer().start_as_current_span("payroll.daily_earnings") as span:
        span.set_attribute("shiftpay.employee_id", employee_id)
        figures = monthly_daily_earnings(store, str(employee_id), year, month)
    store.db.commit()
    for entry in figures.values():
        log_anomalies(logger, employee_id, entry.day, entry.anomalies)
    return [_figures_out(figures[day]) for day in sorted(figures)]


@router.get("/stats", response_model=PayrollStatsOut)
def stats(employee_id: int, store: SqlStore = Depends(get_store)):
    require_employee(store, employee_id)
    with get_tracer().start_as_current_span("payroll.stats") as span:
        span.set_attribute("shiftpay.employee_id", employee_id)
        result = payroll_stats(store, str(employee_id))
    store.db.commit()
    return PayrollStatsOut(
        employee_id=employee_id,
        current_month_earnings=result.current_month_earnings,
        year_to_date_total=result.year_to_date_total,
        all_time_total=result.all_time_total,
        average_monthly_earnings=result.average_monthly_earnings,
        pending_count=result.pending_count,
        total_payrolls=result.total_payrolls,
        current_month_hours=result.current_month_hours,
        year_to_date_hours=result.year_to_date_hours,
        all_time_hours=result.all_time_hours,
        monthly_breakdown=[
            MonthlyBreakdownOut(
                month=m.month,
                month_name=m.month_name,
                earnings=m.earnings,
                status=m.status.value if m.status else None,
            )
            for m in result.monthly_breakdown
        ],
        yearly_breakdown=[
            YearlyBreakdownOut(year=y.year, total_earnings=y.total_earnings, payroll_count=y.payroll_count)
            for y in result.yearly_breakdown
        ],
    )


@router.get("/overtime-split", response_model=OvertimeSplitOut)
def overtime_split(employee_id: int, on: date, store: SqlStore = Depends(get_store)):
    require_employee(store, employee_id)
    config = get_overtime_config(store, str(employee_id))
    store.db.commit()
    figures = daily_hours_and_earnings(store, str(employee_id), on, config=config)
    return OvertimeSplitOut(
        employee_id=employee_id,
        on=on,
        hours=round(figures.hours, 4),
        regular_hours=round(figures.regular_hours, 4),
        overtime_hours=round(figures.overtime_hours, 4),
        weekly_threshold_hours=config.weekly_threshold_hours,
    )


@router.post("/daily-override", response_model=DailyFiguresOut, status_code=201)
def set_daily_override(payload: DailyOverrideIn, store: SqlStore = Depends(get_store)):
    require_employee(store, payload.employee_id)
    if payload.day > utcnow().date():
        raise HTTPException(status_code=400, detail="Cannot override a future date")
    try:
        override = DailyOverride(
            employee_id=str(payload.employee_id),
            day=payload.day,
            hourly_rate=payload.hourly_rate,
            regular_hours=payload.regular_hours,
            overtime_hours=payload.overtime_hours,
            total_hours=payload.total_hours,
            earnings=payload.earnings,
            notes=payload.notes,
        )
    except CallerMisuse as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    store.save_daily_override(override)
    _recalculate_month(store, payload.employee_id, payload.day)
    store.db.commit()
    logger.info("daily_override_saved", employee_id=payload.employee_id, day=str(payload.day))
    return _figures_out(daily_hours_and_earnings(store, str(payload.employee_id), payload.day))


@router.delete("/daily-override", status_code=204)
def delete_daily_override(employee_id: int, day: date, store: SqlStore = Depends(get_store)):
    require_employee(store, employee_id)
    if not store.delete_daily_override(str(employee_id), day):
        raise HTTPException(status_code=404, detail="Daily override not found")
    _recalculate_month(store, employee_id, day)
    store.db.commit()
    logger.info("daily_override_removed", employee_id=employee_id, day=str(day))
    return None
