from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field, model_validator

from shiftpay.models import OvertimeConfig as OvertimeSettings
from shiftpay.payroll import get_overtime_config
from shiftpay.rates import resolve_rate

from app.core.logging import get_logger
from app.db.store import SqlStore, get_store
from app.domains.common import require_employee
from app.models.rate_period import HourlyRatePeriod

router = APIRouter(tags=["rates"])
logger = get_logger(__name__)


class RatePeriodCreate(BaseModel):
    employee_id: int
    start_date: date
    end_date: date
    hourly_rate: float = Field(gt=0)

    @model_validator(mode="after")
    def check_range(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class RatePeriodOut(BaseModel):
    id: int
    employee_id: int
    start_date: date
    end_date: date
    hourly_rate: float
    created_at: datetime


class ResolvedRateOut(BaseModel):
    employee_id: int
    on: date
    rate: float
    source: str


class OvertimeConfigIn(BaseModel):
    weekly_threshold_hours: float = Field(default=40.0, gt=0)
    overtime_multiplier: float = Field(default=1.5, ge=1)


class OvertimeConfigOut(OvertimeConfigIn):
    employee_id: int


def _rate_out(row: HourlyRatePeriod) -> RatePeriodOut:
    return RatePeriodOut(
        id=row.id,
        employee_id=row.employee_id,
        start_date=row.start_date,
        end_date=row.end_date,
        hourly_rate=float(row.hourly_rate),
        created_at=row.created_at,
    )


@router.get("/hourly-rates", response_model=list[RatePeriodOut])
def list_rate_periods(employee_id: int, store: SqlStore = Depends(get_store)):
    rows = (
        store.db.query(HourlyRatePeriod)
        .filter(HourlyRatePeriod.employee_id == employee_id)
        .order_by(HourlyRatePeriod.start_date.desc(), HourlyRatePeriod.id.desc())
        .all()
    )
    return [_rate_out(r) for r in rows]


@router.post("/hourly-rates", response_model=RatePeriodOut, status_code=201)
def create_rate_period(payload: RatePeriodCreate, store: SqlStore = Depends(get_store)):
    require_employee(store, payload.employee_id)
    overlapping = (
        store.db.query(HourlyRatePeriod)
        .filter(
            HourlyRatePeriod.employee_id == payload.employee_id,
            HourlyRatePeriod.start_date <= payload.end_date,
            HourlyRatePeriod.end_date >= payload.start_date,
        )
        .count()
    )
    row = HourlyRatePeriod(
        employee_id=payload.employee_id,
        start_date=payload.start_date,
        end_date=payload.end_date,
        hourly_rate=payload.hourly_rate,
    )
    store.db.add(row)
    store.db.commit()
    store.db.refresh(row)

    if overlapping:
        # the newest period wins wherever it overlaps older ones
        logger.warning("rate_period_overlap", employee_id=payload.employee_id, period_id=row.id, overlaps=overlapping)
    logger.info("rate_period_created", employee_id=payload.employee_id, period_id=row.id)
    return _rate_out(row)


@router.delete("/hourly-rates/{period_id}", status_code=204)
def delete_rate_period(period_id: int, store: SqlStore = Depends(get_store)):
    row = store.db.get(HourlyRatePeriod, period_id)
    if not row:
        raise HTTPException(status_code=404, detail="Hourly rate period not found")
    store.db.delete(row)
    store.db.commit()
    return None


@router.get("/hourly-rates/resolve", response_model=ResolvedRateOut)
def resolve_hourly_rate(employee_id: int, on: date, store: SqlStore = Depends(get_store)):
    require_employee(store, employee_id)
    resolved = resolve_rate(store, str(employee_id), on)
    if resolved is None:
        raise HTTPException(status_code=404, detail="No hourly rate applies on this date")
    return ResolvedRateOut(employee_id=employee_id, on=on, rate=resolved.rate, source=resolved.source.value)


@router.get("/overtime-config/{employee_id}", response_model=OvertimeConfigOut)
def read_overtime_config(employee_id: int, store: SqlStore = Depends(get_store)):
    require_employee(store, employee_id)
    config = get_overtime_config(store, str(employee_id))
    store.db.commit()
    return OvertimeConfigOut(
        employee_id=employee_id,
        weekly_threshold_hours=config.weekly_threshold_hours,
        overtime_multiplier=config.overtime_multiplier,
    )


@router.put("/overtime-config/{employee_id}", response_model=OvertimeConfigOut)
def update_overtime_config(employee_id: int, payload: OvertimeConfigIn, store: SqlStore = Depends(get_store)):
    require_employee(store, employee_id)
    config = OvertimeSettings(
        employee_id=str(employee_id),
        weekly_threshold_hours=payload.weekly_threshold_hours,
        overtime_multiplier=payload.overtime_multiplier,
    )
    store.save_overtime_config(config)
    store.db.commit()
    logger.info(
        "overtime_config_updated",
        employee_id=employee_id,
        threshold=config.weekly_threshold_hours,
        multiplier=config.overtime_multiplier,
    )
    return OvertimeConfigOut(employee_id=employee_id, **payload.model_dump())
