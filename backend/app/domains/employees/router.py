from typing import Literal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.core.logging import get_logger
from app.db.session import get_session
from app.models.employee import Employee

router = APIRouter(prefix="/employees", tags=["employees"])
logger = get_logger(__name__)


class EmployeeBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    payment_type: Literal["HOURLY", "SALARY"] | None = None
    hourly_rate: float | None = Field(default=None, gt=0)
    monthly_salary: float | None = Field(default=None, gt=0)
    status: Literal["active", "on_leave", "terminated"] = "active"


class EmployeeCreate(EmployeeBase):
    pass


class EmployeeOut(EmployeeBase):
    id: int


def _to_out(row: Employee) -> EmployeeOut:
    return EmployeeOut(
        id=row.id,
        name=row.name,
        payment_type=row.payment_type,
        hourly_rate=float(row.hourly_rate) if row.hourly_rate is not None else None,
        monthly_salary=float(row.monthly_salary) if row.monthly_salary is not None else None,
        status=row.status,
    )


@router.get("", response_model=list[EmployeeOut])
def list_employees(db: Session = Depends(get_session)):
    rows = db.query(Employee).order_by(Employee.name.asc(), Employee.id.asc()).all()
    return [_to_out(r) for r in rows]


@router.post("", response_model=EmployeeOut, status_code=201)
def create_employee(payload: EmployeeCreate, db: Session = Depends(get_session)):
    row = Employee(
        name=payload.name.strip(),
        payment_type=payload.payment_type,
        hourly_rate=payload.hourly_rate,
        monthly_salary=payload.monthly_salary,
        status=payload.status,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info("employee_created", employee_id=row.id, payment_type=row.payment_type)
    return _to_out(row)


@router.get("/{employee_id}", response_model=EmployeeOut)
def get_employee(employee_id: int, db: Session = Depends(get_session)):
    row = db.get(Employee, employee_id)
    if not row:
        raise HTTPException(status_code=404, detail="Employee not found")
    return _to_out(row)


@router.delete("/{employee_id}", status_code=204)
def delete_employee(employee_id: int, db: Session = Depends(get_session)):
    row = db.query(Employee).filter(Employee.id == employee_id).one_or_none()
    if not row:
        raise HTTPException(status_code=404, detail="Employee not found")
    db.delete(row)
    db.commit()
    return None
