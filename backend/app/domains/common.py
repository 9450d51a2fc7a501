from datetime import datetime

from fastapi import HTTPException
from pydantic import BaseModel

from shiftpay.models import Anomaly, EmployeeProfile

from app.db.store import SqlStore


class AnomalyOut(BaseModel):
    kind: str
    detail: str
    at: datetime | None = None


def anomalies_out(anomalies: list[Anomaly]) -> list[AnomalyOut]:
    return [AnomalyOut(kind=a.kind.value, detail=a.detail, at=a.at) for a in anomalies]


def require_employee(store: SqlStore, employee_id: int) -> EmployeeProfile:
    employee = store.get_employee(employee_id)
    if employee is None:
        raise HTTPException(status_code=404, detail="Employee not found")
    return employee
