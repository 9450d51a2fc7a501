from datetime import datetime

from sqlalchemy import Column, Date, DateTime, Float, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint

from app.db.session import Base


class Timesheet(Base):
    __tablename__ = "timesheets"
    __table_args__ = (UniqueConstraint("employee_id", "day", name="uq_timesheet_employee_day"),)

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    day = Column(Date, nullable=False, index=True)
    hours = Column(Float, nullable=False, default=0)
    regular_hours = Column(Float, nullable=False, default=0)
    overtime_hours = Column(Float, nullable=False, default=0)
    hourly_rate = Column(Numeric(scale=2), nullable=True)
    earnings = Column(Numeric(scale=2), nullable=False, default=0)
    status = Column(String(20), nullable=False, default="DRAFT")  # DRAFT|SUBMITTED|APPROVED|REJECTED
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
