from datetime import datetime

from sqlalchemy import Column, Date, DateTime, Float, ForeignKey, Integer, Numeric, Text, UniqueConstraint

from app.db.session import Base


class DailyPayrollOverride(Base):
    __tablename__ = "daily_payroll_overrides"
    __table_args__ = (UniqueConstraint("employee_id", "day", name="uq_override_employee_day"),)

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    day = Column(Date, nullable=False)
    hourly_rate = Column(Numeric(scale=2), nullable=True)
    regular_hours = Column(Float, nullable=True)
    overtime_hours = Column(Float, nullable=True)
    total_hours = Column(Float, nullable=False, default=0)
    earnings = Column(Numeric(scale=2), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
