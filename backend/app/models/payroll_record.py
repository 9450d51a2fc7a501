from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, Float, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from app.db.session import Base


class PayrollRecord(Base):
    __tablename__ = "payroll_records"
    __table_args__ = (UniqueConstraint("employee_id", "month", "year", name="uq_payroll_employee_period"),)

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)
    payment_type = Column(String(20), nullable=False)  # HOURLY|SALARY

    hours_worked = Column(Float, nullable=True)
    regular_hours = Column(Float, nullable=True)
    overtime_hours = Column(Float, nullable=True)
    hourly_rate = Column(Numeric(scale=2), nullable=True)
    earnings = Column(Numeric(scale=2), nullable=True)

    base_salary = Column(Numeric(scale=2), nullable=False, default=0)
    bonuses = Column(JSON, nullable=False, default=list)
    deductions = Column(JSON, nullable=False, default=list)
    net_salary = Column(Numeric(scale=2), nullable=False, default=0)

    status = Column(String(20), nullable=False, default="PENDING")  # PENDING|APPROVED|REJECTED|PAID
    approved_by = Column(String(200), nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    employee = relationship("Employee")
