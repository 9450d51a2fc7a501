from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, Numeric, String

from app.db.session import Base


class Employee(Base):
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    payment_type = Column(String(20), nullable=True)  # HOURLY|SALARY
    hourly_rate = Column(Numeric(scale=2), nullable=True)
    monthly_salary = Column(Numeric(scale=2), nullable=True)
    status = Column(String(20), nullable=False, default="active")  # active|on_leave|terminated

    created_at = Column(DateTime, default=datetime.utcnow)
