from datetime import datetime

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer

from app.db.session import Base


class OvertimeConfig(Base):
    __tablename__ = "overtime_configs"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, unique=True)
    weekly_threshold_hours = Column(Float, nullable=False, default=40.0)
    overtime_multiplier = Column(Float, nullable=False, default=1.5)
    created_at = Column(DateTime, default=datetime.utcnow)
