from datetime import datetime

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from app.db.session import Base


class AttendanceRecord(Base):
    __tablename__ = "attendance_days"
    __table_args__ = (UniqueConstraint("employee_id", "day", name="uq_attendance_employee_day"),)

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    day = Column(Date, nullable=False, index=True)

    # Mirrors of the event log, kept for list views and the open-shift filter
    check_in = Column(DateTime(timezone=True), nullable=True)
    check_out = Column(DateTime(timezone=True), nullable=True)
    first_check_in = Column(DateTime(timezone=True), nullable=True)

    status = Column(String(20), nullable=False, default="PRESENT")  # PRESENT|ABSENT|LATE|HALF_DAY
    notes = Column(Text, nullable=True)
    auto_checked_out = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    employee = relationship("Employee")
    events = relationship(
        "AttendanceEventRow",
        back_populates="attendance",
        order_by="AttendanceEventRow.position",
        cascade="all, delete-orphan",
    )


class AttendanceEventRow(Base):
    __tablename__ = "attendance_events"

    id = Column(Integer, primary_key=True, index=True)
    attendance_id = Column(Integer, ForeignKey("attendance_days.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False)
    event_type = Column(String(3), nullable=False)  # in|out
    occurred_at = Column(DateTime(timezone=True), nullable=False)

    attendance = relationship("AttendanceRecord", back_populates="events")
