from datetime import date, datetime, timedelta, timezone

from sqlalchemy.orm import Session

from shiftpay.attendance import find_or_create_day, record_check_in, record_check_out
from shiftpay.models import OvertimeConfig

from app.db.store import SqlStore
from app.models import Employee, HourlyRatePeriod


def _at(day: date, hour: int, minute: int = 0) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute, tzinfo=timezone.utc)


def seed(session: Session) -> None:
    hourly = Employee(name="Ada Lovelace", payment_type="HOURLY", hourly_rate=20)
    salaried = Employee(name="Grace Hopper", payment_type="SALARY", monthly_salary=6000)
    session.add_all([hourly, salaried])
    session.flush()

    monday = date.today() - timedelta(days=date.today().weekday() + 7)
    session.add(
        HourlyRatePeriod(employee_id=hourly.id, start_date=monday, end_date=monday + timedelta(days=13), hourly_rate=22)
    )

    store = SqlStore(session)
    store.save_overtime_config(OvertimeConfig(employee_id=str(hourly.id), weekly_threshold_hours=40))

    # a week with a lunch break every day and one long Friday
    for offset in range(5):
        day = monday + timedelta(days=offset)
        attendance = find_or_create_day(store, str(hourly.id), day)
        record_check_in(attendance, _at(day, 8))
        record_check_out(attendance, _at(day, 12))
        record_check_in(attendance, _at(day, 12, 30))
        record_check_out(attendance, _at(day, 19 if offset == 4 else 17))
        store.save_attendance_day(attendance)

    session.commit()
