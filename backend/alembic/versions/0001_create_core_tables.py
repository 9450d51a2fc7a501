"""create attendance and payroll tables

Revision ID: 0001
Revises: None
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "employees",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("payment_type", sa.String(length=20), nullable=True),
        sa.Column("hourly_rate", sa.Numeric(scale=2), nullable=True),
        sa.Column("monthly_salary", sa.Numeric(scale=2), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="active"),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_employees_id"), "employees", ["id"], unique=False)

    op.create_table(
        "attendance_days",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("employee_id", sa.Integer(), nullable=False),
        sa.Column("day", sa.Date(), nullable=False),
        sa.Column("check_in", sa.DateTime(timezone=True), nullable=True),
        sa.Column("check_out", sa.DateTime(timezone=True), nullable=True),
        sa.Column("first_check_in", sa.DateTime(timezone=True), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="PRESENT"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("auto_checked_out", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["employee_id"], ["employees.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("employee_id", "day", name="uq_attendance_employee_day"),
    )
    op.create_index(op.f("ix_attendance_days_id"), "attendance_days", ["id"], unique=False)
    op.create_index(op.f("ix_attendance_days_employee_id"), "attendance_days", ["employee_id"], unique=False)
    op.create_index(op.f("ix_attendance_days_day"), "attendance_days", ["day"], unique=False)

    op.create_table(
        "attendance_events",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("attendance_id", sa.Integer(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("event_type", sa.String(length=3), nullable=False),
        sa.Column("occurred_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["attendance_id"], ["attendance_days.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_attendance_events_id"), "attendance_events", ["id"], unique=False)
    op.create_index(
        op.f("ix_attendance_events_attendance_id"), "attendance_events", ["attendance_id"], unique=False
    )

    op.create_table(
        "hourly_rate_periods",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("employee_id", sa.Integer(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("hourly_rate", sa.Numeric(scale=2), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["employee_id"], ["employees.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_hourly_rate_periods_id"), "hourly_rate_periods", ["id"], unique=False)
    op.create_index(
        op.f("ix_hourly_rate_periods_employee_id"), "hourly_rate_periods", ["employee_id"], unique=False
    )

    op.create_table(
        "overtime_configs",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("employee_id", sa.Integer(), nullable=False),
        sa.Column("weekly_threshold_hours", sa.Float(), nullable=False, server_default="40"),
        sa.Column("overtime_multiplier", sa.Float(), nullable=False, server_default="1.5"),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["employee_id"], ["employees.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("employee_id"),
    )
    op.create_index(op.f("ix_overtime_configs_id"), "overtime_configs", ["id"], unique=False)

    op.create_table(
        "payroll_records",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("employee_id", sa.Integer(), nullable=False),
        sa.Column("month", sa.Integer(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("payment_type", sa.String(length=20), nullable=False),
        sa.Column("hours_worked", sa.Float(), nullable=True),
        sa.Column("regular_hours", sa.Float(), nullable=True),
        sa.Column("overtime_hours", sa.Float(), nullable=True),
        sa.Column("hourly_rate", sa.Numeric(scale=2), nullable=True),
        sa.Column("earnings", sa.Numeric(scale=2), nullable=True),
        sa.Column("base_salary", sa.Numeric(scale=2), nullable=False, server_default="0"),
        sa.Column("bonuses", sa.JSON(), nullable=False),
        sa.Column("deductions", sa.JSON(), nullable=False),
        sa.Column("net_salary", sa.Numeric(scale=2), nullable=False, server_default="0"),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="PENDING"),
        sa.Column("approved_by", sa.String(length=200), nullable=True),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["employee_id"], ["employees.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("employee_id", "month", "year", name="uq_payroll_employee_period"),
    )
    op.create_index(op.f("ix_payroll_records_id"), "payroll_records", ["id"], unique=False)
    op.create_index(op.f("ix_payroll_records_employee_id"), "payroll_records", ["employee_id"], unique=False)

    op.create_table(
        "daily_payroll_overrides",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("employee_id", sa.Integer(), nullable=False),
        sa.Column("day", sa.Date(), nullable=False),
        sa.Column("hourly_rate", sa.Numeric(scale=2), nullable=True),
        sa.Column("regular_hours", sa.Float(), nullable=True),
        sa.Column("overtime_hours", sa.Float(), nullable=True),
        sa.Column("total_hours", sa.Float(), nullable=False, server_default="0"),
        sa.Column("earnings", sa.Numeric(scale=2), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["employee_id"], ["employees.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("employee_id", "day", name="uq_override_employee_day"),
    )
    op.create_index(op.f("ix_daily_payroll_overrides_id"), "daily_payroll_overrides", ["id"], unique=False)
    op.create_index(
        op.f("ix_daily_payroll_overrides_employee_id"), "daily_payroll_overrides", ["employee_id"], unique=False
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_daily_payroll_overrides_employee_id"), table_name="daily_payroll_overrides")
    op.drop_index(op.f("ix_daily_payroll_overrides_id"), table_name="daily_payroll_overrides")
    op.drop_table("daily_payroll_overrides")
    op.drop_index(op.f("ix_payroll_records_employee_id"), table_name="payroll_records")
    op.drop_index(op.f("ix_payroll_records_id"), table_name="payroll_records")
    op.drop_table("payroll_records")
    op.drop_index(op.f("ix_overtime_configs_id"), table_name="overtime_configs")
    op.drop_table("overtime_configs")
    op.drop_index(op.f("ix_hourly_rate_periods_employee_id"), table_name="hourly_rate_periods")
    op.drop_index(op.f("ix_hourly_rate_periods_id"), table_name="hourly_rate_periods")
    op.drop_table("hourly_rate_periods")
    op.drop_index(op.f("ix_attendance_events_attendance_id"), table_name="attendance_events")
    op.drop_index(op.f("ix_attendance_events_id"), table_name="attendance_events")
    op.drop_table("attendance_events")
    op.drop_index(op.f("ix_attendance_days_day"), table_name="attendance_days")
    op.drop_index(op.f("ix_attendance_days_employee_id"), table_name="attendance_days")
    op.drop_index(op.f("ix_attendance_days_id"), table_name="attendance_days")
    op.drop_table("attendance_days")
    op.drop_index(op.f("ix_employees_id"), table_name="employees")
    op.drop_table("employees")
