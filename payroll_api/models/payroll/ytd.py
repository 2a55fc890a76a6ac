from datetime import datetime
from payroll_api.extensions import db


class EmployeeYTD(db.Model):
    """Running year-to-date totals, one row per employee. Read before, written after each generation."""

    __tablename__ = "employee_ytd"

    id = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(db.Integer, db.ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, unique=True)

    # attendance quantities
    absent_minutes = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    absent_days = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    late_minutes = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    undertime_minutes = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    overtime_minutes = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    regular_holiday_hours = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    regular_holiday_hours_worked = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    special_holiday_hours = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    special_holiday_hours_worked = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    expected_hours_worked = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    hours_worked = db.Column(db.Numeric(12, 2), nullable=False, default=0)

    # money
    basic_salary = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    absent_deductions = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    late_deductions = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    undertime_deductions = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    overtime_pay = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    regular_holiday_hours_pay = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    special_holiday_hours_pay = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    leaves_pay = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    total_allowances = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    total_commissions = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    total_other_compensations = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    sss_contributions = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    pagibig_contributions = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    philhealth_contributions = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    total_contributions = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    gross_income = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    taxable_income = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    withheld_tax = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    net_income = db.Column(db.Numeric(14, 2), nullable=False, default=0)

    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    employee = db.relationship("Employee", lazy="joined")
