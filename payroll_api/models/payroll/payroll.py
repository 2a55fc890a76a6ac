from datetime import datetime
from payroll_api.extensions import db


class Payroll(db.Model):
    """
    The payroll artifact: one row per (period, employee).

    Every figure has a `<figure>_ytd` twin holding the employee's running total
    including this period. Ledgers (leaves, allowances, commissions,
    other_compensations) are stored as JSON lists of {"name"/"date", "pay", ...}.
    """

    __tablename__ = "payrolls"

    id = db.Column(db.Integer, primary_key=True)
    period_id = db.Column(db.Integer, db.ForeignKey("periods.id", ondelete="RESTRICT"), nullable=False, index=True)
    employee_id = db.Column(db.Integer, db.ForeignKey("employees.id", ondelete="RESTRICT"), nullable=False, index=True)

    # ---- attendance ----
    absent_minutes = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    absent_minutes_ytd = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    absent_days = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    absent_days_ytd = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    late_minutes = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    late_minutes_ytd = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    undertime_minutes = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    undertime_minutes_ytd = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    overtime_minutes = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    overtime_minutes_ytd = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    expected_hours_worked = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    expected_hours_worked_ytd = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    hours_worked = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    hours_worked_ytd = db.Column(db.Numeric(12, 2), nullable=False, default=0)

    # ---- holidays ----
    regular_holiday_hours = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    regular_holiday_hours_ytd = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    regular_holiday_hours_worked = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    regular_holiday_hours_worked_ytd = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    regular_holiday_hours_pay = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    regular_holiday_hours_pay_ytd = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    special_holiday_hours = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    special_holiday_hours_ytd = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    special_holiday_hours_worked = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    special_holiday_hours_worked_ytd = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    special_holiday_hours_pay = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    special_holiday_hours_pay_ytd = db.Column(db.Numeric(14, 2), nullable=False, default=0)

    # ---- salary & attendance money ----
    basic_salary = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    basic_salary_ytd = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    absent_deductions = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    absent_deductions_ytd = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    late_deductions = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    late_deductions_ytd = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    undertime_deductions = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    undertime_deductions_ytd = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    overtime_pay = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    overtime_pay_ytd = db.Column(db.Numeric(14, 2), nullable=False, default=0)

    # ---- leaves & compensations ----
    leaves = db.Column(db.JSON, nullable=False, default=list)
    leaves_pay = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    leaves_pay_ytd = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    allowances = db.Column(db.JSON, nullable=False, default=list)
    total_allowances = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    total_allowances_ytd = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    commissions = db.Column(db.JSON, nullable=False, default=list)
    total_commissions = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    total_commissions_ytd = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    other_compensations = db.Column(db.JSON, nullable=False, default=list)
    total_other_compensations = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    total_other_compensations_ytd = db.Column(db.Numeric(14, 2), nullable=False, default=0)

    # ---- statutory contributions ----
    sss_contributions = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    sss_contributions_ytd = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    pagibig_contributions = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    pagibig_contributions_ytd = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    philhealth_contributions = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    philhealth_contributions_ytd = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    total_contributions = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    total_contributions_ytd = db.Column(db.Numeric(14, 2), nullable=False, default=0)

    # ---- totals ----
    gross_income = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    gross_income_ytd = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    taxable_income = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    taxable_income_ytd = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    withheld_tax = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    withheld_tax_ytd = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    net_income = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    net_income_ytd = db.Column(db.Numeric(14, 2), nullable=False, default=0)

    calc_meta = db.Column(db.JSON)  # per-day attendance breakdown, inputs used

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    period = db.relationship("Period", lazy="joined")
    employee = db.relationship("Employee", lazy="joined")

    __table_args__ = (
        db.UniqueConstraint("period_id", "employee_id", name="uq_payroll_period_employee"),
    )
