from datetime import datetime
from payroll_api.extensions import db

FULL_TIME = "fulltime"


class Employee(db.Model):
    __tablename__ = "employees"

    id = db.Column(db.Integer, primary_key=True)
    company_id = db.Column(db.Integer, db.ForeignKey("companies.id", ondelete="RESTRICT"), nullable=False, index=True)

    code  = db.Column(db.String(32), nullable=False)    # unique per company
    email = db.Column(db.String(255), unique=True, nullable=True)
    first_name = db.Column(db.String(80), nullable=False)
    last_name  = db.Column(db.String(80), nullable=True)

    employment_type = db.Column(db.String(20), default=FULL_TIME, nullable=False)  # fulltime/parttime/contract
    status = db.Column(db.String(16), default="active", nullable=False)             # active/inactive

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint("company_id", "code", name="uq_employee_company_code"),
    )

    company = db.relationship("Company", lazy="joined")
    salary_profile = db.relationship("SalaryProfile", uselist=False, back_populates="employee")

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p)


class SalaryProfile(db.Model):
    __tablename__ = "salary_profiles"

    id = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(db.Integer, db.ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, unique=True)

    # monthly-denominated
    basic_salary = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    daily_rate = db.Column(db.Numeric(14, 4))
    hourly_rate = db.Column(db.Numeric(14, 4), nullable=False, default=0)

    working_hours_per_day = db.Column(db.Numeric(5, 2), nullable=False, default=8)
    working_days_per_week = db.Column(db.Numeric(4, 2), nullable=False, default=5)

    # multipliers
    overtime_rate = db.Column(db.Numeric(6, 4), nullable=False, default=1)
    regular_holiday_rate = db.Column(db.Numeric(6, 4), nullable=False, default=1)
    special_holiday_rate = db.Column(db.Numeric(6, 4), nullable=False, default=0.3)

    # recurring line items: [{"name": "Rice", "pay": 1000}, ...] (monthly amounts)
    allowances = db.Column(db.JSON, nullable=False, default=list)
    commissions = db.Column(db.JSON, nullable=False, default=list)
    other_compensations = db.Column(db.JSON, nullable=False, default=list)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    employee = db.relationship("Employee", back_populates="salary_profile")
