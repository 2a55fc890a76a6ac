from datetime import datetime
from payroll_api.extensions import db

HOLIDAY_REGULAR = "regular"
HOLIDAY_SPECIAL = "special"
HOLIDAY_TYPES = (HOLIDAY_REGULAR, HOLIDAY_SPECIAL)


class TimeRecord(db.Model):
    """One expected attendance day. clock_in/clock_out NULL => absent."""

    __tablename__ = "time_records"

    id = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(db.Integer, db.ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    date = db.Column(db.Date, nullable=False)

    expected_clock_in = db.Column(db.DateTime, nullable=True)
    expected_clock_out = db.Column(db.DateTime, nullable=True)
    clock_in = db.Column(db.DateTime, nullable=True)
    clock_out = db.Column(db.DateTime, nullable=True)

    attendance_status = db.Column(db.String(20), nullable=True)  # present|absent|leave (informational)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        db.Index("ix_time_records_emp_date", "employee_id", "date"),
    )


class Holiday(db.Model):
    __tablename__ = "holidays"

    id = db.Column(db.Integer, primary_key=True)
    # NULL => nationwide, applies to every company
    company_id = db.Column(db.Integer, db.ForeignKey("companies.id", ondelete="CASCADE"), nullable=True, index=True)
    name = db.Column(db.String(120), nullable=False)
    date = db.Column(db.Date, nullable=False, index=True)
    type = db.Column(db.Enum(*HOLIDAY_TYPES, name="holiday_type_enum"), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
