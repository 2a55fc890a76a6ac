from datetime import datetime
from payroll_api.extensions import db
from payroll_api.models.master import PERIOD_TYPES

STATUS_PENDING = "pending"
STATUS_COMPLETED = "completed"
STATUS_CANCELLED = "cancelled"
PERIOD_STATUSES = (STATUS_PENDING, STATUS_COMPLETED, STATUS_CANCELLED)


class Period(db.Model):
    __tablename__ = "periods"

    id = db.Column(db.Integer, primary_key=True)
    company_id = db.Column(db.Integer, db.ForeignKey("companies.id", ondelete="RESTRICT"), nullable=False, index=True)
    name = db.Column(db.String(120))
    company_period_number = db.Column(db.Integer, nullable=False, default=1)
    type = db.Column(db.Enum(*PERIOD_TYPES, name="period_type_enum"), nullable=False)
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date, nullable=False)
    status = db.Column(db.Enum(*PERIOD_STATUSES, name="period_status_enum"), nullable=False, default=STATUS_PENDING)

    completed_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    company = db.relationship("Company", lazy="joined")

    __table_args__ = (
        db.UniqueConstraint("company_id", "company_period_number", name="uq_period_company_number"),
    )
