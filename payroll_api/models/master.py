from datetime import datetime

from payroll_api.extensions import db

PERIOD_WEEKLY = "weekly"
PERIOD_SEMI_MONTHLY = "semi-monthly"
PERIOD_MONTHLY = "monthly"
PERIOD_TYPES = (PERIOD_WEEKLY, PERIOD_SEMI_MONTHLY, PERIOD_MONTHLY)


class Company(db.Model):
    __tablename__ = "companies"

    id = db.Column(db.Integer, primary_key=True)
    code = db.Column(db.String(50), unique=True, nullable=False)
    name = db.Column(db.String(255), nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    setting = db.relationship("CompanySetting", uselist=False, back_populates="company")


class CompanySetting(db.Model):
    """
    Company-wide attendance and pay-cycle knobs.

      period_cycle              -> default type for new periods
      grace_period_minutes      -> tolerance added to expected clock-in before lateness accrues
      minimum_overtime_minutes  -> window after expected clock-out before overtime accrues
    """

    __tablename__ = "company_settings"

    id = db.Column(db.Integer, primary_key=True)
    company_id = db.Column(
        db.Integer,
        db.ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    period_cycle = db.Column(
        db.Enum(*PERIOD_TYPES, name="period_type_enum"),
        nullable=False,
        default=PERIOD_SEMI_MONTHLY,
    )
    grace_period_minutes = db.Column(db.Integer, nullable=False, default=0)
    minimum_overtime_minutes = db.Column(db.Integer, nullable=False, default=0)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    company = db.relationship("Company", back_populates="setting")
