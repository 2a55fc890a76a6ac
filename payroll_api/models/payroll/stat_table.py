from datetime import datetime, date
from payroll_api.extensions import db

TYPE_SSS = "SSS"
TYPE_PAGIBIG = "PAGIBIG"
TYPE_PHILHEALTH = "PHILHEALTH"
TYPE_TAX = "TAX"
STAT_TABLE_TYPES = (TYPE_SSS, TYPE_PAGIBIG, TYPE_PHILHEALTH, TYPE_TAX)


class StatTable(db.Model):
    """
    Effective-dated bracket table for one statutory collaborator.

    value_json shapes (validated only when evaluated):
    - SSS:        {"slabs":[{"min":0,"max":4249.99,"amount":180}, ...]}
    - PAGIBIG:    {"slabs":[{"min":0,"max":1500,"rate":0.01},{"min":1500.01,"max":null,"rate":0.02}],"cap":100}
    - PHILHEALTH: {"slabs":[{"min":0,"max":null,"rate":0.05}],"floor":10000,"ceiling":100000,"share":0.5}
    - TAX:        {"slabs":[{"min":0,"max":10417,"base_tax":0,"rate":0}, ...]}  (one row per cycle)
    """

    __tablename__ = "stat_tables"

    id = db.Column(db.Integer, primary_key=True)
    type = db.Column(db.Enum(*STAT_TABLE_TYPES, name="stat_table_type_enum"), nullable=False)
    # only TAX tables are per pay-cycle; NULL => any cycle
    cycle = db.Column(db.String(20), nullable=True)
    value_json = db.Column(db.JSON, nullable=False)
    effective_from = db.Column(db.Date, nullable=False, default=date.today)
    effective_to = db.Column(db.Date)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    __table_args__ = (
        db.Index("ix_stat_tables_resolve", "type", "cycle", "effective_from", "effective_to"),
    )
