"""Late fee rule: a single process-wide row."""

from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, Numeric, String

from app.db.session import Base

LATE_FEE_RULE_ID = 1


class LateFeeRule(Base):
    __tablename__ = "late_fee_rules"
    __table_args__ = (
        CheckConstraint("rule_type IN ('Fixed','Daily')", name="chk_late_fee_rule_type"),
    )

    id = Column(Integer, primary_key=True, default=LATE_FEE_RULE_ID)
    due_day_of_month = Column(Integer, nullable=False)
    rule_type = Column(String(10), nullable=False)
    value = Column(Numeric(12, 2), nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
