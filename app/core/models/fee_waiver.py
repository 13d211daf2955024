"""Fee waiver: flat deduction from a student's total dues."""

import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String, Text

from app.db.session import Base


class FeeWaiver(Base):
    """Applied at the aggregate level, not tied to any month."""

    __tablename__ = "fee_waivers"

    id = Column(String(64), primary_key=True, default=lambda: uuid.uuid4().hex)
    student_qr_id = Column(String(64), ForeignKey("students.qr_id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    reason = Column(Text, nullable=False)
    date = Column(DateTime, default=datetime.now, nullable=False)
