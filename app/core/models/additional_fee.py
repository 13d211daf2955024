"""Additional fee: ad hoc charge outside the monthly ledger, due immediately."""

import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String

from app.db.session import Base


class AdditionalFee(Base):
    __tablename__ = "additional_fees"

    id = Column(String(64), primary_key=True, default=lambda: uuid.uuid4().hex)
    student_qr_id = Column(String(64), ForeignKey("students.qr_id", ondelete="CASCADE"), nullable=False, index=True)
    description = Column(String(255), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    date_issued = Column(DateTime, default=datetime.now, nullable=False)
