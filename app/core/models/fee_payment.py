"""Fee payment: immutable, append-only record of money received from a student."""

import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Numeric, String

from app.db.session import Base


class FeePayment(Base):
    """Allocation to months is derived on read from the total paid, oldest month first."""

    __tablename__ = "fee_payments"
    __table_args__ = (
        CheckConstraint("amount > 0", name="chk_fee_payment_amount_positive"),
    )

    id = Column(String(64), primary_key=True, default=lambda: uuid.uuid4().hex)
    qr_id = Column(String(64), ForeignKey("students.qr_id", ondelete="RESTRICT"), nullable=False, index=True)
    student_name = Column(String(255), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    payment_method = Column(String(20), nullable=False)  # Cash, Online, Cheque
    date = Column(DateTime, default=datetime.now, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
