"""Fee head master (Tuition, Library, Annual Development...)."""

import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String

from app.db.session import Base


class FeeHead(Base):
    """Named fee category. Annual one-time heads fall due in ``due_month`` (1-12)."""

    __tablename__ = "fee_heads"
    __table_args__ = (
        CheckConstraint(
            "fee_type IN ('Monthly Recurring','Annual One-Time')",
            name="chk_fee_head_fee_type",
        ),
    )

    id = Column(String(64), primary_key=True, default=lambda: uuid.uuid4().hex)
    name = Column(String(100), nullable=False)
    # Stored as string; constrained by chk_fee_head_fee_type
    fee_type = Column(String(30), nullable=False)
    due_month = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
