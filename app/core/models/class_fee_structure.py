"""Class fee structure: gross amount per fee head per class."""

import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String, UniqueConstraint
from sqlalchemy.orm import relationship

from app.db.session import Base


class ClassFeeStructure(Base):
    """One row per (class, fee head). Recurring heads are per month, annual heads per occurrence."""

    __tablename__ = "class_fee_structures"
    __table_args__ = (
        UniqueConstraint("class_name", "fee_head_id", name="uq_class_fee_structure_class_head"),
    )

    id = Column(String(64), primary_key=True, default=lambda: uuid.uuid4().hex)
    class_name = Column(String(20), nullable=False, index=True)
    fee_head_id = Column(String(64), ForeignKey("fee_heads.id", ondelete="CASCADE"), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    fee_head = relationship("FeeHead")
