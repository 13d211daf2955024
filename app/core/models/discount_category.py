"""Discount category master. Students hold categories through StudentDiscount."""

import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Numeric, String
from sqlalchemy.orm import relationship

from app.db.session import Base


class DiscountCategory(Base):
    """Head-wise categories target ``fee_head_id``; monthly-total ones apply to the recurring subtotal."""

    __tablename__ = "discount_categories"
    __table_args__ = (
        CheckConstraint("type IN ('Monthly Total','Head-wise')", name="chk_discount_category_type"),
        CheckConstraint("calculation IN ('Percentage','Fixed')", name="chk_discount_category_calculation"),
    )

    id = Column(String(64), primary_key=True, default=lambda: uuid.uuid4().hex)
    name = Column(String(100), nullable=False)
    type = Column(String(20), nullable=False)
    calculation = Column(String(20), nullable=False)
    value = Column(Numeric(12, 2), nullable=False)
    fee_head_id = Column(String(64), ForeignKey("fee_heads.id", ondelete="RESTRICT"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    fee_head = relationship("FeeHead")
