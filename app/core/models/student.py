"""Student record with the fee-relevant details: class, discounts, transport."""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, String
from sqlalchemy.orm import relationship

from app.db.session import Base


class Student(Base):
    """Student keyed by the QR id printed on the ID card."""

    __tablename__ = "students"

    qr_id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    class_name = Column(String(20), nullable=True, index=True)
    section = Column(String(10), nullable=True)
    transport_route_id = Column(
        String(64),
        ForeignKey("transport_routes.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    transport_route = relationship("TransportRoute")
    discounts = relationship(
        "StudentDiscount",
        back_populates="student",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def discount_category_ids(self) -> list:
        return [d.discount_category_id for d in self.discounts]


class StudentDiscount(Base):
    """Discount category held by a student."""

    __tablename__ = "student_discounts"

    student_qr_id = Column(
        String(64),
        ForeignKey("students.qr_id", ondelete="CASCADE"),
        primary_key=True,
    )
    discount_category_id = Column(
        String(64),
        ForeignKey("discount_categories.id", ondelete="RESTRICT"),
        primary_key=True,
    )
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    student = relationship("Student", back_populates="discounts")
    discount_category = relationship("DiscountCategory")
