"""Immutable inputs of the fee engine.

Everything the computation reads is passed in through a ``FinancialContext``
so the same engine runs from the API, a script or a test without touching the
database.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Mapping, Optional, Tuple

from app.core.enums import DiscountCalculation, DiscountType, FeeType, LateFeeRuleType

from .money import ZERO, total


@dataclass(frozen=True)
class FeeHeadData:
    id: str
    name: str
    fee_type: FeeType
    due_month: Optional[int] = None  # 1-12, annual heads only

    @property
    def is_recurring(self) -> bool:
        return self.fee_type == FeeType.MONTHLY_RECURRING

    @property
    def is_annual(self) -> bool:
        return self.fee_type == FeeType.ANNUAL_ONE_TIME


@dataclass(frozen=True)
class ClassFees:
    """Gross amount per fee head for one class."""

    class_name: str
    fees: Mapping[str, Decimal] = field(default_factory=dict)

    def amount_for(self, fee_head_id: str) -> Decimal:
        return self.fees.get(fee_head_id, ZERO)


@dataclass(frozen=True)
class DiscountData:
    id: str
    name: str
    type: DiscountType
    calculation: DiscountCalculation
    value: Decimal
    fee_head_id: Optional[str] = None


@dataclass(frozen=True)
class TransportRouteData:
    id: str
    name: str
    monthly_fee: Decimal


@dataclass(frozen=True)
class LateFeeRuleData:
    due_day_of_month: int
    rule_type: LateFeeRuleType
    value: Decimal


NO_LATE_FEE = LateFeeRuleData(due_day_of_month=1, rule_type=LateFeeRuleType.FIXED, value=ZERO)


@dataclass(frozen=True)
class PaymentData:
    id: str
    qr_id: str
    amount: Decimal
    date: datetime
    payment_method: Optional[str] = None


@dataclass(frozen=True)
class AdditionalFeeData:
    id: str
    student_qr_id: str
    amount: Decimal
    date_issued: datetime
    description: str = ""


@dataclass(frozen=True)
class WaiverData:
    id: str
    student_qr_id: str
    amount: Decimal
    date: datetime
    reason: str = ""


@dataclass(frozen=True)
class StudentData:
    qr_id: str
    name: str
    class_name: Optional[str] = None
    section: Optional[str] = None
    discount_category_ids: Tuple[str, ...] = ()
    transport_route_id: Optional[str] = None


@dataclass(frozen=True)
class FinancialContext:
    """Snapshot of every collection the engine depends on."""

    fee_heads: Tuple[FeeHeadData, ...] = ()
    class_fee_structures: Tuple[ClassFees, ...] = ()
    discount_categories: Tuple[DiscountData, ...] = ()
    transport_routes: Tuple[TransportRouteData, ...] = ()
    late_fee_rule: LateFeeRuleData = NO_LATE_FEE
    payments: Tuple[PaymentData, ...] = ()
    additional_fees: Tuple[AdditionalFeeData, ...] = ()
    waivers: Tuple[WaiverData, ...] = ()

    @property
    def recurring_heads(self) -> List[FeeHeadData]:
        return [h for h in self.fee_heads if h.is_recurring]

    def fee_structure_for(self, class_name: Optional[str]) -> Optional[ClassFees]:
        if not class_name:
            return None
        for cfs in self.class_fee_structures:
            if cfs.class_name == class_name:
                return cfs
        return None

    def discounts_for(self, student: StudentData) -> List[DiscountData]:
        assigned = set(student.discount_category_ids)
        return [d for d in self.discount_categories if d.id in assigned]

    def transport_fee_for(self, student: StudentData) -> Decimal:
        if not student.transport_route_id:
            return ZERO
        for route in self.transport_routes:
            if route.id == student.transport_route_id:
                return route.monthly_fee
        return ZERO

    def payments_for(self, qr_id: str) -> List[PaymentData]:
        return [p for p in self.payments if p.qr_id == qr_id]

    def additional_fees_for(self, qr_id: str) -> List[AdditionalFeeData]:
        return [f for f in self.additional_fees if f.student_qr_id == qr_id]

    def waivers_for(self, qr_id: str) -> List[WaiverData]:
        return [w for w in self.waivers if w.student_qr_id == qr_id]

    def total_paid_by(self, qr_id: str) -> Decimal:
        return total(p.amount for p in self.payments_for(qr_id))
