"""Load the fee engine's FinancialContext from the database.

The engine itself never queries; every view loads one snapshot here and passes
it in.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.enums import DiscountCalculation, DiscountType, FeeType, LateFeeRuleType
from app.core.fee_engine import (
    AdditionalFeeData,
    ClassFees,
    DiscountData,
    FeeHeadData,
    FinancialContext,
    LateFeeRuleData,
    PaymentData,
    StudentData,
    TransportRouteData,
    WaiverData,
)
from app.core.fee_engine.money import to_decimal
from app.core.models import (
    LATE_FEE_RULE_ID,
    AdditionalFee,
    ClassFeeStructure,
    DiscountCategory,
    FeeHead,
    FeePayment,
    FeeWaiver,
    LateFeeRule,
    Student,
    TransportRoute,
)


def default_late_fee_rule() -> LateFeeRuleData:
    return LateFeeRuleData(
        due_day_of_month=settings.default_due_day_of_month,
        rule_type=LateFeeRuleType(settings.default_late_fee_rule_type),
        value=to_decimal(settings.default_late_fee_value),
    )


def late_fee_rule_data(rule: Optional[LateFeeRule]) -> LateFeeRuleData:
    if rule is None:
        return default_late_fee_rule()
    return LateFeeRuleData(
        due_day_of_month=rule.due_day_of_month,
        rule_type=LateFeeRuleType(rule.rule_type),
        value=to_decimal(rule.value),
    )


def student_data(student: Student) -> StudentData:
    return StudentData(
        qr_id=student.qr_id,
        name=student.name,
        class_name=student.class_name,
        section=student.section,
        discount_category_ids=tuple(student.discount_category_ids),
        transport_route_id=student.transport_route_id,
    )


def fee_head_data(head: FeeHead) -> FeeHeadData:
    return FeeHeadData(
        id=head.id,
        name=head.name,
        fee_type=FeeType(head.fee_type),
        due_month=head.due_month,
    )


def discount_data(dc: DiscountCategory) -> DiscountData:
    return DiscountData(
        id=dc.id,
        name=dc.name,
        type=DiscountType(dc.type),
        calculation=DiscountCalculation(dc.calculation),
        value=to_decimal(dc.value),
        fee_head_id=dc.fee_head_id,
    )


def payment_data(p: FeePayment) -> PaymentData:
    return PaymentData(
        id=p.id,
        qr_id=p.qr_id,
        amount=to_decimal(p.amount),
        date=p.date,
        payment_method=p.payment_method,
    )


async def get_late_fee_rule(db: AsyncSession) -> Optional[LateFeeRule]:
    return await db.get(LateFeeRule, LATE_FEE_RULE_ID)


async def load_class_fees(db: AsyncSession) -> List[ClassFees]:
    rows = (await db.execute(select(ClassFeeStructure).order_by(ClassFeeStructure.class_name))).scalars().all()
    grouped: dict[str, dict] = {}
    for row in rows:
        grouped.setdefault(row.class_name, {})[row.fee_head_id] = to_decimal(row.amount)
    return [ClassFees(class_name=name, fees=fees) for name, fees in grouped.items()]


async def load_students(db: AsyncSession, class_name: Optional[str] = None) -> List[StudentData]:
    stmt = select(Student)
    if class_name:
        stmt = stmt.where(Student.class_name == class_name)
    stmt = stmt.order_by(Student.class_name, Student.name)
    rows = (await db.execute(stmt)).scalars().all()
    return [student_data(s) for s in rows]


async def load_financial_context(db: AsyncSession, qr_id: Optional[str] = None) -> FinancialContext:
    """Snapshot of the fee configuration and transactions.

    ``qr_id`` restricts payments, additional fees and waivers to one student;
    configuration is always loaded in full.
    """
    fee_heads = (await db.execute(select(FeeHead).order_by(FeeHead.name))).scalars().all()
    discounts = (await db.execute(select(DiscountCategory).order_by(DiscountCategory.name))).scalars().all()
    routes = (await db.execute(select(TransportRoute).order_by(TransportRoute.name))).scalars().all()

    payments_stmt = select(FeePayment).order_by(FeePayment.date)
    additional_stmt = select(AdditionalFee).order_by(AdditionalFee.date_issued)
    waivers_stmt = select(FeeWaiver).order_by(FeeWaiver.date)
    if qr_id is not None:
        payments_stmt = payments_stmt.where(FeePayment.qr_id == qr_id)
        additional_stmt = additional_stmt.where(AdditionalFee.student_qr_id == qr_id)
        waivers_stmt = waivers_stmt.where(FeeWaiver.student_qr_id == qr_id)
    payments = (await db.execute(payments_stmt)).scalars().all()
    additional = (await db.execute(additional_stmt)).scalars().all()
    waivers = (await db.execute(waivers_stmt)).scalars().all()

    return FinancialContext(
        fee_heads=tuple(fee_head_data(h) for h in fee_heads),
        class_fee_structures=tuple(await load_class_fees(db)),
        discount_categories=tuple(discount_data(d) for d in discounts),
        transport_routes=tuple(
            TransportRouteData(id=r.id, name=r.name, monthly_fee=to_decimal(r.monthly_fee)) for r in routes
        ),
        late_fee_rule=late_fee_rule_data(await get_late_fee_rule(db)),
        payments=tuple(payment_data(p) for p in payments),
        additional_fees=tuple(
            AdditionalFeeData(
                id=f.id,
                student_qr_id=f.student_qr_id,
                amount=to_decimal(f.amount),
                date_issued=f.date_issued,
                description=f.description,
            )
            for f in additional
        ),
        waivers=tuple(
            WaiverData(
                id=w.id,
                student_qr_id=w.student_qr_id,
                amount=to_decimal(w.amount),
                date=w.date,
                reason=w.reason,
            )
            for w in waivers
        ),
    )


def resolve_as_of(as_of: Optional[datetime]) -> datetime:
    """Engine time is naive local time; aware datetimes are converted."""
    if as_of is None:
        return datetime.now()
    if as_of.tzinfo is not None:
        return as_of.astimezone().replace(tzinfo=None)
    return as_of
