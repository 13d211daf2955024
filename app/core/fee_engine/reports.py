"""Read-only reports built by folding the engine over the student population."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from app.core.enums import AgingBucket, DiscountType

from .aging import AgingResult, classify_aging
from .context import DiscountData, FinancialContext, PaymentData, StudentData
from .discounts import discount_amount
from .financials import compute_student_financials
from .money import EPSILON, ZERO, total

MONTHS_PER_SESSION = 12


@dataclass(frozen=True)
class DuesRow:
    student: StudentData
    outstanding_balance: Decimal


@dataclass(frozen=True)
class DefaulterRow:
    student: StudentData
    aging: AgingResult


@dataclass(frozen=True)
class DiscountSummaryRow:
    category: DiscountData
    student_count: int
    monthly_value: Decimal

    @property
    def total_session_value(self) -> Decimal:
        return self.monthly_value * MONTHS_PER_SESSION


def dues_list(
    students: Iterable[StudentData],
    context: FinancialContext,
    now: datetime,
    class_name: Optional[str] = None,
) -> List[DuesRow]:
    rows = []
    for student in students:
        if class_name and student.class_name != class_name:
            continue
        financials = compute_student_financials(student, context, now)
        if financials.outstanding_balance > EPSILON:
            rows.append(DuesRow(student=student, outstanding_balance=financials.outstanding_balance))
    rows.sort(key=lambda r: r.outstanding_balance, reverse=True)
    return rows


def defaulters(
    students: Iterable[StudentData],
    context: FinancialContext,
    now: datetime,
    bucket: Optional[AgingBucket] = None,
) -> List[DefaulterRow]:
    rows = []
    for student in students:
        aging = classify_aging(compute_student_financials(student, context, now), now)
        if aging is None:
            continue
        if bucket is not None and aging.bucket != bucket:
            continue
        rows.append(DefaulterRow(student=student, aging=aging))
    rows.sort(key=lambda r: r.aging.days_overdue, reverse=True)
    return rows


def headwise_collection(
    students: Iterable[StudentData],
    context: FinancialContext,
    start: date,
    end: date,
) -> Dict[str, Decimal]:
    """Split collections in ``[start, end]`` across fee heads.

    Each payment is divided in proportion to the head amounts of the payer's
    class fee structure. Payments from students without a class or structure
    are left out.
    """
    head_totals: Dict[str, Decimal] = {h.id: ZERO for h in context.fee_heads}
    by_qr = {s.qr_id: s for s in students}
    for payment in context.payments:
        if not start <= payment.date.date() <= end:
            continue
        student = by_qr.get(payment.qr_id)
        if student is None:
            continue
        class_fees = context.fee_structure_for(student.class_name)
        if class_fees is None:
            continue
        gross = total(class_fees.amount_for(h.id) for h in context.fee_heads)
        if gross == ZERO:
            continue
        for head in context.fee_heads:
            head_totals[head.id] += payment.amount * class_fees.amount_for(head.id) / gross
    return head_totals


def discount_summary(students: Iterable[StudentData], context: FinancialContext) -> List[DiscountSummaryRow]:
    """Students holding each category and its estimated value over a session.

    The value is measured on each student's gross class fees, category by
    category, without replaying the stacking order of the full evaluator. A
    head-wise category is capped at its head's amount; a monthly-total
    category is measured on the recurring gross only, so annual heads never
    add to it.
    """
    students = list(students)
    rows = []
    for category in context.discount_categories:
        holders = [s for s in students if category.id in s.discount_category_ids]
        monthly_value = ZERO
        for student in holders:
            class_fees = context.fee_structure_for(student.class_name)
            if class_fees is None:
                continue
            if category.type == DiscountType.HEAD_WISE and category.fee_head_id:
                head_amount = class_fees.amount_for(category.fee_head_id)
                monthly_value += min(discount_amount(category, head_amount), head_amount)
            elif category.type == DiscountType.MONTHLY_TOTAL:
                gross = total(class_fees.amount_for(h.id) for h in context.recurring_heads)
                monthly_value += discount_amount(category, gross)
        rows.append(DiscountSummaryRow(category=category, student_count=len(holders), monthly_value=monthly_value))
    return rows


def day_book(payments: Iterable[PaymentData], day: date) -> Tuple[List[PaymentData], Decimal]:
    entries = sorted((p for p in payments if p.date.date() == day), key=lambda p: p.date, reverse=True)
    return entries, total(p.amount for p in entries)
