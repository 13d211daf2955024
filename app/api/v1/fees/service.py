"""Fees service: payments, additional fees, waivers and the per-student financial statement."""

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ServiceError
from app.core.fee_audit_service import log_fee_audit
from app.core.fee_context_service import load_financial_context, resolve_as_of, student_data
from app.core.fee_engine import StudentFinancials, compute_student_financials, payable_total
from app.core.fee_engine.money import quantize_money
from app.core.models import AdditionalFee, FeePayment, FeeWaiver, Student

from .schemas import (
    AdditionalFeeCreate,
    AdditionalFeeResponse,
    DiscountBreakdownResponse,
    FeeWaiverCreate,
    FeeWaiverResponse,
    MonthlyBreakdownItem,
    PayableRequest,
    PayableResponse,
    PaymentCreate,
    PaymentResponse,
    StudentFinancialsResponse,
)

logger = logging.getLogger(__name__)

FEE_STRUCTURE_NOT_FOUND = "Fee structure not found"


async def _get_student_or_404(db: AsyncSession, qr_id: str) -> Student:
    student = await db.get(Student, qr_id)
    if not student:
        raise ServiceError("Student not found", status.HTTP_404_NOT_FOUND)
    return student


# --- Payment ---
async def record_payment(db: AsyncSession, qr_id: str, payload: PaymentCreate) -> PaymentResponse:
    """Append a payment. A repeated client id returns the stored payment instead of a duplicate."""
    student = await _get_student_or_404(db, qr_id)
    if payload.id:
        existing = await db.get(FeePayment, payload.id)
        if existing:
            if existing.qr_id != qr_id:
                raise ServiceError("Payment id already used for another student", status.HTTP_409_CONFLICT)
            logger.info("Payment %s already recorded for %s; returning it", payload.id, qr_id)
            return PaymentResponse.model_validate(existing)
    payment = FeePayment(
        qr_id=qr_id,
        student_name=student.name,
        amount=payload.amount,
        payment_method=payload.payment_method.value,
        date=resolve_as_of(payload.date),
    )
    if payload.id:
        payment.id = payload.id
    db.add(payment)
    await db.flush()
    await log_fee_audit(
        db, "fee_payments", payment.id, "CREATE", None,
        {"qr_id": qr_id, "amount": str(payload.amount), "payment_method": payment.payment_method},
    )
    await db.commit()
    await db.refresh(payment)
    logger.info("Recorded payment %s of %s for %s (%s)", payment.id, payment.amount, qr_id, payment.payment_method)
    return PaymentResponse.model_validate(payment)


async def list_payments(db: AsyncSession, qr_id: str) -> List[PaymentResponse]:
    await _get_student_or_404(db, qr_id)
    rows = (
        await db.execute(select(FeePayment).where(FeePayment.qr_id == qr_id).order_by(FeePayment.date.desc()))
    ).scalars().all()
    return [PaymentResponse.model_validate(p) for p in rows]


# --- Additional fee ---
async def add_additional_fee(db: AsyncSession, qr_id: str, payload: AdditionalFeeCreate) -> AdditionalFeeResponse:
    await _get_student_or_404(db, qr_id)
    fee = AdditionalFee(
        student_qr_id=qr_id,
        description=payload.description.strip(),
        amount=payload.amount,
        date_issued=resolve_as_of(payload.date_issued),
    )
    db.add(fee)
    await db.flush()
    await log_fee_audit(
        db, "additional_fees", fee.id, "CREATE", None,
        {"student_qr_id": qr_id, "description": fee.description, "amount": str(payload.amount)},
    )
    await db.commit()
    await db.refresh(fee)
    logger.info("Added additional fee %s of %s for %s", fee.id, fee.amount, qr_id)
    return AdditionalFeeResponse.model_validate(fee)


async def list_additional_fees(db: AsyncSession, qr_id: str) -> List[AdditionalFeeResponse]:
    await _get_student_or_404(db, qr_id)
    rows = (
        await db.execute(
            select(AdditionalFee).where(AdditionalFee.student_qr_id == qr_id).order_by(AdditionalFee.date_issued)
        )
    ).scalars().all()
    return [AdditionalFeeResponse.model_validate(f) for f in rows]


# --- Waiver ---
async def add_waiver(db: AsyncSession, qr_id: str, payload: FeeWaiverCreate) -> FeeWaiverResponse:
    await _get_student_or_404(db, qr_id)
    waiver = FeeWaiver(
        student_qr_id=qr_id,
        amount=payload.amount,
        reason=payload.reason,
        date=datetime.now(),
    )
    db.add(waiver)
    await db.flush()
    await log_fee_audit(
        db, "fee_waivers", waiver.id, "CREATE", None,
        {"student_qr_id": qr_id, "amount": str(payload.amount), "reason": payload.reason},
    )
    await db.commit()
    await db.refresh(waiver)
    logger.info("Applied waiver %s of %s for %s: %s", waiver.id, waiver.amount, qr_id, waiver.reason)
    return FeeWaiverResponse.model_validate(waiver)


async def list_waivers(db: AsyncSession, qr_id: str) -> List[FeeWaiverResponse]:
    await _get_student_or_404(db, qr_id)
    rows = (
        await db.execute(select(FeeWaiver).where(FeeWaiver.student_qr_id == qr_id).order_by(FeeWaiver.date))
    ).scalars().all()
    return [FeeWaiverResponse.model_validate(w) for w in rows]


# --- Financial statement ---
def financials_to_response(
    student: Student,
    financials: StudentFinancials,
    as_of: datetime,
) -> StudentFinancialsResponse:
    discounts = None
    if financials.discounts is not None:
        d = financials.discounts
        discounts = DiscountBreakdownResponse(
            recurring_gross=quantize_money(d.recurring_gross),
            head_discounts={k: quantize_money(v) for k, v in d.head_discounts.items()},
            monthly_headwise_discount=quantize_money(d.monthly_headwise_discount),
            sub_total=quantize_money(d.sub_total),
            monthly_total_discount=quantize_money(d.monthly_total_discount),
            transport_fee=quantize_money(d.transport_fee),
            net_recurring_monthly=quantize_money(d.net_recurring_monthly),
        )
    return StudentFinancialsResponse(
        qr_id=student.qr_id,
        student_name=student.name,
        class_name=student.class_name,
        as_of=as_of,
        fee_structure_found=financials.fee_structure_found,
        message=None if financials.fee_structure_found else FEE_STRUCTURE_NOT_FOUND,
        monthly_breakdown=[
            MonthlyBreakdownItem(
                key=m.key,
                year=m.month.year,
                month=m.month.month,
                month_name=m.month.name,
                recurring_amount=quantize_money(m.recurring_amount),
                annual_amount=quantize_money(m.annual_amount),
                due_amount=quantize_money(m.due_amount),
                late_fee=quantize_money(m.late_fee),
                fee=quantize_money(m.fee),
                paid_amount=quantize_money(m.paid_amount),
                balance=quantize_money(m.balance),
                status=m.status,
            )
            for m in financials.monthly_breakdown
        ],
        discounts=discounts,
        total_dues_to_date=quantize_money(financials.total_dues_to_date),
        total_additional_fees=quantize_money(financials.total_additional_fees),
        total_waivers=quantize_money(financials.total_waivers),
        total_paid=quantize_money(financials.total_paid),
        unapplied_payment=quantize_money(financials.unapplied_payment),
        outstanding_balance=quantize_money(financials.outstanding_balance),
    )


async def compute_financials(
    db: AsyncSession,
    qr_id: str,
    as_of: Optional[datetime] = None,
) -> tuple[Student, StudentFinancials, datetime]:
    student = await _get_student_or_404(db, qr_id)
    now = resolve_as_of(as_of)
    context = await load_financial_context(db, qr_id=qr_id)
    return student, compute_student_financials(student_data(student), context, now), now


async def get_student_financials(
    db: AsyncSession,
    qr_id: str,
    as_of: Optional[datetime] = None,
) -> StudentFinancialsResponse:
    student, financials, now = await compute_financials(db, qr_id, as_of)
    return financials_to_response(student, financials, now)


async def get_payable_amount(db: AsyncSession, qr_id: str, payload: PayableRequest) -> PayableResponse:
    """Amount the payment form proposes for the selected months."""
    _, financials, _ = await compute_financials(db, qr_id, payload.as_of)
    if not financials.fee_structure_found:
        raise ServiceError(FEE_STRUCTURE_NOT_FOUND, status.HTTP_400_BAD_REQUEST)
    payable = [m.key for m in financials.monthly_breakdown if m.key in set(payload.months) and m.is_payable]
    return PayableResponse(
        qr_id=qr_id,
        months=payable,
        amount=quantize_money(payable_total(financials, payload.months)),
        outstanding_balance=quantize_money(financials.outstanding_balance),
    )
