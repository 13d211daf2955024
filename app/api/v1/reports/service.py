"""Reports service: loads one context snapshot and folds the fee engine over it."""

import logging
from datetime import date, datetime, time, timedelta
from typing import List, Optional

from fastapi import status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import AgingBucket
from app.core.exceptions import ServiceError
from app.core.fee_context_service import load_financial_context, load_students, payment_data, resolve_as_of
from app.core.fee_engine import reports
from app.core.fee_engine.money import quantize_money, total
from app.core.models import FeePayment

from .schemas import (
    DayBookEntry,
    DayBookResponse,
    DefaulterRowResponse,
    DefaultersReportResponse,
    DiscountSummaryRowResponse,
    DuesReportResponse,
    DuesRowResponse,
    HeadwiseCollectionResponse,
    HeadwiseCollectionRow,
)

logger = logging.getLogger(__name__)


async def get_dues_report(
    db: AsyncSession,
    class_name: Optional[str] = None,
    as_of: Optional[datetime] = None,
) -> DuesReportResponse:
    now = resolve_as_of(as_of)
    students = await load_students(db, class_name=class_name)
    context = await load_financial_context(db)
    rows = reports.dues_list(students, context, now, class_name=class_name)
    logger.debug("Dues report: %d of %d students owe", len(rows), len(students))
    return DuesReportResponse(
        as_of=now,
        class_name=class_name,
        total_outstanding=quantize_money(total(r.outstanding_balance for r in rows)),
        rows=[
            DuesRowResponse(
                qr_id=r.student.qr_id,
                name=r.student.name,
                class_name=r.student.class_name,
                section=r.student.section,
                outstanding_balance=quantize_money(r.outstanding_balance),
            )
            for r in rows
        ],
    )


async def get_defaulters_report(
    db: AsyncSession,
    bucket: Optional[AgingBucket] = None,
    as_of: Optional[datetime] = None,
) -> DefaultersReportResponse:
    now = resolve_as_of(as_of)
    students = await load_students(db)
    context = await load_financial_context(db)
    rows = reports.defaulters(students, context, now, bucket=bucket)
    return DefaultersReportResponse(
        as_of=now,
        bucket=bucket,
        rows=[
            DefaulterRowResponse(
                qr_id=r.student.qr_id,
                name=r.student.name,
                class_name=r.student.class_name,
                section=r.student.section,
                outstanding_balance=quantize_money(r.aging.outstanding_balance),
                first_due_month=r.aging.first_due_month.key if r.aging.first_due_month else None,
                days_overdue=r.aging.days_overdue,
                bucket=r.aging.bucket,
            )
            for r in rows
        ],
    )


async def get_headwise_collection(
    db: AsyncSession,
    start_date: date,
    end_date: date,
) -> HeadwiseCollectionResponse:
    if start_date > end_date:
        raise ServiceError("start_date must not be after end_date", status.HTTP_400_BAD_REQUEST)
    students = await load_students(db)
    context = await load_financial_context(db)
    by_head = reports.headwise_collection(students, context, start_date, end_date)
    rows = [
        HeadwiseCollectionRow(
            fee_head_id=head.id,
            fee_head_name=head.name,
            fee_type=head.fee_type,
            amount=quantize_money(by_head.get(head.id, 0)),
        )
        for head in context.fee_heads
    ]
    return HeadwiseCollectionResponse(
        start_date=start_date,
        end_date=end_date,
        total=quantize_money(total(by_head.values())),
        rows=rows,
    )


async def get_discount_summary(db: AsyncSession) -> List[DiscountSummaryRowResponse]:
    students = await load_students(db)
    context = await load_financial_context(db)
    return [
        DiscountSummaryRowResponse(
            discount_category_id=r.category.id,
            name=r.category.name,
            type=r.category.type,
            calculation=r.category.calculation,
            value=r.category.value,
            student_count=r.student_count,
            monthly_value=quantize_money(r.monthly_value),
            total_session_value=quantize_money(r.total_session_value),
        )
        for r in reports.discount_summary(students, context)
    ]


async def get_day_book(db: AsyncSession, day: Optional[date] = None) -> DayBookResponse:
    day = day or date.today()
    start = datetime.combine(day, time.min)
    rows = (
        await db.execute(
            select(FeePayment).where(FeePayment.date >= start, FeePayment.date < start + timedelta(days=1))
        )
    ).scalars().all()
    by_id = {p.id: p for p in rows}
    entries, day_total = reports.day_book((payment_data(p) for p in rows), day)
    return DayBookResponse(
        day=day,
        total=quantize_money(day_total),
        entries=[
            DayBookEntry(
                id=e.id,
                qr_id=e.qr_id,
                student_name=by_id[e.id].student_name,
                amount=quantize_money(e.amount),
                payment_method=e.payment_method,
                date=e.date,
            )
            for e in entries
        ],
    )
