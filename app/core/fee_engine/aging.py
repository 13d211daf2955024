"""Defaulter aging: how long a student's oldest unpaid month has been open."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from app.core.enums import AgingBucket

from .financials import MonthlyBreakdown, StudentFinancials
from .money import EPSILON


@dataclass(frozen=True)
class AgingResult:
    qr_id: str
    outstanding_balance: Decimal
    first_due_month: Optional[MonthlyBreakdown]
    days_overdue: int
    bucket: AgingBucket


def aging_bucket(days_overdue: int) -> AgingBucket:
    if days_overdue <= 30:
        return AgingBucket.DAYS_0_30
    if days_overdue <= 60:
        return AgingBucket.DAYS_31_60
    if days_overdue <= 90:
        return AgingBucket.DAYS_61_90
    return AgingBucket.DAYS_90_PLUS


def classify_aging(financials: StudentFinancials, now: datetime) -> Optional[AgingResult]:
    """``None`` unless the student owes more than a paisa.

    Dues made up only of additional fees have no unpaid month; they age from
    ``now`` and land in the first bucket.
    """
    if financials.outstanding_balance <= EPSILON:
        return None
    first_due = next((m for m in financials.monthly_breakdown if m.is_payable), None)
    start = first_due.month.first_day if first_due else now
    days_overdue = max(0, (now - start).days)
    return AgingResult(
        qr_id=financials.qr_id,
        outstanding_balance=financials.outstanding_balance,
        first_due_month=first_due,
        days_overdue=days_overdue,
        bucket=aging_bucket(days_overdue),
    )
