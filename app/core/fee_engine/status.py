from datetime import datetime
from decimal import Decimal

from app.core.enums import MonthStatus

from .money import EPSILON, ZERO
from .session import SessionMonth


def classify_month(month: SessionMonth, now: datetime, paid_amount: Decimal, fee: Decimal) -> MonthStatus:
    """Status of one month given what was paid against its fee (late fee included)."""
    if not month.has_started(now):
        return MonthStatus.UPCOMING
    balance = fee - paid_amount
    if balance <= EPSILON:
        return MonthStatus.PAID
    if paid_amount > ZERO:
        return MonthStatus.PARTIALLY_PAID
    return MonthStatus.DUE


def is_payable(status: MonthStatus) -> bool:
    return status in (MonthStatus.DUE, MonthStatus.PARTIALLY_PAID)
