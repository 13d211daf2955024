"""Late fee penalties, recomputed on every read from the singleton rule."""

from datetime import datetime
from decimal import Decimal

from app.core.enums import LateFeeRuleType

from .context import LateFeeRuleData
from .ledger import LedgerEntry
from .money import ZERO
from .session import SessionMonth


def due_date_for(month: SessionMonth, rule: LateFeeRuleData) -> datetime:
    # Due days past the end of a short month fall on its last day
    day = min(max(rule.due_day_of_month, 1), month.days_in_month)
    return datetime(month.year, month.calendar_month, day)


def days_late(month: SessionMonth, rule: LateFeeRuleData, now: datetime) -> int:
    return (now - due_date_for(month, rule)).days


def late_fee_for(entry: LedgerEntry, rule: LateFeeRuleData, now: datetime) -> Decimal:
    """Penalty for ``entry`` as of ``now``.

    Charged only when the month has started, its due date has passed and it is
    not fully paid. Fixed rules charge ``value`` once; daily rules charge
    ``value`` per whole day past the due date.
    """
    due_date = due_date_for(entry.month, rule)
    if not (now > due_date and entry.month.has_started(now) and entry.paid_amount < entry.due_amount):
        return ZERO
    if rule.rule_type == LateFeeRuleType.FIXED:
        return rule.value
    late_days = days_late(entry.month, rule, now)
    if late_days > 0:
        return rule.value * late_days
    return ZERO
