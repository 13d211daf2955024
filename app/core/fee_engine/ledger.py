"""Monthly dues ledger: one entry per session month with the gross amount due."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable, List

from .context import ClassFees, FeeHeadData
from .money import ZERO
from .session import SessionMonth


@dataclass(frozen=True)
class LedgerEntry:
    month: SessionMonth
    recurring_amount: Decimal
    annual_amounts: Dict[str, Decimal] = field(default_factory=dict)
    paid_amount: Decimal = ZERO

    @property
    def annual_amount(self) -> Decimal:
        return sum(self.annual_amounts.values(), ZERO)

    @property
    def due_amount(self) -> Decimal:
        return self.recurring_amount + self.annual_amount

    @property
    def outstanding(self) -> Decimal:
        return self.due_amount - self.paid_amount


def annual_heads_due_in(month: SessionMonth, fee_heads: Iterable[FeeHeadData]) -> List[FeeHeadData]:
    return [
        h for h in fee_heads
        if h.is_annual and h.due_month is not None and h.due_month - 1 == month.month
    ]


def build_ledger(
    months: Iterable[SessionMonth],
    net_recurring_monthly: Decimal,
    class_fees: ClassFees,
    fee_heads: Iterable[FeeHeadData],
) -> List[LedgerEntry]:
    """Gross due per month: the net recurring fee plus annual heads falling due that month.

    Annual heads carry the full class amount; discounts are not applied to them.
    """
    fee_heads = list(fee_heads)
    ledger = []
    for month in months:
        annual = {
            h.id: class_fees.amount_for(h.id) for h in annual_heads_due_in(month, fee_heads)
        }
        ledger.append(LedgerEntry(month=month, recurring_amount=net_recurring_monthly, annual_amounts=annual))
    return ledger
