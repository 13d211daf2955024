"""Per-student financial statement: the single entry point every view calls.

Pipeline: discounts -> ledger -> payment allocation -> late fees -> status ->
aggregation. Nothing is cached; each call recomputes from the context.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from app.core.enums import MonthStatus

from .context import FinancialContext, StudentData
from .discounts import DiscountBreakdown, evaluate_discounts
from .late_fee import late_fee_for
from .ledger import build_ledger
from .money import ZERO, total
from .payments import allocate_payments
from .session import SessionMonth, session_months
from .status import classify_month, is_payable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MonthlyBreakdown:
    month: SessionMonth
    recurring_amount: Decimal
    annual_amount: Decimal
    late_fee: Decimal
    paid_amount: Decimal
    status: MonthStatus

    @property
    def key(self) -> str:
        return self.month.key

    @property
    def due_amount(self) -> Decimal:
        return self.recurring_amount + self.annual_amount

    @property
    def fee(self) -> Decimal:
        """Amount due for the month including its late fee."""
        return self.due_amount + self.late_fee

    @property
    def balance(self) -> Decimal:
        return max(ZERO, self.fee - self.paid_amount)

    @property
    def is_payable(self) -> bool:
        return is_payable(self.status)


@dataclass(frozen=True)
class StudentFinancials:
    qr_id: str
    fee_structure_found: bool
    monthly_breakdown: Tuple[MonthlyBreakdown, ...] = ()
    discounts: Optional[DiscountBreakdown] = None
    total_dues_to_date: Decimal = ZERO
    total_additional_fees: Decimal = ZERO
    total_waivers: Decimal = ZERO
    total_paid: Decimal = ZERO
    unapplied_payment: Decimal = ZERO
    outstanding_balance: Decimal = ZERO

    def month(self, key: str) -> Optional[MonthlyBreakdown]:
        for item in self.monthly_breakdown:
            if item.key == key:
                return item
        return None

    @classmethod
    def no_data(cls, qr_id: str) -> "StudentFinancials":
        """Returned when the student's class has no fee structure."""
        return cls(qr_id=qr_id, fee_structure_found=False)


def compute_student_financials(
    student: StudentData,
    context: FinancialContext,
    now: datetime,
) -> StudentFinancials:
    class_fees = context.fee_structure_for(student.class_name)
    if class_fees is None:
        logger.debug("No fee structure for student %s (class %s)", student.qr_id, student.class_name)
        return StudentFinancials.no_data(student.qr_id)

    discounts = evaluate_discounts(
        class_fees,
        context.fee_heads,
        context.discounts_for(student),
        transport_fee=context.transport_fee_for(student),
    )
    ledger = build_ledger(
        session_months(now),
        discounts.net_recurring_monthly,
        class_fees,
        context.fee_heads,
    )
    total_paid = context.total_paid_by(student.qr_id)
    ledger, unapplied = allocate_payments(ledger, total_paid, now)

    rule = context.late_fee_rule
    breakdown = []
    for entry in ledger:
        late_fee = late_fee_for(entry, rule, now)
        breakdown.append(
            MonthlyBreakdown(
                month=entry.month,
                recurring_amount=entry.recurring_amount,
                annual_amount=entry.annual_amount,
                late_fee=late_fee,
                paid_amount=entry.paid_amount,
                status=classify_month(entry.month, now, entry.paid_amount, entry.due_amount + late_fee),
            )
        )

    dues_to_date = total(m.fee for m in breakdown if m.month.has_started(now))
    additional = total(f.amount for f in context.additional_fees_for(student.qr_id))
    waivers = total(w.amount for w in context.waivers_for(student.qr_id))
    outstanding = max(ZERO, dues_to_date + additional - waivers - total_paid)

    return StudentFinancials(
        qr_id=student.qr_id,
        fee_structure_found=True,
        monthly_breakdown=tuple(breakdown),
        discounts=discounts,
        total_dues_to_date=dues_to_date,
        total_additional_fees=additional,
        total_waivers=waivers,
        total_paid=total_paid,
        unapplied_payment=unapplied,
        outstanding_balance=outstanding,
    )


def payable_total(financials: StudentFinancials, month_keys: Iterable[str]) -> Decimal:
    """Sum of balances of the selected months that can still be paid."""
    selected = set(month_keys)
    return total(
        m.balance for m in financials.monthly_breakdown if m.key in selected and m.is_payable
    )
