"""Discount evaluation: head-wise deductions first, then monthly-total ones."""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable, List

from app.core.enums import DiscountCalculation, DiscountType

from .context import ClassFees, DiscountData, FeeHeadData
from .money import HUNDRED, ZERO

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiscountBreakdown:
    recurring_gross: Decimal
    head_discounts: Dict[str, Decimal] = field(default_factory=dict)
    monthly_headwise_discount: Decimal = ZERO
    monthly_total_discount: Decimal = ZERO
    transport_fee: Decimal = ZERO

    @property
    def sub_total(self) -> Decimal:
        """Recurring gross after head-wise discounts."""
        return self.recurring_gross - self.monthly_headwise_discount

    @property
    def total_monthly_discount(self) -> Decimal:
        return self.monthly_headwise_discount + self.monthly_total_discount

    @property
    def net_recurring_monthly(self) -> Decimal:
        return max(ZERO, self.sub_total - self.monthly_total_discount) + self.transport_fee


def discount_amount(category: DiscountData, base: Decimal) -> Decimal:
    """Raw deduction of one category against ``base`` (uncapped)."""
    if category.calculation == DiscountCalculation.PERCENTAGE:
        return base * category.value / HUNDRED
    return category.value


def evaluate_discounts(
    class_fees: ClassFees,
    fee_heads: Iterable[FeeHeadData],
    discounts: Iterable[DiscountData],
    transport_fee: Decimal = ZERO,
) -> DiscountBreakdown:
    """Net recurring monthly fee for a student holding ``discounts``.

    Annual one-time heads are not discounted; only recurring heads enter the
    calculation.
    """
    discounts = list(discounts)
    recurring: List[FeeHeadData] = [h for h in fee_heads if h.is_recurring]
    headwise = [d for d in discounts if d.type == DiscountType.HEAD_WISE]
    monthly_total = [d for d in discounts if d.type == DiscountType.MONTHLY_TOTAL]

    recurring_gross = sum((class_fees.amount_for(h.id) for h in recurring), ZERO)

    head_discounts: Dict[str, Decimal] = {}
    for head in recurring:
        fee_amount = class_fees.amount_for(head.id)
        raw = sum(
            (discount_amount(d, fee_amount) for d in headwise if d.fee_head_id == head.id),
            ZERO,
        )
        if raw:
            # A head can be discounted down to zero, never below
            head_discounts[head.id] = min(raw, fee_amount)

    monthly_headwise_discount = sum(head_discounts.values(), ZERO)
    sub_total = recurring_gross - monthly_headwise_discount
    monthly_total_discount = sum((discount_amount(d, sub_total) for d in monthly_total), ZERO)

    breakdown = DiscountBreakdown(
        recurring_gross=recurring_gross,
        head_discounts=head_discounts,
        monthly_headwise_discount=monthly_headwise_discount,
        monthly_total_discount=monthly_total_discount,
        transport_fee=transport_fee,
    )
    logger.debug(
        "Discounts for class %s: gross=%s headwise=%s total=%s net=%s",
        class_fees.class_name,
        recurring_gross,
        monthly_headwise_discount,
        monthly_total_discount,
        breakdown.net_recurring_monthly,
    )
    return breakdown
