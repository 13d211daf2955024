"""Unit tests for discount evaluation."""

from decimal import Decimal

from app.core.enums import DiscountCalculation, DiscountType
from app.core.fee_engine import DiscountData, discount_amount, evaluate_discounts

from tests.fee_data import CLASS_10_FEES, FEE_HEADS

SIBLING = DiscountData(
    id="sibling",
    name="Sibling Discount",
    type=DiscountType.HEAD_WISE,
    calculation=DiscountCalculation.PERCENTAGE,
    value=Decimal("10"),
    fee_head_id="tuition_fee",
)
STAFF_WARD = DiscountData(
    id="staff_ward",
    name="Staff Ward",
    type=DiscountType.MONTHLY_TOTAL,
    calculation=DiscountCalculation.PERCENTAGE,
    value=Decimal("10"),
)


def test_no_discounts_gives_recurring_gross() -> None:
    breakdown = evaluate_discounts(CLASS_10_FEES, FEE_HEADS, [])
    assert breakdown.recurring_gross == Decimal("5335")
    assert breakdown.head_discounts == {}
    assert breakdown.net_recurring_monthly == Decimal("5335")


def test_sibling_headwise_discount_on_tuition() -> None:
    breakdown = evaluate_discounts(CLASS_10_FEES, FEE_HEADS, [SIBLING])
    assert breakdown.head_discounts == {"tuition_fee": Decimal("500")}
    assert breakdown.sub_total == Decimal("4835")
    assert breakdown.monthly_total_discount == Decimal("0")
    assert breakdown.net_recurring_monthly == Decimal("4835")


def test_transport_fee_added_after_discounts() -> None:
    breakdown = evaluate_discounts(CLASS_10_FEES, FEE_HEADS, [SIBLING], transport_fee=Decimal("800"))
    assert breakdown.net_recurring_monthly == Decimal("5635")


def test_monthly_total_discount_applies_to_subtotal_after_headwise() -> None:
    breakdown = evaluate_discounts(CLASS_10_FEES, FEE_HEADS, [SIBLING, STAFF_WARD])
    assert breakdown.monthly_total_discount == Decimal("483.5")
    assert breakdown.total_monthly_discount == Decimal("983.5")
    assert breakdown.net_recurring_monthly == Decimal("4351.5")


def test_headwise_discount_capped_at_head_amount() -> None:
    huge = DiscountData(
        id="library_waiver",
        name="Library Waiver",
        type=DiscountType.HEAD_WISE,
        calculation=DiscountCalculation.FIXED,
        value=Decimal("6000"),
        fee_head_id="library_fee",
    )
    breakdown = evaluate_discounts(CLASS_10_FEES, FEE_HEADS, [huge])
    assert breakdown.head_discounts["library_fee"] == Decimal("125")
    assert breakdown.sub_total == Decimal("5210")


def test_stacked_headwise_discounts_capped_together() -> None:
    full = DiscountData(
        id="merit",
        name="Merit",
        type=DiscountType.HEAD_WISE,
        calculation=DiscountCalculation.PERCENTAGE,
        value=Decimal("100"),
        fee_head_id="tuition_fee",
    )
    breakdown = evaluate_discounts(CLASS_10_FEES, FEE_HEADS, [full, SIBLING])
    assert breakdown.head_discounts["tuition_fee"] == Decimal("5000")


def test_net_never_negative_before_transport() -> None:
    flat = DiscountData(
        id="scholarship",
        name="Scholarship",
        type=DiscountType.MONTHLY_TOTAL,
        calculation=DiscountCalculation.FIXED,
        value=Decimal("9999"),
    )
    breakdown = evaluate_discounts(CLASS_10_FEES, FEE_HEADS, [flat], transport_fee=Decimal("300"))
    assert breakdown.net_recurring_monthly == Decimal("300")


def test_annual_heads_are_not_discounted() -> None:
    on_annual = DiscountData(
        id="dev_waiver",
        name="Development Waiver",
        type=DiscountType.HEAD_WISE,
        calculation=DiscountCalculation.PERCENTAGE,
        value=Decimal("50"),
        fee_head_id="annual_dev_fee",
    )
    breakdown = evaluate_discounts(CLASS_10_FEES, FEE_HEADS, [on_annual])
    assert breakdown.head_discounts == {}
    assert breakdown.net_recurring_monthly == Decimal("5335")


def test_discount_amount() -> None:
    assert discount_amount(SIBLING, Decimal("5000")) == Decimal("500")
    fixed = DiscountData(
        id="f", name="F", type=DiscountType.MONTHLY_TOTAL, calculation=DiscountCalculation.FIXED, value=Decimal("250")
    )
    assert discount_amount(fixed, Decimal("10")) == Decimal("250")
