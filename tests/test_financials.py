"""Unit tests for the per-student financial statement."""

from dataclasses import replace
from datetime import datetime
from decimal import Decimal

from app.core.enums import DiscountCalculation, DiscountType, MonthStatus
from app.core.fee_engine import (
    AdditionalFeeData,
    DiscountData,
    PaymentData,
    StudentData,
    TransportRouteData,
    WaiverData,
    compute_student_financials,
    payable_total,
)
from app.core.fee_engine.context import NO_LATE_FEE

from tests.fee_data import MAY_20, class_10_context

STUDENT = StudentData(qr_id="QR-001", name="Asha Verma", class_name="10", section="A")
APRIL_PAYMENT = PaymentData(id="p1", qr_id="QR-001", amount=Decimal("5000"), date=datetime(2024, 4, 10, 11, 0))


def _context(**changes):
    changes.setdefault("payments", (APRIL_PAYMENT,))
    return replace(class_10_context(), **changes)


def test_partial_april_payment_with_fixed_late_fee() -> None:
    financials = compute_student_financials(STUDENT, _context(), MAY_20)
    assert financials.fee_structure_found

    april = financials.month("2024-3")
    assert april.due_amount == Decimal("7835")
    assert april.late_fee == Decimal("100")
    assert april.paid_amount == Decimal("5000")
    assert april.balance == Decimal("2935")
    assert april.status == MonthStatus.PARTIALLY_PAID

    may = financials.month("2024-4")
    assert may.fee == Decimal("5435")
    assert may.status == MonthStatus.DUE

    assert financials.month("2024-5").status == MonthStatus.UPCOMING
    assert financials.total_dues_to_date == Decimal("13370")
    assert financials.total_paid == Decimal("5000")
    assert financials.outstanding_balance == Decimal("8370")


def test_outstanding_without_late_fee() -> None:
    financials = compute_student_financials(STUDENT, _context(late_fee_rule=NO_LATE_FEE), MAY_20)
    assert financials.month("2024-3").balance == Decimal("2835")
    assert financials.month("2024-4").fee == Decimal("5335")
    assert financials.outstanding_balance == Decimal("8170")


def test_sibling_discount_and_transport_flow_into_every_month() -> None:
    sibling = DiscountData(
        id="sibling",
        name="Sibling Discount",
        type=DiscountType.HEAD_WISE,
        calculation=DiscountCalculation.PERCENTAGE,
        value=Decimal("10"),
        fee_head_id="tuition_fee",
    )
    route = TransportRouteData(id="route_a", name="Route A", monthly_fee=Decimal("800"))
    student = replace(STUDENT, discount_category_ids=("sibling",), transport_route_id="route_a")
    context = _context(discount_categories=(sibling,), transport_routes=(route,), payments=())

    financials = compute_student_financials(student, context, MAY_20)
    assert financials.discounts.sub_total == Decimal("4835")
    assert financials.discounts.net_recurring_monthly == Decimal("5635")
    assert financials.month("2024-3").due_amount == Decimal("8135")
    assert financials.month("2024-6").recurring_amount == Decimal("5635")


def test_additional_fees_and_waivers_adjust_outstanding() -> None:
    context = _context(
        additional_fees=(
            AdditionalFeeData(id="a1", student_qr_id="QR-001", amount=Decimal("500"), date_issued=MAY_20),
            AdditionalFeeData(id="a2", student_qr_id="QR-999", amount=Decimal("900"), date_issued=MAY_20),
        ),
        waivers=(WaiverData(id="w1", student_qr_id="QR-001", amount=Decimal("300"), date=MAY_20, reason="Hardship"),),
    )
    financials = compute_student_financials(STUDENT, context, MAY_20)
    assert financials.total_additional_fees == Decimal("500")
    assert financials.total_waivers == Decimal("300")
    assert financials.outstanding_balance == Decimal("8570")


def test_overpayment_never_makes_outstanding_negative() -> None:
    big = PaymentData(id="p2", qr_id="QR-001", amount=Decimal("20000"), date=datetime(2024, 4, 2))
    context = _context(
        payments=(big,),
        waivers=(WaiverData(id="w1", student_qr_id="QR-001", amount=Decimal("1000"), date=MAY_20),),
    )
    financials = compute_student_financials(STUDENT, context, MAY_20)
    assert financials.outstanding_balance == Decimal("0")
    assert financials.unapplied_payment == Decimal("6830")
    assert all(m.late_fee == Decimal("0") for m in financials.monthly_breakdown)
    assert all(m.balance >= Decimal("0") for m in financials.monthly_breakdown)


def test_missing_fee_structure_returns_sentinel() -> None:
    for student in (replace(STUDENT, class_name="9"), replace(STUDENT, class_name=None)):
        financials = compute_student_financials(student, _context(), MAY_20)
        assert not financials.fee_structure_found
        assert financials.monthly_breakdown == ()
        assert financials.outstanding_balance == Decimal("0")
        assert financials.discounts is None


def test_recomputation_is_idempotent() -> None:
    context = _context()
    assert compute_student_financials(STUDENT, context, MAY_20) == compute_student_financials(
        STUDENT, context, MAY_20
    )


def test_late_in_session_counts_all_started_months() -> None:
    financials = compute_student_financials(STUDENT, _context(late_fee_rule=NO_LATE_FEE), datetime(2025, 2, 5))
    started = [m for m in financials.monthly_breakdown if m.status != MonthStatus.UPCOMING]
    assert len(started) == 11
    assert financials.total_dues_to_date == Decimal("5335") * 11 + Decimal("2500")


def test_payable_total_ignores_upcoming_and_paid_months() -> None:
    financials = compute_student_financials(STUDENT, _context(), MAY_20)
    assert payable_total(financials, ["2024-3", "2024-4", "2024-5"]) == Decimal("8370")
    assert payable_total(financials, ["2024-5"]) == Decimal("0")

    settled = PaymentData(id="p2", qr_id="QR-001", amount=Decimal("2835"), date=datetime(2024, 5, 1))
    financials = compute_student_financials(
        STUDENT, _context(payments=(APRIL_PAYMENT, settled)), MAY_20
    )
    assert financials.month("2024-3").status == MonthStatus.PAID
    assert payable_total(financials, ["2024-3", "2024-4"]) == Decimal("5435")
