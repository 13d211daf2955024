"""Unit tests for the monthly ledger, payment allocation, late fees and month status."""

from datetime import date, datetime
from decimal import Decimal

from app.core.enums import LateFeeRuleType, MonthStatus
from app.core.fee_engine import (
    LateFeeRuleData,
    LedgerEntry,
    SessionMonth,
    allocate_payments,
    build_ledger,
    classify_month,
    due_date_for,
    late_fee_for,
    session_months,
)

from tests.fee_data import CLASS_10_FEES, FEE_HEADS, FIXED_100_ON_15, MAY_20

APRIL = SessionMonth(2024, 3)
MAY = SessionMonth(2024, 4)
JUNE = SessionMonth(2024, 5)


def _ledger():
    return build_ledger(session_months(MAY_20), Decimal("5335"), CLASS_10_FEES, FEE_HEADS)


# --- Ledger ---
def test_annual_head_added_in_its_due_month() -> None:
    ledger = _ledger()
    assert ledger[0].month == APRIL
    assert ledger[0].annual_amounts == {"annual_dev_fee": Decimal("2500")}
    assert ledger[0].due_amount == Decimal("7835")
    assert ledger[1].due_amount == Decimal("5335")
    assert all(e.annual_amount == Decimal("0") for e in ledger[1:])


def test_ledger_covers_whole_session() -> None:
    ledger = _ledger()
    assert len(ledger) == 12
    assert sum(e.due_amount for e in ledger) == Decimal("5335") * 12 + Decimal("2500")


# --- Allocation ---
def test_partial_payment_fills_oldest_month() -> None:
    ledger, unapplied = allocate_payments(_ledger(), Decimal("5000"), MAY_20)
    assert ledger[0].paid_amount == Decimal("5000")
    assert ledger[1].paid_amount == Decimal("0")
    assert unapplied == Decimal("0")


def test_excess_payment_left_unapplied_and_future_untouched() -> None:
    ledger, unapplied = allocate_payments(_ledger(), Decimal("20000"), MAY_20)
    assert ledger[0].paid_amount == Decimal("7835")
    assert ledger[1].paid_amount == Decimal("5335")
    assert all(e.paid_amount == Decimal("0") for e in ledger[2:])
    assert unapplied == Decimal("6830")


def test_allocation_conserves_total_paid() -> None:
    for paid in (Decimal("0"), Decimal("1"), Decimal("7835"), Decimal("9000.50"), Decimal("13170"), Decimal("50000")):
        ledger, unapplied = allocate_payments(_ledger(), paid, MAY_20)
        applied = sum(e.paid_amount for e in ledger)
        assert applied + unapplied == paid
        assert applied <= paid
        past_due = sum(e.due_amount for e in ledger if e.month.has_started(MAY_20))
        if paid <= past_due:
            assert applied == paid


# --- Late fee ---
def test_fixed_late_fee_after_due_date() -> None:
    entry = LedgerEntry(month=APRIL, recurring_amount=Decimal("7835"), paid_amount=Decimal("5000"))
    assert late_fee_for(entry, FIXED_100_ON_15, MAY_20) == Decimal("100")


def test_no_late_fee_before_due_date_or_when_paid() -> None:
    entry = LedgerEntry(month=MAY, recurring_amount=Decimal("5335"))
    assert late_fee_for(entry, FIXED_100_ON_15, datetime(2024, 5, 10)) == Decimal("0")
    paid = LedgerEntry(month=MAY, recurring_amount=Decimal("5335"), paid_amount=Decimal("5335"))
    assert late_fee_for(paid, FIXED_100_ON_15, MAY_20) == Decimal("0")


def test_no_late_fee_for_future_month() -> None:
    entry = LedgerEntry(month=JUNE, recurring_amount=Decimal("5335"))
    assert late_fee_for(entry, FIXED_100_ON_15, MAY_20) == Decimal("0")


def test_daily_late_fee_counts_whole_days() -> None:
    rule = LateFeeRuleData(due_day_of_month=15, rule_type=LateFeeRuleType.DAILY, value=Decimal("10"))
    entry = LedgerEntry(month=MAY, recurring_amount=Decimal("5335"))
    assert late_fee_for(entry, rule, MAY_20) == Decimal("50")
    # Later the same day as the due date: under a whole day late
    assert late_fee_for(entry, rule, datetime(2024, 5, 15, 18, 0)) == Decimal("0")


def test_due_day_clamped_to_month_end() -> None:
    rule = LateFeeRuleData(due_day_of_month=31, rule_type=LateFeeRuleType.FIXED, value=Decimal("100"))
    assert due_date_for(SessionMonth(2025, 1), rule).date() == date(2025, 2, 28)
    assert due_date_for(APRIL, rule).date() == date(2024, 4, 30)
    assert due_date_for(MAY, rule).date() == date(2024, 5, 31)


# --- Status ---
def test_future_month_is_upcoming_regardless_of_payment() -> None:
    assert classify_month(JUNE, MAY_20, Decimal("9999"), Decimal("5335")) == MonthStatus.UPCOMING


def test_balance_within_a_paisa_is_paid() -> None:
    assert classify_month(MAY, MAY_20, Decimal("5334.995"), Decimal("5335")) == MonthStatus.PAID
    assert classify_month(MAY, MAY_20, Decimal("6000"), Decimal("5335")) == MonthStatus.PAID


def test_partial_and_due() -> None:
    assert classify_month(MAY, MAY_20, Decimal("1"), Decimal("5335")) == MonthStatus.PARTIALLY_PAID
    assert classify_month(MAY, MAY_20, Decimal("0"), Decimal("5335")) == MonthStatus.DUE
