from app.core.fee_engine.aging import AgingResult, aging_bucket, classify_aging
from app.core.fee_engine.context import (
    AdditionalFeeData,
    ClassFees,
    DiscountData,
    FeeHeadData,
    FinancialContext,
    LateFeeRuleData,
    PaymentData,
    StudentData,
    TransportRouteData,
    WaiverData,
)
from app.core.fee_engine.discounts import DiscountBreakdown, discount_amount, evaluate_discounts
from app.core.fee_engine.financials import (
    MonthlyBreakdown,
    StudentFinancials,
    compute_student_financials,
    payable_total,
)
from app.core.fee_engine.late_fee import due_date_for, late_fee_for
from app.core.fee_engine.ledger import LedgerEntry, build_ledger
from app.core.fee_engine.payments import allocate_payments
from app.core.fee_engine.session import SessionMonth, session_months, session_start_year
from app.core.fee_engine.status import classify_month

__all__ = [
    "AdditionalFeeData",
    "AgingResult",
    "ClassFees",
    "DiscountBreakdown",
    "DiscountData",
    "FeeHeadData",
    "FinancialContext",
    "LateFeeRuleData",
    "LedgerEntry",
    "MonthlyBreakdown",
    "PaymentData",
    "SessionMonth",
    "StudentData",
    "StudentFinancials",
    "TransportRouteData",
    "WaiverData",
    "aging_bucket",
    "allocate_payments",
    "build_ledger",
    "classify_aging",
    "classify_month",
    "compute_student_financials",
    "discount_amount",
    "due_date_for",
    "evaluate_discounts",
    "late_fee_for",
    "payable_total",
    "session_months",
    "session_start_year",
]
