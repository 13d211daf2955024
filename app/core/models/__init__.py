from app.core.models.fee_head import FeeHead
from app.core.models.class_fee_structure import ClassFeeStructure
from app.core.models.discount_category import DiscountCategory
from app.core.models.transport_route import TransportRoute
from app.core.models.late_fee_rule import LATE_FEE_RULE_ID, LateFeeRule
from app.core.models.student import Student, StudentDiscount
from app.core.models.fee_payment import FeePayment
from app.core.models.additional_fee import AdditionalFee
from app.core.models.fee_waiver import FeeWaiver
from app.core.models.fee_audit_log import FeeAuditLog

__all__ = [
    "FeeHead",
    "ClassFeeStructure",
    "DiscountCategory",
    "TransportRoute",
    "LATE_FEE_RULE_ID",
    "LateFeeRule",
    "Student",
    "StudentDiscount",
    "FeePayment",
    "AdditionalFee",
    "FeeWaiver",
    "FeeAuditLog",
]
