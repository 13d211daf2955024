from enum import Enum


class FeeType(str, Enum):
    MONTHLY_RECURRING = "Monthly Recurring"
    ANNUAL_ONE_TIME = "Annual One-Time"


class DiscountType(str, Enum):
    MONTHLY_TOTAL = "Monthly Total"
    HEAD_WISE = "Head-wise"


class DiscountCalculation(str, Enum):
    PERCENTAGE = "Percentage"
    FIXED = "Fixed"


class LateFeeRuleType(str, Enum):
    FIXED = "Fixed"
    DAILY = "Daily"


class PaymentMethod(str, Enum):
    CASH = "Cash"
    ONLINE = "Online"
    CHEQUE = "Cheque"


class MonthStatus(str, Enum):
    UPCOMING = "Upcoming"
    DUE = "Due"
    PARTIALLY_PAID = "Partially Paid"
    PAID = "Paid"


class AgingBucket(str, Enum):
    DAYS_0_30 = "0-30 Days"
    DAYS_31_60 = "31-60 Days"
    DAYS_61_90 = "61-90 Days"
    DAYS_90_PLUS = "90+ Days"
