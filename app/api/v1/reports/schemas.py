from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel

from app.core.enums import AgingBucket, DiscountCalculation, DiscountType, FeeType, PaymentMethod


class DuesRowResponse(BaseModel):
    qr_id: str
    name: str
    class_name: Optional[str] = None
    section: Optional[str] = None
    outstanding_balance: Decimal


class DuesReportResponse(BaseModel):
    as_of: datetime
    class_name: Optional[str] = None
    total_outstanding: Decimal
    rows: List[DuesRowResponse]


class DefaulterRowResponse(BaseModel):
    qr_id: str
    name: str
    class_name: Optional[str] = None
    section: Optional[str] = None
    outstanding_balance: Decimal
    first_due_month: Optional[str] = None
    days_overdue: int
    bucket: AgingBucket


class DefaultersReportResponse(BaseModel):
    as_of: datetime
    bucket: Optional[AgingBucket] = None
    rows: List[DefaulterRowResponse]


class HeadwiseCollectionRow(BaseModel):
    fee_head_id: str
    fee_head_name: str
    fee_type: FeeType
    amount: Decimal


class HeadwiseCollectionResponse(BaseModel):
    start_date: date
    end_date: date
    total: Decimal
    rows: List[HeadwiseCollectionRow]


class DiscountSummaryRowResponse(BaseModel):
    discount_category_id: str
    name: str
    type: DiscountType
    calculation: DiscountCalculation
    value: Decimal
    student_count: int
    monthly_value: Decimal
    total_session_value: Decimal


class DayBookEntry(BaseModel):
    id: str
    qr_id: str
    student_name: str
    amount: Decimal
    payment_method: PaymentMethod
    date: datetime


class DayBookResponse(BaseModel):
    day: date
    total: Decimal
    entries: List[DayBookEntry]
