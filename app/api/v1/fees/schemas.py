"""Fees schemas: payments, additional fees, waivers and the computed financial statement."""

from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from app.core.enums import MonthStatus, PaymentMethod


# --- Payment ---
class PaymentCreate(BaseModel):
    id: Optional[str] = Field(
        None,
        max_length=64,
        description="Client-generated id; resubmitting the same id returns the recorded payment",
    )
    amount: Decimal = Field(..., gt=0)
    payment_method: PaymentMethod
    date: Optional[datetime] = None


class PaymentResponse(BaseModel):
    id: str
    qr_id: str
    student_name: str
    amount: Decimal
    payment_method: PaymentMethod
    date: datetime
    created_at: datetime

    class Config:
        from_attributes = True


# --- Additional fee ---
class AdditionalFeeCreate(BaseModel):
    description: str = Field(..., min_length=1, max_length=255)
    amount: Decimal = Field(..., gt=0)
    date_issued: Optional[datetime] = None


class AdditionalFeeResponse(BaseModel):
    id: str
    student_qr_id: str
    description: str
    amount: Decimal
    date_issued: datetime

    class Config:
        from_attributes = True


# --- Waiver ---
class FeeWaiverCreate(BaseModel):
    amount: Decimal = Field(..., gt=0)
    reason: str = Field(..., max_length=500)

    @field_validator("reason")
    @classmethod
    def reason_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("A reason is required for a fee waiver")
        return v.strip()


class FeeWaiverResponse(BaseModel):
    id: str
    student_qr_id: str
    amount: Decimal
    reason: str
    date: datetime

    class Config:
        from_attributes = True


# --- Financial statement ---
class MonthlyBreakdownItem(BaseModel):
    key: str
    year: int
    month: int = Field(..., description="0-indexed month, April = 3")
    month_name: str
    recurring_amount: Decimal
    annual_amount: Decimal
    due_amount: Decimal
    late_fee: Decimal
    fee: Decimal = Field(..., description="Due amount including late fee")
    paid_amount: Decimal
    balance: Decimal
    status: MonthStatus


class DiscountBreakdownResponse(BaseModel):
    recurring_gross: Decimal
    head_discounts: Dict[str, Decimal]
    monthly_headwise_discount: Decimal
    sub_total: Decimal
    monthly_total_discount: Decimal
    transport_fee: Decimal
    net_recurring_monthly: Decimal


class StudentFinancialsResponse(BaseModel):
    qr_id: str
    student_name: str
    class_name: Optional[str] = None
    as_of: datetime
    fee_structure_found: bool
    message: Optional[str] = None
    monthly_breakdown: List[MonthlyBreakdownItem]
    discounts: Optional[DiscountBreakdownResponse] = None
    total_dues_to_date: Decimal
    total_additional_fees: Decimal
    total_waivers: Decimal
    total_paid: Decimal
    unapplied_payment: Decimal
    outstanding_balance: Decimal


class PayableRequest(BaseModel):
    months: List[str] = Field(..., description="Month keys 'YYYY-M' (0-indexed month) selected for payment")
    as_of: Optional[datetime] = None


class PayableResponse(BaseModel):
    qr_id: str
    months: List[str] = Field(..., description="Selected months that are payable")
    amount: Decimal
    outstanding_balance: Decimal
