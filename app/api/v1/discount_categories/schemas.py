"""Discount category schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from app.core.enums import DiscountCalculation, DiscountType


def check_discount_rule(
    type_: Optional[DiscountType],
    calculation: Optional[DiscountCalculation],
    value: Optional[Decimal],
    fee_head_id: Optional[str],
) -> None:
    if type_ == DiscountType.HEAD_WISE and not fee_head_id:
        raise ValueError("fee_head_id is required for Head-wise discounts")
    if calculation == DiscountCalculation.PERCENTAGE and value is not None and value > 100:
        raise ValueError("Percentage discounts cannot exceed 100")


class DiscountCategoryCreate(BaseModel):
    id: Optional[str] = Field(None, max_length=64, description="Stable id, e.g. sibling_discount; generated if omitted")
    name: str = Field(..., min_length=1, max_length=100)
    type: DiscountType
    calculation: DiscountCalculation
    value: Decimal = Field(..., ge=0)
    fee_head_id: Optional[str] = None

    @model_validator(mode="after")
    def validate_rule(self) -> "DiscountCategoryCreate":
        check_discount_rule(self.type, self.calculation, self.value, self.fee_head_id)
        return self


class DiscountCategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    type: Optional[DiscountType] = None
    calculation: Optional[DiscountCalculation] = None
    value: Optional[Decimal] = Field(None, ge=0)
    fee_head_id: Optional[str] = None


class DiscountCategoryResponse(BaseModel):
    id: str
    name: str
    type: DiscountType
    calculation: DiscountCalculation
    value: Decimal
    fee_head_id: Optional[str] = None
    fee_head_name: Optional[str] = None
    student_count: int = 0
    created_at: datetime
    updated_at: datetime
