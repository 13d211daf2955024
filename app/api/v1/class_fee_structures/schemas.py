"""Class fee structure schemas."""

from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


class ClassFeeStructureUpsert(BaseModel):
    fees: Dict[str, Decimal] = Field(..., description="fee_head_id -> gross amount")

    @field_validator("fees")
    @classmethod
    def non_negative(cls, v: Dict[str, Decimal]) -> Dict[str, Decimal]:
        for head_id, amount in v.items():
            if amount < 0:
                raise ValueError(f"Amount for '{head_id}' cannot be negative")
        return v


class ClassFeeStructureItem(BaseModel):
    """Fee head row inside a class fee structure."""

    fee_head_id: str
    fee_head_name: str
    fee_type: str
    due_month: Optional[int] = None
    amount: Decimal


class ClassFeeStructureResponse(BaseModel):
    class_name: str
    fees: Dict[str, Decimal]
    items: List[ClassFeeStructureItem]
    recurring_monthly_total: Decimal
    annual_total: Decimal
