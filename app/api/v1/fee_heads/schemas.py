"""Fee head schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from app.core.enums import FeeType


class FeeHeadCreate(BaseModel):
    id: Optional[str] = Field(None, max_length=64, description="Stable id, e.g. tuition_fee; generated if omitted")
    name: str = Field(..., min_length=1, max_length=100)
    fee_type: FeeType
    due_month: Optional[int] = Field(None, ge=1, le=12, description="1-12, Annual One-Time heads only")

    @model_validator(mode="after")
    def validate_due_month(self) -> "FeeHeadCreate":
        if self.fee_type == FeeType.ANNUAL_ONE_TIME and self.due_month is None:
            raise ValueError("due_month is required for Annual One-Time fee heads")
        if self.fee_type == FeeType.MONTHLY_RECURRING and self.due_month is not None:
            raise ValueError("due_month applies only to Annual One-Time fee heads")
        return self


class FeeHeadUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    fee_type: Optional[FeeType] = None
    due_month: Optional[int] = Field(None, ge=1, le=12)


class FeeHeadResponse(BaseModel):
    id: str
    name: str
    fee_type: FeeType
    due_month: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
