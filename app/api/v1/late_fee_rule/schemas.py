"""Late fee rule schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from app.core.enums import LateFeeRuleType


class LateFeeRuleUpdate(BaseModel):
    due_day_of_month: int = Field(..., ge=1, le=31)
    rule_type: LateFeeRuleType
    value: Decimal = Field(..., ge=0, description="Flat penalty (Fixed) or penalty per day late (Daily)")


class LateFeeRuleResponse(BaseModel):
    due_day_of_month: int
    rule_type: LateFeeRuleType
    value: Decimal
    is_default: bool = False
    updated_at: Optional[datetime] = None
