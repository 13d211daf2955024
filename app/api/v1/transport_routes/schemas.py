"""Transport route schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class TransportRouteCreate(BaseModel):
    id: Optional[str] = Field(None, max_length=64)
    name: str = Field(..., min_length=1, max_length=100)
    monthly_fee: Decimal = Field(..., ge=0)


class TransportRouteUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    monthly_fee: Optional[Decimal] = Field(None, ge=0)


class TransportRouteResponse(BaseModel):
    id: str
    name: str
    monthly_fee: Decimal
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
