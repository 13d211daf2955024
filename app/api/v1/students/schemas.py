"""Student schemas: identity plus the details the fee engine reads."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class StudentCreate(BaseModel):
    qr_id: str = Field(..., min_length=1, max_length=64)
    name: str = Field(..., min_length=1, max_length=255)
    class_name: Optional[str] = Field(None, max_length=20)
    section: Optional[str] = Field(None, max_length=10)
    discount_category_ids: List[str] = Field(default_factory=list)
    transport_route_id: Optional[str] = None


class StudentTransportUpdate(BaseModel):
    transport_route_id: Optional[str] = Field(None, description="null removes the student from transport")


class StudentDiscountsUpdate(BaseModel):
    discount_category_ids: List[str] = Field(default_factory=list)


class DiscountAssignmentRequest(BaseModel):
    """Bulk change of one discount category, as done from the class-wise assignment screen."""

    assign: List[str] = Field(default_factory=list, description="Student QR ids to give the discount")
    unassign: List[str] = Field(default_factory=list, description="Student QR ids to take it from")


class DiscountAssignmentResponse(BaseModel):
    discount_category_id: str
    assigned: List[str]
    unassigned: List[str]


class StudentResponse(BaseModel):
    qr_id: str
    name: str
    class_name: Optional[str] = None
    section: Optional[str] = None
    discount_category_ids: List[str]
    transport_route_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime
