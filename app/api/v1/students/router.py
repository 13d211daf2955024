"""Students router: registry and fee details (discounts, transport)."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ServiceError
from app.db.session import get_db

from .schemas import (
    DiscountAssignmentRequest,
    DiscountAssignmentResponse,
    StudentCreate,
    StudentDiscountsUpdate,
    StudentResponse,
    StudentTransportUpdate,
)
from . import service

router = APIRouter(prefix="/api/v1/students", tags=["students"])


@router.post(
    "",
    response_model=StudentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_student(
    payload: StudentCreate,
    db: AsyncSession = Depends(get_db),
) -> StudentResponse:
    try:
        return await service.create_student(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("", response_model=List[StudentResponse])
async def list_students(
    class_name: Optional[str] = Query(None),
    search: Optional[str] = Query(None, description="Match on name or QR id"),
    db: AsyncSession = Depends(get_db),
) -> List[StudentResponse]:
    return await service.list_students(db, class_name=class_name, search=search)


@router.post(
    "/discount-assignments/{discount_category_id}",
    response_model=DiscountAssignmentResponse,
)
async def assign_discount(
    discount_category_id: str,
    payload: DiscountAssignmentRequest,
    db: AsyncSession = Depends(get_db),
) -> DiscountAssignmentResponse:
    try:
        return await service.assign_discount(db, discount_category_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/{qr_id}", response_model=StudentResponse)
async def get_student(
    qr_id: str,
    db: AsyncSession = Depends(get_db),
) -> StudentResponse:
    student = await service.get_student(db, qr_id)
    if not student:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found")
    return student


@router.put("/{qr_id}/transport-route", response_model=StudentResponse)
async def set_transport_route(
    qr_id: str,
    payload: StudentTransportUpdate,
    db: AsyncSession = Depends(get_db),
) -> StudentResponse:
    try:
        return await service.set_transport_route(db, qr_id, payload.transport_route_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put("/{qr_id}/discounts", response_model=StudentResponse)
async def set_student_discounts(
    qr_id: str,
    payload: StudentDiscountsUpdate,
    db: AsyncSession = Depends(get_db),
) -> StudentResponse:
    try:
        return await service.set_student_discounts(db, qr_id, payload.discount_category_ids)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
