"""Fees router: payments, additional fees, waivers and the student financial statement."""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ServiceError
from app.db.session import get_db

from .schemas import (
    AdditionalFeeCreate,
    AdditionalFeeResponse,
    FeeWaiverCreate,
    FeeWaiverResponse,
    PayableRequest,
    PayableResponse,
    PaymentCreate,
    PaymentResponse,
    StudentFinancialsResponse,
)
from . import service

router = APIRouter(prefix="/api/v1/fees", tags=["fees"])


# --- Payment ---
@router.post(
    "/payments/{qr_id}",
    response_model=PaymentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def record_payment(
    qr_id: str,
    payload: PaymentCreate,
    db: AsyncSession = Depends(get_db),
) -> PaymentResponse:
    try:
        return await service.record_payment(db, qr_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/payments/{qr_id}", response_model=List[PaymentResponse])
async def list_payments(
    qr_id: str,
    db: AsyncSession = Depends(get_db),
) -> List[PaymentResponse]:
    try:
        return await service.list_payments(db, qr_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


# --- Additional fee ---
@router.post(
    "/additional/{qr_id}",
    response_model=AdditionalFeeResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_additional_fee(
    qr_id: str,
    payload: AdditionalFeeCreate,
    db: AsyncSession = Depends(get_db),
) -> AdditionalFeeResponse:
    try:
        return await service.add_additional_fee(db, qr_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/additional/{qr_id}", response_model=List[AdditionalFeeResponse])
async def list_additional_fees(
    qr_id: str,
    db: AsyncSession = Depends(get_db),
) -> List[AdditionalFeeResponse]:
    try:
        return await service.list_additional_fees(db, qr_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


# --- Waiver ---
@router.post(
    "/waivers/{qr_id}",
    response_model=FeeWaiverResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_waiver(
    qr_id: str,
    payload: FeeWaiverCreate,
    db: AsyncSession = Depends(get_db),
) -> FeeWaiverResponse:
    try:
        return await service.add_waiver(db, qr_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/waivers/{qr_id}", response_model=List[FeeWaiverResponse])
async def list_waivers(
    qr_id: str,
    db: AsyncSession = Depends(get_db),
) -> List[FeeWaiverResponse]:
    try:
        return await service.list_waivers(db, qr_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


# --- Financial statement ---
@router.get("/financials/{qr_id}", response_model=StudentFinancialsResponse)
async def get_student_financials(
    qr_id: str,
    as_of: Optional[datetime] = Query(None, description="Point in time to compute at; defaults to now"),
    db: AsyncSession = Depends(get_db),
) -> StudentFinancialsResponse:
    try:
        return await service.get_student_financials(db, qr_id, as_of=as_of)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/financials/{qr_id}/payable", response_model=PayableResponse)
async def get_payable_amount(
    qr_id: str,
    payload: PayableRequest,
    db: AsyncSession = Depends(get_db),
) -> PayableResponse:
    try:
        return await service.get_payable_amount(db, qr_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
