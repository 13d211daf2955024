"""Fee heads router."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import FeeType
from app.core.exceptions import ServiceError
from app.db.session import get_db

from .schemas import FeeHeadCreate, FeeHeadResponse, FeeHeadUpdate
from . import service

router = APIRouter(prefix="/api/v1/fee-heads", tags=["fee-heads"])


@router.post(
    "",
    response_model=FeeHeadResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_fee_head(
    payload: FeeHeadCreate,
    db: AsyncSession = Depends(get_db),
) -> FeeHeadResponse:
    try:
        return await service.create_fee_head(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("", response_model=List[FeeHeadResponse])
async def list_fee_heads(
    fee_type: Optional[FeeType] = Query(None),
    db: AsyncSession = Depends(get_db),
) -> List[FeeHeadResponse]:
    return await service.list_fee_heads(db, fee_type=fee_type)


@router.get("/{fee_head_id}", response_model=FeeHeadResponse)
async def get_fee_head(
    fee_head_id: str,
    db: AsyncSession = Depends(get_db),
) -> FeeHeadResponse:
    head = await service.get_fee_head(db, fee_head_id)
    if not head:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Fee head not found")
    return head


@router.patch("/{fee_head_id}", response_model=FeeHeadResponse)
async def update_fee_head(
    fee_head_id: str,
    payload: FeeHeadUpdate,
    db: AsyncSession = Depends(get_db),
) -> FeeHeadResponse:
    try:
        head = await service.update_fee_head(db, fee_head_id, payload)
        if not head:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Fee head not found",
            )
        return head
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/{fee_head_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_fee_head(
    fee_head_id: str,
    db: AsyncSession = Depends(get_db),
) -> None:
    try:
        deleted = await service.delete_fee_head(db, fee_head_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Fee head not found")
