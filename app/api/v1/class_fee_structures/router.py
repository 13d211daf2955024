"""Class fee structures router."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ServiceError
from app.db.session import get_db

from .schemas import ClassFeeStructureResponse, ClassFeeStructureUpsert
from . import service

router = APIRouter(prefix="/api/v1/class-fee-structures", tags=["class-fee-structures"])


@router.put("/{class_name}", response_model=ClassFeeStructureResponse)
async def upsert_class_fee_structure(
    class_name: str,
    payload: ClassFeeStructureUpsert,
    db: AsyncSession = Depends(get_db),
) -> ClassFeeStructureResponse:
    try:
        return await service.upsert_class_fee_structure(db, class_name, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("", response_model=List[ClassFeeStructureResponse])
async def list_class_fee_structures(
    db: AsyncSession = Depends(get_db),
) -> List[ClassFeeStructureResponse]:
    return await service.list_class_fee_structures(db)


@router.get("/{class_name}", response_model=ClassFeeStructureResponse)
async def get_class_fee_structure(
    class_name: str,
    db: AsyncSession = Depends(get_db),
) -> ClassFeeStructureResponse:
    cfs = await service.get_class_fee_structure(db, class_name)
    if not cfs:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Fee structure not found")
    return cfs


@router.delete("/{class_name}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_class_fee_structure(
    class_name: str,
    db: AsyncSession = Depends(get_db),
) -> None:
    try:
        deleted = await service.delete_class_fee_structure(db, class_name)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Fee structure not found")
