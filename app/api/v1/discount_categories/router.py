"""Discount categories router."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ServiceError
from app.db.session import get_db

from .schemas import DiscountCategoryCreate, DiscountCategoryResponse, DiscountCategoryUpdate
from . import service

router = APIRouter(prefix="/api/v1/discount-categories", tags=["discount-categories"])


@router.post(
    "",
    response_model=DiscountCategoryResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_discount_category(
    payload: DiscountCategoryCreate,
    db: AsyncSession = Depends(get_db),
) -> DiscountCategoryResponse:
    try:
        return await service.create_discount_category(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("", response_model=List[DiscountCategoryResponse])
async def list_discount_categories(
    db: AsyncSession = Depends(get_db),
) -> List[DiscountCategoryResponse]:
    return await service.list_discount_categories(db)


@router.get("/{discount_category_id}", response_model=DiscountCategoryResponse)
async def get_discount_category(
    discount_category_id: str,
    db: AsyncSession = Depends(get_db),
) -> DiscountCategoryResponse:
    category = await service.get_discount_category(db, discount_category_id)
    if not category:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Discount category not found")
    return category


@router.patch("/{discount_category_id}", response_model=DiscountCategoryResponse)
async def update_discount_category(
    discount_category_id: str,
    payload: DiscountCategoryUpdate,
    db: AsyncSession = Depends(get_db),
) -> DiscountCategoryResponse:
    try:
        category = await service.update_discount_category(db, discount_category_id, payload)
        if not category:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Discount category not found",
            )
        return category
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/{discount_category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_discount_category(
    discount_category_id: str,
    db: AsyncSession = Depends(get_db),
) -> None:
    try:
        deleted = await service.delete_discount_category(db, discount_category_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Discount category not found")
