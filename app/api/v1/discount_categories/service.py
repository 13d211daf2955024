"""Discount category service layer."""

import logging
from typing import List, Optional

from fastapi import status
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import DiscountCalculation, DiscountType, FeeType
from app.core.exceptions import ReferenceInUseError, ServiceError
from app.core.fee_audit_service import log_fee_audit
from app.core.fee_engine.money import to_decimal
from app.core.models import DiscountCategory, FeeHead, StudentDiscount

from .schemas import DiscountCategoryCreate, DiscountCategoryResponse, DiscountCategoryUpdate, check_discount_rule

logger = logging.getLogger(__name__)


def _snapshot(dc: DiscountCategory) -> dict:
    return {
        "name": dc.name,
        "type": dc.type,
        "calculation": dc.calculation,
        "value": str(dc.value),
        "fee_head_id": dc.fee_head_id,
    }


async def _student_count(db: AsyncSession, discount_category_id: str) -> int:
    return (
        await db.execute(
            select(func.count())
            .select_from(StudentDiscount)
            .where(StudentDiscount.discount_category_id == discount_category_id)
        )
    ).scalar() or 0


async def _to_response(db: AsyncSession, dc: DiscountCategory) -> DiscountCategoryResponse:
    head = await db.get(FeeHead, dc.fee_head_id) if dc.fee_head_id else None
    return DiscountCategoryResponse(
        id=dc.id,
        name=dc.name,
        type=DiscountType(dc.type),
        calculation=DiscountCalculation(dc.calculation),
        value=to_decimal(dc.value),
        fee_head_id=dc.fee_head_id,
        fee_head_name=head.name if head else None,
        student_count=await _student_count(db, dc.id),
        created_at=dc.created_at,
        updated_at=dc.updated_at,
    )


async def _validate_fee_head(db: AsyncSession, type_: str, fee_head_id: Optional[str]) -> Optional[str]:
    if type_ != DiscountType.HEAD_WISE.value:
        return None
    head = await db.get(FeeHead, fee_head_id) if fee_head_id else None
    if not head:
        raise ServiceError("Invalid fee head", status.HTTP_400_BAD_REQUEST)
    if head.fee_type != FeeType.MONTHLY_RECURRING.value:
        # Annual heads are never discounted by the ledger
        raise ServiceError(
            "Head-wise discounts can only target Monthly Recurring fee heads",
            status.HTTP_400_BAD_REQUEST,
        )
    return head.id


async def create_discount_category(
    db: AsyncSession,
    payload: DiscountCategoryCreate,
) -> DiscountCategoryResponse:
    fee_head_id = await _validate_fee_head(db, payload.type.value, payload.fee_head_id)
    dc = DiscountCategory(
        name=payload.name.strip(),
        type=payload.type.value,
        calculation=payload.calculation.value,
        value=payload.value,
        fee_head_id=fee_head_id,
    )
    if payload.id:
        dc.id = payload.id.strip()
    db.add(dc)
    try:
        await db.flush()
        await log_fee_audit(db, "discount_categories", dc.id, "CREATE", None, _snapshot(dc))
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ServiceError(f"Discount category with id '{payload.id}' already exists", status.HTTP_409_CONFLICT)
    await db.refresh(dc)
    logger.info("Created discount category %s (%s, %s %s)", dc.id, dc.type, dc.calculation, dc.value)
    return await _to_response(db, dc)


async def list_discount_categories(db: AsyncSession) -> List[DiscountCategoryResponse]:
    rows = (await db.execute(select(DiscountCategory).order_by(DiscountCategory.name))).scalars().all()
    return [await _to_response(db, dc) for dc in rows]


async def get_discount_category(db: AsyncSession, discount_category_id: str) -> Optional[DiscountCategoryResponse]:
    dc = await db.get(DiscountCategory, discount_category_id)
    return await _to_response(db, dc) if dc else None


async def update_discount_category(
    db: AsyncSession,
    discount_category_id: str,
    payload: DiscountCategoryUpdate,
) -> Optional[DiscountCategoryResponse]:
    dc = await db.get(DiscountCategory, discount_category_id)
    if not dc:
        return None
    old = _snapshot(dc)
    data = payload.model_dump(exclude_unset=True)
    type_ = DiscountType(data.get("type") or dc.type)
    calculation = DiscountCalculation(data.get("calculation") or dc.calculation)
    value = data["value"] if data.get("value") is not None else to_decimal(dc.value)
    fee_head_id = data["fee_head_id"] if "fee_head_id" in data else dc.fee_head_id
    try:
        check_discount_rule(type_, calculation, value, fee_head_id)
    except ValueError as e:
        raise ServiceError(str(e), status.HTTP_400_BAD_REQUEST)
    fee_head_id = await _validate_fee_head(db, type_.value, fee_head_id)

    if data.get("name") is not None:
        dc.name = data["name"].strip()
    dc.type = type_.value
    dc.calculation = calculation.value
    dc.value = value
    dc.fee_head_id = fee_head_id
    await log_fee_audit(db, "discount_categories", dc.id, "UPDATE", old, _snapshot(dc))
    await db.commit()
    await db.refresh(dc)
    logger.info("Updated discount category %s", dc.id)
    return await _to_response(db, dc)


async def delete_discount_category(db: AsyncSession, discount_category_id: str) -> bool:
    """Delete a discount category. Blocked while any student holds it."""
    dc = await db.get(DiscountCategory, discount_category_id)
    if not dc:
        return False
    holders = await _student_count(db, discount_category_id)
    if holders:
        logger.warning("Blocked deleting discount %s: held by %d students", discount_category_id, holders)
        raise ReferenceInUseError(
            f"Cannot delete discount category. It is assigned to {holders} student(s)"
        )
    await log_fee_audit(db, "discount_categories", dc.id, "DELETE", _snapshot(dc), None)
    await db.delete(dc)
    await db.commit()
    logger.info("Deleted discount category %s", discount_category_id)
    return True
