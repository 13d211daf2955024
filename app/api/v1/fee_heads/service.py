"""Fee head service layer."""

import logging
from typing import List, Optional

from fastapi import status
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import DiscountType, FeeType
from app.core.exceptions import ReferenceInUseError, ServiceError
from app.core.fee_audit_service import log_fee_audit
from app.core.models import ClassFeeStructure, DiscountCategory, FeeHead

from .schemas import FeeHeadCreate, FeeHeadResponse, FeeHeadUpdate

logger = logging.getLogger(__name__)


def _to_response(head: FeeHead) -> FeeHeadResponse:
    return FeeHeadResponse(
        id=head.id,
        name=head.name,
        fee_type=FeeType(head.fee_type),
        due_month=head.due_month,
        created_at=head.created_at,
        updated_at=head.updated_at,
    )


def _snapshot(head: FeeHead) -> dict:
    return {"name": head.name, "fee_type": head.fee_type, "due_month": head.due_month}


async def create_fee_head(db: AsyncSession, payload: FeeHeadCreate) -> FeeHeadResponse:
    name = payload.name.strip()
    existing = await db.execute(select(FeeHead).where(FeeHead.name == name))
    if existing.scalar_one_or_none():
        raise ServiceError(f"Fee head '{name}' already exists", status.HTTP_409_CONFLICT)
    head = FeeHead(
        name=name,
        fee_type=payload.fee_type.value,
        due_month=payload.due_month,
    )
    if payload.id:
        head.id = payload.id.strip()
    db.add(head)
    try:
        await db.flush()
        await log_fee_audit(db, "fee_heads", head.id, "CREATE", None, _snapshot(head))
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ServiceError(f"Fee head with id '{payload.id}' already exists", status.HTTP_409_CONFLICT)
    await db.refresh(head)
    logger.info("Created fee head %s (%s)", head.id, head.fee_type)
    return _to_response(head)


async def list_fee_heads(db: AsyncSession, fee_type: Optional[FeeType] = None) -> List[FeeHeadResponse]:
    stmt = select(FeeHead)
    if fee_type is not None:
        stmt = stmt.where(FeeHead.fee_type == fee_type.value)
    stmt = stmt.order_by(FeeHead.created_at, FeeHead.name)
    result = await db.execute(stmt)
    return [_to_response(h) for h in result.scalars().all()]


async def get_fee_head(db: AsyncSession, fee_head_id: str) -> Optional[FeeHeadResponse]:
    head = await db.get(FeeHead, fee_head_id)
    return _to_response(head) if head else None


async def _headwise_discount_names(db: AsyncSession, fee_head_id: str) -> List[str]:
    result = await db.execute(
        select(DiscountCategory.name).where(
            DiscountCategory.type == DiscountType.HEAD_WISE.value,
            DiscountCategory.fee_head_id == fee_head_id,
        )
    )
    return list(result.scalars().all())


async def update_fee_head(
    db: AsyncSession,
    fee_head_id: str,
    payload: FeeHeadUpdate,
) -> Optional[FeeHeadResponse]:
    head = await db.get(FeeHead, fee_head_id)
    if not head:
        return None
    old = _snapshot(head)
    data = payload.model_dump(exclude_unset=True)
    if "name" in data and data["name"] is not None:
        head.name = data["name"].strip()
    if "fee_type" in data and data["fee_type"] is not None:
        head.fee_type = FeeType(data["fee_type"]).value
    if "due_month" in data:
        head.due_month = data["due_month"]
    if head.fee_type == FeeType.MONTHLY_RECURRING.value:
        head.due_month = None
    elif head.due_month is None:
        await db.rollback()
        raise ServiceError(
            "due_month is required for Annual One-Time fee heads",
            status.HTTP_400_BAD_REQUEST,
        )
    if old["fee_type"] == FeeType.MONTHLY_RECURRING.value and head.fee_type != old["fee_type"]:
        in_use = await _headwise_discount_names(db, fee_head_id)
        if in_use:
            await db.rollback()
            logger.warning("Blocked fee type change on %s: used by discounts %s", fee_head_id, in_use)
            raise ReferenceInUseError(
                f"Cannot change fee type. Fee head is used by head-wise discount categories: {', '.join(in_use)}"
            )
    await log_fee_audit(db, "fee_heads", head.id, "UPDATE", old, _snapshot(head))
    await db.commit()
    await db.refresh(head)
    return _to_response(head)


async def delete_fee_head(db: AsyncSession, fee_head_id: str) -> bool:
    """Delete a fee head and its class amounts. Blocked while a head-wise discount targets it."""
    head = await db.get(FeeHead, fee_head_id)
    if not head:
        return False
    in_use = await _headwise_discount_names(db, fee_head_id)
    if in_use:
        logger.warning("Blocked deleting fee head %s: used by discounts %s", fee_head_id, in_use)
        raise ReferenceInUseError(
            f"Cannot delete fee head. It is used by discount categories: {', '.join(in_use)}"
        )
    await db.execute(delete(ClassFeeStructure).where(ClassFeeStructure.fee_head_id == fee_head_id))
    await log_fee_audit(db, "fee_heads", head.id, "DELETE", _snapshot(head), None)
    await db.delete(head)
    await db.commit()
    logger.info("Deleted fee head %s", fee_head_id)
    return True
