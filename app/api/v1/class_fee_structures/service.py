"""Class fee structure service: one fee map per class, replaced as a whole."""

import logging
from decimal import Decimal
from typing import List, Optional

from fastapi import status
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import FeeType
from app.core.exceptions import ReferenceInUseError, ServiceError
from app.core.fee_audit_service import log_fee_audit
from app.core.fee_engine.money import ZERO, to_decimal
from app.core.models import ClassFeeStructure, FeeHead, Student

from .schemas import ClassFeeStructureItem, ClassFeeStructureResponse, ClassFeeStructureUpsert

logger = logging.getLogger(__name__)


async def _class_rows(db: AsyncSession, class_name: Optional[str] = None):
    stmt = select(ClassFeeStructure, FeeHead).join(FeeHead, ClassFeeStructure.fee_head_id == FeeHead.id)
    if class_name is not None:
        stmt = stmt.where(ClassFeeStructure.class_name == class_name)
    stmt = stmt.order_by(ClassFeeStructure.class_name, FeeHead.created_at, FeeHead.name)
    return (await db.execute(stmt)).all()


def _group(rows) -> List[ClassFeeStructureResponse]:
    grouped: dict[str, ClassFeeStructureResponse] = {}
    for cfs, head in rows:
        amount = to_decimal(cfs.amount)
        resp = grouped.get(cfs.class_name)
        if resp is None:
            resp = grouped[cfs.class_name] = ClassFeeStructureResponse(
                class_name=cfs.class_name,
                fees={},
                items=[],
                recurring_monthly_total=ZERO,
                annual_total=ZERO,
            )
        resp.fees[head.id] = amount
        resp.items.append(
            ClassFeeStructureItem(
                fee_head_id=head.id,
                fee_head_name=head.name,
                fee_type=head.fee_type,
                due_month=head.due_month,
                amount=amount,
            )
        )
        if head.fee_type == FeeType.MONTHLY_RECURRING.value:
            resp.recurring_monthly_total += amount
        else:
            resp.annual_total += amount
    return list(grouped.values())


async def _student_count(db: AsyncSession, class_name: str) -> int:
    result = await db.execute(select(func.count()).select_from(Student).where(Student.class_name == class_name))
    return result.scalar() or 0


async def upsert_class_fee_structure(
    db: AsyncSession,
    class_name: str,
    payload: ClassFeeStructureUpsert,
) -> ClassFeeStructureResponse:
    """Replace the fee map of ``class_name``. Repeating the same request is a no-op."""
    class_name = class_name.strip()
    if not class_name:
        raise ServiceError("Class name is required", status.HTTP_400_BAD_REQUEST)
    known = set((await db.execute(select(FeeHead.id))).scalars().all())
    unknown = sorted(set(payload.fees) - known)
    if unknown:
        raise ServiceError(f"Unknown fee heads: {', '.join(unknown)}", status.HTTP_400_BAD_REQUEST)

    existing = (
        await db.execute(select(ClassFeeStructure).where(ClassFeeStructure.class_name == class_name))
    ).scalars().all()
    old = {row.fee_head_id: str(row.amount) for row in existing}
    by_head = {row.fee_head_id: row for row in existing}
    if existing and not payload.fees:
        student_count = await _student_count(db, class_name)
        if student_count:
            logger.warning("Blocked clearing fee structure of class %s: %d students", class_name, student_count)
            raise ReferenceInUseError(
                f"Cannot clear fee structure. Class {class_name} has {student_count} student(s)"
            )

    for head_id, amount in payload.fees.items():
        row = by_head.pop(head_id, None)
        if row is None:
            db.add(ClassFeeStructure(class_name=class_name, fee_head_id=head_id, amount=amount))
        else:
            row.amount = amount
    for row in by_head.values():
        await db.delete(row)

    await log_fee_audit(
        db,
        "class_fee_structures",
        class_name,
        "UPDATE" if existing else "CREATE",
        old or None,
        {head_id: str(amount) for head_id, amount in payload.fees.items()},
    )
    await db.commit()
    logger.info("Saved fee structure for class %s (%d heads)", class_name, len(payload.fees))
    result = _group(await _class_rows(db, class_name))
    if result:
        return result[0]
    return ClassFeeStructureResponse(
        class_name=class_name,
        fees={},
        items=[],
        recurring_monthly_total=Decimal("0"),
        annual_total=Decimal("0"),
    )


async def list_class_fee_structures(db: AsyncSession) -> List[ClassFeeStructureResponse]:
    return _group(await _class_rows(db))


async def get_class_fee_structure(db: AsyncSession, class_name: str) -> Optional[ClassFeeStructureResponse]:
    result = _group(await _class_rows(db, class_name))
    return result[0] if result else None


async def delete_class_fee_structure(db: AsyncSession, class_name: str) -> bool:
    """Remove a class's fee structure. Blocked while students are enrolled in the class."""
    rows = (
        await db.execute(select(ClassFeeStructure).where(ClassFeeStructure.class_name == class_name))
    ).scalars().all()
    if not rows:
        return False
    student_count = await _student_count(db, class_name)
    if student_count:
        logger.warning("Blocked deleting fee structure of class %s: %d students", class_name, student_count)
        raise ReferenceInUseError(
            f"Cannot delete fee structure. Class {class_name} has {student_count} student(s)"
        )
    await db.execute(delete(ClassFeeStructure).where(ClassFeeStructure.class_name == class_name))
    await log_fee_audit(
        db,
        "class_fee_structures",
        class_name,
        "DELETE",
        {row.fee_head_id: str(row.amount) for row in rows},
        None,
    )
    await db.commit()
    return True
