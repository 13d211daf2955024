"""Student service: registry and the admin-assigned discount/transport details."""

import logging
from typing import Iterable, List, Optional

from fastapi import status
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ServiceError
from app.core.fee_audit_service import log_fee_audit
from app.core.models import DiscountCategory, Student, StudentDiscount, TransportRoute

from .schemas import (
    DiscountAssignmentRequest,
    DiscountAssignmentResponse,
    StudentCreate,
    StudentResponse,
)

logger = logging.getLogger(__name__)


def _to_response(student: Student) -> StudentResponse:
    return StudentResponse(
        qr_id=student.qr_id,
        name=student.name,
        class_name=student.class_name,
        section=student.section,
        discount_category_ids=sorted(student.discount_category_ids),
        transport_route_id=student.transport_route_id,
        created_at=student.created_at,
        updated_at=student.updated_at,
    )


async def _get_student_or_404(db: AsyncSession, qr_id: str) -> Student:
    student = await db.get(Student, qr_id)
    if not student:
        raise ServiceError("Student not found", status.HTTP_404_NOT_FOUND)
    return student


async def _validate_discounts(db: AsyncSession, discount_category_ids: Iterable[str]) -> List[str]:
    wanted = list(dict.fromkeys(discount_category_ids))
    if not wanted:
        return []
    found = set(
        (await db.execute(select(DiscountCategory.id).where(DiscountCategory.id.in_(wanted)))).scalars().all()
    )
    missing = [d for d in wanted if d not in found]
    if missing:
        raise ServiceError(f"Invalid discount categories: {', '.join(missing)}", status.HTTP_400_BAD_REQUEST)
    return wanted


async def _validate_route(db: AsyncSession, route_id: Optional[str]) -> Optional[str]:
    if not route_id:
        return None
    if not await db.get(TransportRoute, route_id):
        raise ServiceError("Invalid transport route", status.HTTP_400_BAD_REQUEST)
    return route_id


def _set_discounts(student: Student, discount_category_ids: List[str]) -> None:
    """Diff the student's discount rows against ``discount_category_ids``."""
    wanted = set(discount_category_ids)
    for row in list(student.discounts):
        if row.discount_category_id not in wanted:
            student.discounts.remove(row)
    held = set(student.discount_category_ids)
    for discount_id in discount_category_ids:
        if discount_id not in held:
            student.discounts.append(StudentDiscount(discount_category_id=discount_id))


async def create_student(db: AsyncSession, payload: StudentCreate) -> StudentResponse:
    qr_id = payload.qr_id.strip()
    if await db.get(Student, qr_id):
        raise ServiceError(f"Student with QR id '{qr_id}' already exists", status.HTTP_409_CONFLICT)
    discount_ids = await _validate_discounts(db, payload.discount_category_ids)
    route_id = await _validate_route(db, payload.transport_route_id)
    student = Student(
        qr_id=qr_id,
        name=payload.name.strip(),
        class_name=payload.class_name.strip() if payload.class_name else None,
        section=payload.section.strip().upper() if payload.section else None,
        transport_route_id=route_id,
        discounts=[StudentDiscount(discount_category_id=d) for d in discount_ids],
    )
    db.add(student)
    await log_fee_audit(
        db,
        "students",
        qr_id,
        "CREATE",
        None,
        {"class_name": student.class_name, "discount_category_ids": discount_ids, "transport_route_id": route_id},
    )
    await db.commit()
    await db.refresh(student)
    logger.info("Registered student %s in class %s", qr_id, student.class_name)
    return _to_response(student)


async def list_students(
    db: AsyncSession,
    class_name: Optional[str] = None,
    search: Optional[str] = None,
) -> List[StudentResponse]:
    stmt = select(Student)
    if class_name:
        stmt = stmt.where(Student.class_name == class_name)
    if search and search.strip():
        term = f"%{search.strip()}%"
        stmt = stmt.where(or_(Student.name.ilike(term), Student.qr_id.ilike(term)))
    stmt = stmt.order_by(Student.class_name, Student.section, Student.name)
    result = await db.execute(stmt)
    return [_to_response(s) for s in result.scalars().all()]


async def get_student(db: AsyncSession, qr_id: str) -> Optional[StudentResponse]:
    student = await db.get(Student, qr_id)
    return _to_response(student) if student else None


async def set_transport_route(db: AsyncSession, qr_id: str, route_id: Optional[str]) -> StudentResponse:
    student = await _get_student_or_404(db, qr_id)
    old = student.transport_route_id
    student.transport_route_id = await _validate_route(db, route_id)
    await log_fee_audit(
        db, "students", qr_id, "UPDATE",
        {"transport_route_id": old},
        {"transport_route_id": student.transport_route_id},
    )
    await db.commit()
    await db.refresh(student)
    logger.info("Student %s transport route %s -> %s", qr_id, old, student.transport_route_id)
    return _to_response(student)


async def set_student_discounts(db: AsyncSession, qr_id: str, discount_category_ids: List[str]) -> StudentResponse:
    student = await _get_student_or_404(db, qr_id)
    old = sorted(student.discount_category_ids)
    wanted = await _validate_discounts(db, discount_category_ids)
    _set_discounts(student, wanted)
    await log_fee_audit(
        db, "students", qr_id, "UPDATE",
        {"discount_category_ids": old},
        {"discount_category_ids": sorted(wanted)},
    )
    await db.commit()
    await db.refresh(student)
    logger.info("Student %s discounts %s -> %s", qr_id, old, sorted(wanted))
    return _to_response(student)


async def assign_discount(
    db: AsyncSession,
    discount_category_id: str,
    payload: DiscountAssignmentRequest,
) -> DiscountAssignmentResponse:
    """Give or take one discount category for many students in a single commit.

    Students already in the requested state are left untouched, so the request
    can be retried safely.
    """
    if not await db.get(DiscountCategory, discount_category_id):
        raise ServiceError("Discount category not found", status.HTTP_404_NOT_FOUND)
    overlap = set(payload.assign) & set(payload.unassign)
    if overlap:
        raise ServiceError(
            f"Students cannot be both assigned and unassigned: {', '.join(sorted(overlap))}",
            status.HTTP_400_BAD_REQUEST,
        )
    qr_ids = list(dict.fromkeys(payload.assign + payload.unassign))
    students = {
        s.qr_id: s
        for s in (await db.execute(select(Student).where(Student.qr_id.in_(qr_ids)))).scalars().all()
    }
    missing = [q for q in qr_ids if q not in students]
    if missing:
        raise ServiceError(f"Unknown students: {', '.join(missing)}", status.HTTP_400_BAD_REQUEST)

    assigned: List[str] = []
    unassigned: List[str] = []
    for qr_id in payload.assign:
        student = students[qr_id]
        if discount_category_id not in student.discount_category_ids:
            student.discounts.append(StudentDiscount(discount_category_id=discount_category_id))
            assigned.append(qr_id)
    for qr_id in payload.unassign:
        student = students[qr_id]
        for row in list(student.discounts):
            if row.discount_category_id == discount_category_id:
                student.discounts.remove(row)
                unassigned.append(qr_id)

    if assigned or unassigned:
        await log_fee_audit(
            db,
            "discount_categories",
            discount_category_id,
            "ASSIGN",
            {"unassigned": unassigned} if unassigned else None,
            {"assigned": assigned} if assigned else None,
        )
        await db.commit()
    logger.info(
        "Discount %s assignments updated: +%d -%d",
        discount_category_id,
        len(assigned),
        len(unassigned),
    )
    return DiscountAssignmentResponse(
        discount_category_id=discount_category_id,
        assigned=assigned,
        unassigned=unassigned,
    )
