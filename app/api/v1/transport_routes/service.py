"""Transport route service layer."""

import logging
from typing import List, Optional

from fastapi import status
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ReferenceInUseError, ServiceError
from app.core.fee_audit_service import log_fee_audit
from app.core.models import Student, TransportRoute

from .schemas import TransportRouteCreate, TransportRouteResponse, TransportRouteUpdate

logger = logging.getLogger(__name__)


def _snapshot(route: TransportRoute) -> dict:
    return {"name": route.name, "monthly_fee": str(route.monthly_fee)}


async def create_transport_route(db: AsyncSession, payload: TransportRouteCreate) -> TransportRouteResponse:
    route = TransportRoute(name=payload.name.strip(), monthly_fee=payload.monthly_fee)
    if payload.id:
        route.id = payload.id.strip()
    db.add(route)
    try:
        await db.flush()
        await log_fee_audit(db, "transport_routes", route.id, "CREATE", None, _snapshot(route))
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ServiceError(f"Transport route with id '{payload.id}' already exists", status.HTTP_409_CONFLICT)
    await db.refresh(route)
    logger.info("Created transport route %s (%s/month)", route.id, route.monthly_fee)
    return TransportRouteResponse.model_validate(route)


async def list_transport_routes(db: AsyncSession) -> List[TransportRouteResponse]:
    rows = (await db.execute(select(TransportRoute).order_by(TransportRoute.name))).scalars().all()
    return [TransportRouteResponse.model_validate(r) for r in rows]


async def update_transport_route(
    db: AsyncSession,
    route_id: str,
    payload: TransportRouteUpdate,
) -> Optional[TransportRouteResponse]:
    route = await db.get(TransportRoute, route_id)
    if not route:
        return None
    old = _snapshot(route)
    if payload.name is not None:
        route.name = payload.name.strip()
    if payload.monthly_fee is not None:
        route.monthly_fee = payload.monthly_fee
    await log_fee_audit(db, "transport_routes", route.id, "UPDATE", old, _snapshot(route))
    await db.commit()
    await db.refresh(route)
    return TransportRouteResponse.model_validate(route)


async def delete_transport_route(db: AsyncSession, route_id: str) -> bool:
    """Delete a route. Blocked while students are assigned to it."""
    route = await db.get(TransportRoute, route_id)
    if not route:
        return False
    riders = (
        await db.execute(
            select(func.count()).select_from(Student).where(Student.transport_route_id == route_id)
        )
    ).scalar() or 0
    if riders:
        logger.warning("Blocked deleting transport route %s: %d students assigned", route_id, riders)
        raise ReferenceInUseError(f"Cannot delete transport route. It is assigned to {riders} student(s)")
    await log_fee_audit(db, "transport_routes", route.id, "DELETE", _snapshot(route), None)
    await db.delete(route)
    await db.commit()
    return True
