"""Transport routes router."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ServiceError
from app.db.session import get_db

from .schemas import TransportRouteCreate, TransportRouteResponse, TransportRouteUpdate
from . import service

router = APIRouter(prefix="/api/v1/transport-routes", tags=["transport-routes"])


@router.post(
    "",
    response_model=TransportRouteResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_transport_route(
    payload: TransportRouteCreate,
    db: AsyncSession = Depends(get_db),
) -> TransportRouteResponse:
    try:
        return await service.create_transport_route(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("", response_model=List[TransportRouteResponse])
async def list_transport_routes(
    db: AsyncSession = Depends(get_db),
) -> List[TransportRouteResponse]:
    return await service.list_transport_routes(db)


@router.patch("/{route_id}", response_model=TransportRouteResponse)
async def update_transport_route(
    route_id: str,
    payload: TransportRouteUpdate,
    db: AsyncSession = Depends(get_db),
) -> TransportRouteResponse:
    route = await service.update_transport_route(db, route_id, payload)
    if not route:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Transport route not found")
    return route


@router.delete("/{route_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_transport_route(
    route_id: str,
    db: AsyncSession = Depends(get_db),
) -> None:
    try:
        deleted = await service.delete_transport_route(db, route_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Transport route not found")
