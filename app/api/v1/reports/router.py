from datetime import date, datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import AgingBucket
from app.core.exceptions import ServiceError
from app.db.session import get_db

from .schemas import (
    DayBookResponse,
    DefaultersReportResponse,
    DiscountSummaryRowResponse,
    DuesReportResponse,
    HeadwiseCollectionResponse,
)
from . import service

router = APIRouter(prefix="/api/v1/reports", tags=["reports"])


@router.get("/dues", response_model=DuesReportResponse)
async def get_dues_report(
    class_name: Optional[str] = Query(None),
    as_of: Optional[datetime] = Query(None),
    db: AsyncSession = Depends(get_db),
) -> DuesReportResponse:
    return await service.get_dues_report(db, class_name=class_name, as_of=as_of)


@router.get("/defaulters", response_model=DefaultersReportResponse)
async def get_defaulters_report(
    bucket: Optional[AgingBucket] = Query(None),
    as_of: Optional[datetime] = Query(None),
    db: AsyncSession = Depends(get_db),
) -> DefaultersReportResponse:
    return await service.get_defaulters_report(db, bucket=bucket, as_of=as_of)


@router.get("/headwise-collection", response_model=HeadwiseCollectionResponse)
async def get_headwise_collection(
    start_date: date = Query(...),
    end_date: date = Query(...),
    db: AsyncSession = Depends(get_db),
) -> HeadwiseCollectionResponse:
    try:
        return await service.get_headwise_collection(db, start_date, end_date)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/discount-summary", response_model=List[DiscountSummaryRowResponse])
async def get_discount_summary(
    db: AsyncSession = Depends(get_db),
) -> List[DiscountSummaryRowResponse]:
    return await service.get_discount_summary(db)


@router.get("/day-book", response_model=DayBookResponse)
async def get_day_book(
    day: Optional[date] = Query(None, description="Defaults to today"),
    db: AsyncSession = Depends(get_db),
) -> DayBookResponse:
    return await service.get_day_book(db, day)
