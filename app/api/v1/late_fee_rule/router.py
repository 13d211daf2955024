"""Late fee rule router."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db

from .schemas import LateFeeRuleResponse, LateFeeRuleUpdate
from . import service

router = APIRouter(prefix="/api/v1/late-fee-rule", tags=["late-fee-rule"])


@router.get("", response_model=LateFeeRuleResponse)
async def get_late_fee_rule(
    db: AsyncSession = Depends(get_db),
) -> LateFeeRuleResponse:
    return await service.get_late_fee_rule(db)


@router.put("", response_model=LateFeeRuleResponse)
async def update_late_fee_rule(
    payload: LateFeeRuleUpdate,
    db: AsyncSession = Depends(get_db),
) -> LateFeeRuleResponse:
    return await service.update_late_fee_rule(db, payload)
