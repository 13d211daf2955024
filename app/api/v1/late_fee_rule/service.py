"""Late fee rule service: read and replace the singleton rule."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.fee_audit_service import log_fee_audit
from app.core.fee_context_service import default_late_fee_rule, get_late_fee_rule as _get_rule
from app.core.fee_engine.money import to_decimal
from app.core.models import LATE_FEE_RULE_ID, LateFeeRule

from .schemas import LateFeeRuleResponse, LateFeeRuleUpdate

logger = logging.getLogger(__name__)


def _snapshot(rule: LateFeeRule) -> dict:
    return {"due_day_of_month": rule.due_day_of_month, "rule_type": rule.rule_type, "value": str(rule.value)}


async def get_late_fee_rule(db: AsyncSession) -> LateFeeRuleResponse:
    """Stored rule, or the configured default when none has been saved."""
    rule = await _get_rule(db)
    if rule is None:
        default = default_late_fee_rule()
        return LateFeeRuleResponse(
            due_day_of_month=default.due_day_of_month,
            rule_type=default.rule_type,
            value=default.value,
            is_default=True,
        )
    return LateFeeRuleResponse(
        due_day_of_month=rule.due_day_of_month,
        rule_type=rule.rule_type,
        value=to_decimal(rule.value),
        updated_at=rule.updated_at,
    )


async def update_late_fee_rule(db: AsyncSession, payload: LateFeeRuleUpdate) -> LateFeeRuleResponse:
    rule = await _get_rule(db)
    old = _snapshot(rule) if rule else None
    if rule is None:
        rule = LateFeeRule(id=LATE_FEE_RULE_ID)
        db.add(rule)
    rule.due_day_of_month = payload.due_day_of_month
    rule.rule_type = payload.rule_type.value
    rule.value = payload.value
    await log_fee_audit(db, "late_fee_rules", LATE_FEE_RULE_ID, "UPDATE" if old else "CREATE", old, _snapshot(rule))
    await db.commit()
    await db.refresh(rule)
    logger.info(
        "Late fee rule set: day %s, %s %s",
        rule.due_day_of_month,
        rule.rule_type,
        rule.value,
    )
    return await get_late_fee_rule(db)
