"""
Audit logging for fee configuration and student financial changes. Call on every state change.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.models import FeeAuditLog


async def log_fee_audit(
    db: AsyncSession,
    reference_table: str,
    reference_id: str,
    action_type: str,
    old_value: Optional[dict],
    new_value: Optional[dict],
) -> None:
    """Append one audit log entry. Caller must commit."""
    db.add(
        FeeAuditLog(
            reference_table=reference_table,
            reference_id=str(reference_id),
            action_type=action_type,
            old_value=old_value,
            new_value=new_value,
        )
    )
