"""Fee audit log: immutable financial change tracking for audit safety."""

import uuid
from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, String

from app.db.session import Base


class FeeAuditLog(Base):
    """Immutable audit trail for fee-related changes."""

    __tablename__ = "fee_audit_logs"

    id = Column(String(64), primary_key=True, default=lambda: uuid.uuid4().hex)
    reference_table = Column(String(50), nullable=False)
    reference_id = Column(String(64), nullable=False, index=True)
    action_type = Column(String(30), nullable=False)  # CREATE, UPDATE, DELETE, ASSIGN, UNASSIGN
    old_value = Column(JSON, nullable=True)
    new_value = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
