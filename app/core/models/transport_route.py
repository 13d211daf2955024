import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, Numeric, String

from app.db.session import Base


class TransportRoute(Base):
    """Bus route; its monthly fee is added to the recurring fee of every assigned student."""

    __tablename__ = "transport_routes"

    id = Column(String(64), primary_key=True, default=lambda: uuid.uuid4().hex)
    name = Column(String(100), nullable=False)
    monthly_fee = Column(Numeric(12, 2), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
