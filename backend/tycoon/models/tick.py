"""Tick models: the append-only tick log and the run lease."""

import uuid

from sqlalchemy import Column, String, BigInteger, Integer, DateTime, Text

from tycoon.clock import utcnow
from tycoon.database import Base


class TickHistory(Base):
    """Immutable record of one committed tick."""

    __tablename__ = "tick_history"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    tick_number = Column(Integer, nullable=False, unique=True, index=True)
    timestamp = Column(DateTime, nullable=False, default=utcnow, index=True)
    # Store purchase lists and price deltas as JSON text
    bot_purchases = Column(Text, nullable=False, default="[]")
    stock_price_updates = Column(Text, nullable=False, default="[]")
    crypto_price_updates = Column(Text, nullable=False, default="[]")
    total_budget_spent = Column(BigInteger, nullable=False, default=0)  # cents


class TickLease(Base):
    """Named run lease; one row while a tick is in flight."""

    __tablename__ = "tick_leases"

    name = Column(String(50), primary_key=True)
    holder = Column(String(36), nullable=False)
    acquired_at = Column(DateTime, nullable=False, default=utcnow)
    expires_at = Column(DateTime, nullable=False)
