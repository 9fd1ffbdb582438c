"""Loan model."""

import uuid

from sqlalchemy import Column, String, BigInteger, Float, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from tycoon.clock import utcnow
from tycoon.database import Base


class Loan(Base):
    __tablename__ = "loans"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    player_id = Column(String(36), ForeignKey("players.id"), nullable=False, index=True)
    amount = Column(BigInteger, nullable=False)  # cents, original principal
    interest_rate = Column(Float, nullable=False)  # percent per day, e.g. 5 for 5%
    remaining_balance = Column(BigInteger, nullable=False)  # cents
    accrued_interest = Column(BigInteger, nullable=False, default=0)  # cents
    status = Column(String(20), nullable=False, default="active", index=True)  # active | paid | defaulted
    last_interest_applied = Column(DateTime, nullable=False, default=utcnow)
    due_date = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    player = relationship("Player", back_populates="loans")
