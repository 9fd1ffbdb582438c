"""Company model: a player-owned treasury that collects product revenue."""

import uuid

from sqlalchemy import Column, String, BigInteger, Integer, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from tycoon.clock import utcnow
from tycoon.database import Base


class Company(Base):
    __tablename__ = "companies"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    owner_id = Column(String(36), ForeignKey("players.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    balance = Column(BigInteger, nullable=False, default=0)  # cents
    is_public = Column(Boolean, nullable=False, default=False)
    market_cap = Column(BigInteger, nullable=True)  # cents, only meaningful when public
    version = Column(Integer, nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    __mapper_args__ = {"version_id_col": version}

    # Relationships
    owner = relationship("Player", back_populates="companies")
    products = relationship("Product", back_populates="company")
