"""Player model: cash balance and the cached net worth."""

import uuid

from sqlalchemy import Column, String, BigInteger, Integer, DateTime
from sqlalchemy.orm import relationship

from tycoon.clock import utcnow
from tycoon.database import Base


class Player(Base):
    __tablename__ = "players"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    display_name = Column(String(255), nullable=False, default="Anonymous")
    role = Column(String(20), nullable=False, default="normal")  # normal | limited | banned | mod | admin
    balance = Column(BigInteger, nullable=False, default=0)  # cents, may go negative via loan interest
    net_worth = Column(BigInteger, nullable=False, default=0, index=True)  # cents, derived
    version = Column(Integer, nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    __mapper_args__ = {"version_id_col": version}

    # Relationships
    companies = relationship("Company", back_populates="owner")
    loans = relationship("Loan", back_populates="player")
    stock_holdings = relationship("StockHolding", back_populates="player")
    crypto_wallets = relationship("CryptoWallet", back_populates="player")
