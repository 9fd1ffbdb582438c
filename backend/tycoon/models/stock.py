"""Stock market models: listed stocks, their price bars, and player portfolios."""

import uuid

from sqlalchemy import Column, String, BigInteger, Integer, Float, DateTime, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import relationship

from tycoon.clock import utcnow
from tycoon.database import Base


class Stock(Base):
    __tablename__ = "stocks"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    symbol = Column(String(12), nullable=False, unique=True, index=True)
    sector = Column(String(50), nullable=True)  # tech | energy | finance | healthcare | consumer
    current_price = Column(BigInteger, nullable=False)  # cents
    previous_price = Column(BigInteger, nullable=True)  # cents, price before the last tick
    fair_value = Column(BigInteger, nullable=True)  # cents, mean-reversion anchor
    trend_momentum = Column(Float, nullable=False, default=0.0)
    volatility = Column(Float, nullable=True)  # current per-tick sigma
    liquidity = Column(BigInteger, nullable=False, default=1_000_000)
    outstanding_shares = Column(BigInteger, nullable=True)
    market_cap = Column(BigInteger, nullable=True)  # cents
    last_price_change = Column(DateTime, nullable=True)
    last_volatility_cluster = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    last_updated = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    # Relationships
    history = relationship("StockPriceHistory", back_populates="stock")


class StockPriceHistory(Base):
    """One OHLCV bar per stock per tick. Append-only."""

    __tablename__ = "stock_price_history"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    stock_id = Column(String(36), ForeignKey("stocks.id"), nullable=False)
    timestamp = Column(DateTime, nullable=False, default=utcnow, index=True)
    open = Column(BigInteger, nullable=False)
    high = Column(BigInteger, nullable=False)
    low = Column(BigInteger, nullable=False)
    close = Column(BigInteger, nullable=False)
    volume = Column(BigInteger, nullable=False, default=0)

    __table_args__ = (
        Index("ix_stock_price_history_stock_time", "stock_id", "timestamp"),
    )

    stock = relationship("Stock", back_populates="history")


class StockHolding(Base):
    """Shares of one stock held by one player. The only place share counts live."""

    __tablename__ = "player_stock_portfolios"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    player_id = Column(String(36), ForeignKey("players.id"), nullable=False, index=True)
    stock_id = Column(String(36), ForeignKey("stocks.id"), nullable=False, index=True)
    shares = Column(BigInteger, nullable=False, default=0)
    average_cost = Column(BigInteger, nullable=False, default=0)  # cents per share
    total_invested = Column(BigInteger, nullable=False, default=0)  # cents
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        UniqueConstraint("player_id", "stock_id", name="uq_player_stock"),
    )

    player = relationship("Player", back_populates="stock_holdings")
    stock = relationship("Stock")
