"""Cryptocurrency models: coins, their price bars, and player wallets."""

import uuid

from sqlalchemy import Column, String, BigInteger, Float, DateTime, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import relationship

from tycoon.clock import utcnow
from tycoon.database import Base


class Cryptocurrency(Base):
    __tablename__ = "cryptocurrencies"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    symbol = Column(String(12), nullable=False, unique=True, index=True)
    created_by_player_id = Column(String(36), ForeignKey("players.id"), nullable=True, index=True)
    total_supply = Column(BigInteger, nullable=False)
    circulating_supply = Column(BigInteger, nullable=False)
    current_price = Column(BigInteger, nullable=False)  # cents
    previous_price = Column(BigInteger, nullable=True)  # cents
    market_cap = Column(BigInteger, nullable=False, default=0)  # cents, price * circulating supply
    liquidity = Column(BigInteger, nullable=False, default=1_000_000)
    base_volatility = Column(Float, nullable=False, default=0.1)  # daily, 0.05-0.2
    volatility = Column(Float, nullable=True)  # current daily volatility incl. clustering
    trend_drift = Column(Float, nullable=False, default=0.0)  # -0.01 to 0.01 per tick
    last_volatility_update = Column(DateTime, nullable=True)
    last_price_change = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    last_updated = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    history = relationship("CryptoPriceHistory", back_populates="crypto")


class CryptoPriceHistory(Base):
    """One OHLCV bar per coin per tick. Append-only."""

    __tablename__ = "crypto_price_history"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    crypto_id = Column(String(36), ForeignKey("cryptocurrencies.id"), nullable=False)
    timestamp = Column(DateTime, nullable=False, default=utcnow, index=True)
    open = Column(BigInteger, nullable=False)
    high = Column(BigInteger, nullable=False)
    low = Column(BigInteger, nullable=False)
    close = Column(BigInteger, nullable=False)
    volume = Column(BigInteger, nullable=False, default=0)

    __table_args__ = (
        Index("ix_crypto_price_history_crypto_time", "crypto_id", "timestamp"),
    )

    crypto = relationship("Cryptocurrency", back_populates="history")


class CryptoWallet(Base):
    """Coins of one cryptocurrency held by one player."""

    __tablename__ = "player_crypto_wallets"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    player_id = Column(String(36), ForeignKey("players.id"), nullable=False, index=True)
    crypto_id = Column(String(36), ForeignKey("cryptocurrencies.id"), nullable=False, index=True)
    balance = Column(Float, nullable=False, default=0.0)  # coins
    total_invested = Column(BigInteger, nullable=False, default=0)  # cents
    average_purchase_price = Column(BigInteger, nullable=False, default=0)  # cents per coin
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        UniqueConstraint("player_id", "crypto_id", name="uq_player_crypto"),
    )

    player = relationship("Player", back_populates="crypto_wallets")
    crypto = relationship("Cryptocurrency")
