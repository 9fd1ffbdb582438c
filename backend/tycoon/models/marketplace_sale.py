"""Marketplace sale: immutable record of every product purchase."""

import uuid

from sqlalchemy import Column, String, BigInteger, DateTime, ForeignKey

from tycoon.clock import utcnow
from tycoon.database import Base

BOT_PURCHASER = "bot"


class MarketplaceSale(Base):
    __tablename__ = "marketplace_sales"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    product_id = Column(String(36), ForeignKey("products.id"), nullable=False, index=True)
    company_id = Column(String(36), ForeignKey("companies.id"), nullable=False, index=True)
    quantity = Column(BigInteger, nullable=False)
    # A player id, or the literal "bot" for simulated buyers
    purchaser_id = Column(String(36), nullable=False, index=True)
    purchaser_type = Column(String(10), nullable=False)  # player | bot
    total_price = Column(BigInteger, nullable=False)  # cents
    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)
