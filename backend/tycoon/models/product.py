"""Product model: catalog entries the bot buyers shop from."""

import uuid

from sqlalchemy import Column, String, BigInteger, Integer, Float, Boolean, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship

from tycoon.clock import utcnow
from tycoon.database import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    company_id = Column(String(36), ForeignKey("companies.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    price = Column(BigInteger, nullable=False)  # cents
    # Fixed at creation (0.35-0.67); never recomputed from price
    production_cost_percentage = Column(Float, nullable=False, default=0.35)
    stock = Column(Integer, nullable=True)  # None = unlimited
    total_sold = Column(BigInteger, nullable=False, default=0)
    total_revenue = Column(BigInteger, nullable=False, default=0)  # cents
    quality_rating = Column(Float, nullable=True)  # 0-1
    is_active = Column(Boolean, nullable=False, default=True)
    is_archived = Column(Boolean, nullable=False, default=False)
    max_per_order = Column(Integer, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index("ix_products_active_revenue", "is_active", "total_revenue"),
    )

    # Relationships
    company = relationship("Company", back_populates="products")
