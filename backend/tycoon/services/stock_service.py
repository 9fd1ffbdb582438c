"""Stock pricing service: one simulated step per stock per tick."""

import logging
import random
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from tycoon import pricing
from tycoon.clock import utcnow
from tycoon.models.stock import Stock, StockPriceHistory
from tycoon.money import is_safe_amount
from tycoon.services.ledger import apply_with_retry

logger = logging.getLogger(__name__)


def _reprice(db: Session, stock_id: str, rng: random.Random, now: datetime, params: pricing.StockModelParams):
    stock = db.get(Stock, stock_id)
    if stock is None:
        return None

    step = pricing.step_stock(
        pricing.StockState(
            price=stock.current_price,
            fair_value=stock.fair_value,
            momentum=stock.trend_momentum or 0.0,
            volatility=stock.volatility,
            liquidity=stock.liquidity,
        ),
        rng,
        params,
    )

    stock.previous_price = step.old_price
    stock.current_price = step.new_price
    stock.fair_value = step.fair_value
    stock.trend_momentum = step.momentum
    stock.volatility = step.volatility
    stock.last_price_change = now
    stock.last_updated = now
    if step.clustered:
        stock.last_volatility_cluster = now
    if stock.outstanding_shares:
        market_cap = step.new_price * stock.outstanding_shares
        if is_safe_amount(market_cap):
            stock.market_cap = market_cap

    db.add(StockPriceHistory(stock_id=stock.id, timestamp=now, **pricing.ohlc_bar(step.old_price, step.new_price)))

    return {"stock_id": stock.id, "old_price": step.old_price, "new_price": step.new_price}


def update_stock_prices(
    db: Session,
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
    params: pricing.StockModelParams = pricing.StockModelParams(),
) -> list[dict]:
    """Advance every stock one tick.

    Returns:
        Price deltas ``{stock_id, old_price, new_price}``; its length is the
        number of stocks updated.
    """
    rng = rng or random.Random()
    now = now or utcnow()

    stock_ids = [row.id for row in db.query(Stock.id).order_by(Stock.id).all()]
    updates = []
    for stock_id in stock_ids:
        delta = apply_with_retry(
            db,
            lambda session, sid=stock_id: _reprice(session, sid, rng, now, params),
            label=f"stock reprice {stock_id}",
        )
        if delta is not None:
            updates.append(delta)

    logger.info("Updated %d stock prices", len(updates))
    return updates


def get_price_history(db: Session, stock_id: str, limit: int = 100) -> list[StockPriceHistory]:
    """Most recent bars for a stock, newest first."""
    return (
        db.query(StockPriceHistory)
        .filter(StockPriceHistory.stock_id == stock_id)
        .order_by(StockPriceHistory.timestamp.desc())
        .limit(limit)
        .all()
    )
