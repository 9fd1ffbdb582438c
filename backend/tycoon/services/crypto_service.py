"""Crypto pricing service: higher-volatility drift model, one step per tick."""

import logging
import random
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from tycoon import pricing
from tycoon.clock import utcnow
from tycoon.config import settings
from tycoon.models.crypto import Cryptocurrency, CryptoPriceHistory
from tycoon.money import is_safe_amount
from tycoon.services.ledger import apply_with_retry

logger = logging.getLogger(__name__)


def default_params() -> pricing.CryptoModelParams:
    """Model params with the per-tick scale taken from the configured tick interval."""
    return pricing.CryptoModelParams(
        ticks_per_day=max(1, 86_400 // settings.TICK_INTERVAL_SECONDS),
    )


def _reprice(db: Session, crypto_id: str, rng: random.Random, now: datetime, params: pricing.CryptoModelParams):
    crypto = db.get(Cryptocurrency, crypto_id)
    if crypto is None:
        return None

    step = pricing.step_crypto(
        pricing.CryptoState(
            price=crypto.current_price,
            previous_price=crypto.previous_price,
            base_volatility=crypto.base_volatility,
            volatility=crypto.volatility,
            trend_drift=crypto.trend_drift or 0.0,
            liquidity=crypto.liquidity,
        ),
        rng,
        params,
    )

    crypto.previous_price = step.old_price
    crypto.current_price = step.new_price
    crypto.volatility = step.volatility
    crypto.trend_drift = step.trend_drift
    crypto.last_price_change = now
    crypto.last_volatility_update = now
    crypto.last_updated = now

    market_cap = step.new_price * crypto.circulating_supply
    if is_safe_amount(market_cap):
        crypto.market_cap = market_cap
    else:
        logger.warning("Market cap of %s exceeds the safe range; keeping previous value", crypto.symbol)

    db.add(CryptoPriceHistory(crypto_id=crypto.id, timestamp=now, **pricing.ohlc_bar(step.old_price, step.new_price)))

    return {"crypto_id": crypto.id, "old_price": step.old_price, "new_price": step.new_price}


def update_crypto_prices(
    db: Session,
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
    params: Optional[pricing.CryptoModelParams] = None,
) -> list[dict]:
    """Advance every cryptocurrency one tick and refresh its market cap."""
    rng = rng or random.Random()
    now = now or utcnow()
    params = params or default_params()

    crypto_ids = [row.id for row in db.query(Cryptocurrency.id).order_by(Cryptocurrency.id).all()]
    updates = []
    for crypto_id in crypto_ids:
        delta = apply_with_retry(
            db,
            lambda session, cid=crypto_id: _reprice(session, cid, rng, now, params),
            label=f"crypto reprice {crypto_id}",
        )
        if delta is not None:
            updates.append(delta)

    logger.info("Updated %d crypto prices", len(updates))
    return updates


def get_price_history(db: Session, crypto_id: str, limit: int = 100) -> list[CryptoPriceHistory]:
    """Most recent bars for a coin, newest first."""
    return (
        db.query(CryptoPriceHistory)
        .filter(CryptoPriceHistory.crypto_id == crypto_id)
        .order_by(CryptoPriceHistory.timestamp.desc())
        .limit(limit)
        .all()
    )
