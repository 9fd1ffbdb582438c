"""Tick service: runs one market tick and answers tick-history queries.

A tick moves Idle -> Running -> Committed, or Running -> Failed. The steps
run strictly in this order, each seeing what the previous one committed:

1. Bot purchases
2. Stock prices
3. Crypto prices
4. Loan interest
5. Net worth
6. Tick history row

A failed tick writes no history row, so its tick number is handed out again
next time. Units already committed by earlier steps stay committed.
"""

import json
import logging
import random
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from tycoon.clock import as_utc, utcnow
from tycoon.config import settings
from tycoon.database import SessionLocal
from tycoon.models.tick import TickHistory
from tycoon.services.bot_purchase_service import execute_bot_purchases
from tycoon.services.crypto_service import update_crypto_prices
from tycoon.services.loan_service import apply_loan_interest
from tycoon.services.net_worth_service import recalculate_net_worth
from tycoon.services.stock_service import update_stock_prices
from tycoon.services.tick_lock import tick_lease

logger = logging.getLogger(__name__)


def get_latest_tick(db: Session) -> Optional[TickHistory]:
    return db.query(TickHistory).order_by(TickHistory.tick_number.desc()).first()


def _history_timestamp(latest: Optional[TickHistory], now: datetime) -> datetime:
    """Keep history strictly ordered by time even if the clock steps back."""
    if latest is not None:
        previous = as_utc(latest.timestamp)
        if previous >= now:
            return previous + timedelta(milliseconds=1)
    return now


def run_tick(
    db: Session,
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
) -> dict:
    """Execute one full tick.

    Raises:
        TickInProgressError: another tick holds the run lease.
        SQLAlchemyError: a store failure; the tick is abandoned.
    """
    now = now or utcnow()
    rng = rng or random.Random()

    with tick_lease(db, now, timedelta(seconds=settings.TICK_LOCK_TTL_SECONDS)):
        latest = get_latest_tick(db)
        tick_number = (latest.tick_number if latest else 0) + 1
        logger.info("Executing tick #%d", tick_number)

        try:
            purchases = execute_bot_purchases(db, now=now)
            stock_updates = update_stock_prices(db, rng=rng, now=now)
            crypto_updates = update_crypto_prices(db, rng=rng, now=now)
            accruals = apply_loan_interest(db, now=now)
            net_worth_updates = recalculate_net_worth(db)

            tick = TickHistory(
                tick_number=tick_number,
                timestamp=_history_timestamp(latest, now),
                bot_purchases=json.dumps(purchases),
                stock_price_updates=json.dumps(stock_updates),
                crypto_price_updates=json.dumps(crypto_updates),
                total_budget_spent=sum(p["total_price"] for p in purchases),
            )
            db.add(tick)
            db.commit()
            tick_id = tick.id
        except Exception:
            logger.exception("Tick #%d failed", tick_number)
            raise

    result = {
        "tick_number": tick_number,
        "tick_id": tick_id,
        "bot_purchases": len(purchases),
        "stock_updates": len(stock_updates),
        "crypto_updates": len(crypto_updates),
        "loans_accrued": len(accruals),
        "net_worth_updates": net_worth_updates,
    }
    logger.info("Tick #%d completed: %s", tick_number, result)
    return result


def run_scheduled_tick() -> dict:
    """Entry point for the scheduler; owns its own session."""
    db = SessionLocal()
    try:
        return run_tick(db)
    finally:
        db.close()


def get_tick_history(db: Session, limit: int = 100) -> list[TickHistory]:
    """Most recent ticks, newest first."""
    limit = max(1, min(limit, settings.TICK_HISTORY_MAX))
    return (
        db.query(TickHistory)
        .order_by(TickHistory.tick_number.desc())
        .limit(limit)
        .all()
    )


def get_last_tick(db: Session) -> Optional[dict]:
    latest = get_latest_tick(db)
    if latest is None:
        return None
    return {"tick_number": latest.tick_number, "timestamp": as_utc(latest.timestamp)}


def seconds_until_next_tick(last_timestamp: Optional[datetime], now: Optional[datetime] = None) -> float:
    """Countdown for clients; zero when a tick is due or none has run yet."""
    if last_timestamp is None:
        return 0.0
    now = now or utcnow()
    due = as_utc(last_timestamp) + timedelta(seconds=settings.TICK_INTERVAL_SECONDS)
    return max(0.0, (due - now).total_seconds())
