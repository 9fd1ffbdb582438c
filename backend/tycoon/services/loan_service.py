"""Loan service: periodic interest accrual."""

import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from tycoon import interest
from tycoon.clock import as_utc, utcnow
from tycoon.config import settings
from tycoon.models.loan import Loan
from tycoon.models.player import Player
from tycoon.money import is_safe_amount
from tycoon.services.ledger import apply_with_retry

logger = logging.getLogger(__name__)


def accrual_interval() -> timedelta:
    return timedelta(minutes=settings.LOAN_ACCRUAL_INTERVAL_MINUTES)


def _accrue(db: Session, loan_id: str, now: datetime, interval: timedelta, per_day: int) -> Optional[dict]:
    """Loan first, then the borrower's cash.

    The elapsed-time guard is evaluated here, against the freshly read row,
    so a retry or a second caller in the same interval charges nothing.
    """
    loan = db.get(Loan, loan_id)
    if loan is None or loan.status != "active":
        return None

    intervals = interest.elapsed_intervals(as_utc(loan.last_interest_applied), now, interval)
    amount = interest.interest_for(loan.remaining_balance, loan.interest_rate, intervals, per_day)
    if amount <= 0:
        return None
    if not is_safe_amount(loan.remaining_balance + amount):
        logger.warning("Skipping interest on loan %s: balance would overflow", loan.id)
        return None

    loan.remaining_balance += amount
    loan.accrued_interest = (loan.accrued_interest or 0) + amount
    loan.last_interest_applied = now

    # Loans are the one thing allowed to push a player's cash below zero
    player = db.get(Player, loan.player_id)
    if player is not None:
        player.balance -= amount
        player.updated_at = now

    return {"loan_id": loan.id, "player_id": loan.player_id, "interest": amount, "intervals": intervals}


def apply_loan_interest(db: Session, now: Optional[datetime] = None) -> list[dict]:
    """Charge interest on every active loan whose accrual is at least one interval stale.

    interest = floor(remaining_balance * rate% * intervals / intervals_per_day)

    Returns:
        One ``{loan_id, player_id, interest, intervals}`` per loan charged.
    """
    now = now or utcnow()
    interval = accrual_interval()
    per_day = interest.intervals_per_day(interval)
    cutoff = now - interval

    loan_ids = [
        row.id
        for row in db.query(Loan.id)
        .filter(Loan.status == "active", Loan.last_interest_applied <= cutoff)
        .order_by(Loan.id)
        .all()
    ]

    accruals = []
    for loan_id in loan_ids:
        result = apply_with_retry(
            db,
            lambda session, lid=loan_id: _accrue(session, lid, now, interval, per_day),
            label=f"loan interest {loan_id}",
        )
        if result is not None:
            accruals.append(result)

    logger.info("Applied interest to %d of %d due loans", len(accruals), len(loan_ids))
    return accruals
