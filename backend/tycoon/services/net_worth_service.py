"""Net worth service: gathers holdings and applies the shared formula."""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from tycoon.config import settings
from tycoon.models.company import Company
from tycoon.models.crypto import Cryptocurrency, CryptoWallet
from tycoon.models.loan import Loan
from tycoon.models.player import Player
from tycoon.models.stock import Stock, StockHolding
from tycoon.net_worth import CompanyEquity, NetWorthBreakdown, NetWorthInputs, compute_net_worth
from tycoon.services.ledger import apply_with_retry

logger = logging.getLogger(__name__)


def gather_inputs(db: Session, player: Player) -> NetWorthInputs:
    stock_positions = (
        db.query(StockHolding.shares, Stock.current_price)
        .join(Stock, StockHolding.stock_id == Stock.id)
        .filter(StockHolding.player_id == player.id)
        .all()
    )
    crypto_positions = (
        db.query(CryptoWallet.balance, Cryptocurrency.current_price)
        .join(Cryptocurrency, CryptoWallet.crypto_id == Cryptocurrency.id)
        .filter(CryptoWallet.player_id == player.id)
        .all()
    )
    companies = db.query(Company).filter(Company.owner_id == player.id).all()
    loans = (
        db.query(Loan.remaining_balance)
        .filter(Loan.player_id == player.id, Loan.status == "active")
        .all()
    )
    return NetWorthInputs(
        cash=player.balance,
        stock_positions=[(shares, price) for shares, price in stock_positions],
        crypto_positions=[(balance, price) for balance, price in crypto_positions],
        companies=[CompanyEquity(c.balance, c.is_public, c.market_cap) for c in companies],
        loan_balances=[row.remaining_balance for row in loans],
    )


def compute_for_player(db: Session, player: Player) -> NetWorthBreakdown:
    return compute_net_worth(gather_inputs(db, player))


def get_live_net_worth(db: Session, player_id: str) -> NetWorthBreakdown:
    """Net worth from current holdings, for read paths that can't wait for a tick."""
    player = db.get(Player, player_id)
    if not player:
        raise ValueError("Player not found")
    return compute_for_player(db, player)


def _refresh_page(db: Session, player_ids: list[str]) -> int:
    changed = 0
    for player_id in player_ids:
        player = db.get(Player, player_id)
        if player is None:
            continue
        value = compute_for_player(db, player).total
        if player.net_worth != value:
            player.net_worth = value
            changed += 1
    return changed


def recalculate_net_worth(db: Session, batch_size: Optional[int] = None) -> int:
    """Recompute the cached net worth of every player, one page at a time.

    Pages are keyed by player id and committed separately so a tick never
    holds more than ``batch_size`` players in memory. Unchanged values are
    not written.

    Returns:
        Number of players whose cached value changed.
    """
    batch_size = batch_size or settings.NET_WORTH_BATCH_SIZE
    updated = 0
    last_id = None
    while True:
        query = db.query(Player.id).order_by(Player.id)
        if last_id is not None:
            query = query.filter(Player.id > last_id)
        page = [row.id for row in query.limit(batch_size).all()]
        if not page:
            break

        updated += apply_with_retry(
            db,
            lambda session, ids=page: _refresh_page(session, ids),
            label="net worth page",
        )
        last_id = page[-1]
        if len(page) < batch_size:
            break

    logger.info("Net worth changed for %d players", updated)
    return updated
