"""Portfolio service: holdings with live values, P&L, and net worth."""

from dataclasses import asdict

from sqlalchemy.orm import Session

from tycoon.models.crypto import Cryptocurrency, CryptoWallet
from tycoon.models.player import Player
from tycoon.models.stock import Stock, StockHolding
from tycoon.net_worth import crypto_holding_value, stock_value
from tycoon.services.net_worth_service import compute_for_player


def _pnl(current_value: int, total_invested: int) -> dict:
    profit_loss = current_value - total_invested
    return {
        "current_value": current_value,
        "profit_loss": profit_loss,
        "profit_loss_percent": (profit_loss / total_invested * 100) if total_invested > 0 else 0.0,
    }


def get_stock_holdings(db: Session, player_id: str) -> list[dict]:
    rows = (
        db.query(StockHolding, Stock)
        .join(Stock, StockHolding.stock_id == Stock.id)
        .filter(StockHolding.player_id == player_id)
        .order_by(Stock.symbol)
        .all()
    )
    result = []
    for holding, stock in rows:
        current_value = stock_value([(holding.shares, stock.current_price)])
        result.append({
            "stock_id": stock.id,
            "symbol": stock.symbol,
            "name": stock.name,
            "shares": holding.shares,
            "current_price": stock.current_price,
            "average_cost": holding.average_cost,
            "total_invested": holding.total_invested,
            **_pnl(current_value, holding.total_invested),
        })
    return result


def get_crypto_holdings(db: Session, player_id: str) -> list[dict]:
    rows = (
        db.query(CryptoWallet, Cryptocurrency)
        .join(Cryptocurrency, CryptoWallet.crypto_id == Cryptocurrency.id)
        .filter(CryptoWallet.player_id == player_id)
        .order_by(Cryptocurrency.symbol)
        .all()
    )
    result = []
    for wallet, crypto in rows:
        current_value = crypto_holding_value(wallet.balance, crypto.current_price)
        result.append({
            "crypto_id": crypto.id,
            "symbol": crypto.symbol,
            "name": crypto.name,
            "balance": wallet.balance,
            "current_price": crypto.current_price,
            "average_purchase_price": wallet.average_purchase_price,
            "total_invested": wallet.total_invested,
            **_pnl(current_value, wallet.total_invested),
        })
    return result


def get_portfolio(db: Session, player_id: str) -> dict:
    """Holdings plus a live net worth computed with the same formula as the tick."""
    player = db.get(Player, player_id)
    if not player:
        raise ValueError("Player not found")

    breakdown = compute_for_player(db, player)
    return {
        "player_id": player.id,
        "balance": player.balance,
        "cached_net_worth": player.net_worth,
        "net_worth": asdict(breakdown),
        "stocks": get_stock_holdings(db, player.id),
        "crypto": get_crypto_holdings(db, player.id),
    }
