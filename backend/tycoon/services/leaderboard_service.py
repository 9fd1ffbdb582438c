"""Leaderboard queries over cached and live balances."""

from sqlalchemy.orm import Session

from tycoon.models.company import Company
from tycoon.models.player import Player


def top_players_by_net_worth(db: Session, limit: int = 5) -> list[Player]:
    """Reads the per-tick cached value through its index."""
    return (
        db.query(Player)
        .order_by(Player.net_worth.desc(), Player.id)
        .limit(limit)
        .all()
    )


def top_players_by_balance(db: Session, limit: int = 5) -> list[Player]:
    return (
        db.query(Player)
        .order_by(Player.balance.desc(), Player.id)
        .limit(limit)
        .all()
    )


def top_companies_by_balance(db: Session, limit: int = 5, public_only: bool = False) -> list[Company]:
    query = db.query(Company)
    if public_only:
        query = query.filter(Company.is_public.is_(True))
    return query.order_by(Company.balance.desc(), Company.id).limit(limit).all()
