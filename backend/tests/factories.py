"""Row builders for service tests. Each helper commits what it creates."""

from datetime import datetime, timezone

from tycoon.models import (
    Company,
    Cryptocurrency,
    CryptoWallet,
    Loan,
    Player,
    Product,
    Stock,
    StockHolding,
)

NOW = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


def _save(db, row):
    db.add(row)
    db.commit()
    return row


def make_player(db, balance=0, role="normal", net_worth=0, display_name="player"):
    return _save(db, Player(balance=balance, role=role, net_worth=net_worth, display_name=display_name))


def make_company(db, owner, balance=0, is_public=False, market_cap=None, name="Acme"):
    return _save(db, Company(
        owner_id=owner.id, name=name, balance=balance, is_public=is_public, market_cap=market_cap,
    ))


def make_product(db, company, price=10_000, stock=None, **kwargs):
    fields = dict(
        company_id=company.id,
        name=kwargs.pop("name", "Widget"),
        price=price,
        stock=stock,
        production_cost_percentage=0.5,
        total_sold=0,
        total_revenue=0,
        quality_rating=0.5,
    )
    fields.update(kwargs)
    return _save(db, Product(**fields))


def make_stock(db, symbol="TCH", price=2_000, **kwargs):
    fields = dict(name=f"{symbol} Corp", symbol=symbol, current_price=price, fair_value=price)
    fields.update(kwargs)
    return _save(db, Stock(**fields))


def make_crypto(db, symbol="GMC", price=1_000, circulating_supply=1_000_000, **kwargs):
    fields = dict(
        name=f"{symbol} Coin",
        symbol=symbol,
        current_price=price,
        total_supply=circulating_supply * 2,
        circulating_supply=circulating_supply,
        market_cap=price * circulating_supply,
        base_volatility=0.1,
    )
    fields.update(kwargs)
    return _save(db, Cryptocurrency(**fields))


def make_stock_holding(db, player, stock, shares, total_invested=0):
    return _save(db, StockHolding(
        player_id=player.id, stock_id=stock.id, shares=shares, total_invested=total_invested,
    ))


def make_wallet(db, player, crypto, balance, total_invested=0):
    return _save(db, CryptoWallet(
        player_id=player.id, crypto_id=crypto.id, balance=balance, total_invested=total_invested,
    ))


def make_loan(db, player, remaining_balance=100_000, interest_rate=5.0, last_interest_applied=NOW, status="active"):
    return _save(db, Loan(
        player_id=player.id,
        amount=remaining_balance,
        interest_rate=interest_rate,
        remaining_balance=remaining_balance,
        accrued_interest=0,
        status=status,
        last_interest_applied=last_interest_applied,
    ))
