"""
Net worth formula.

    net worth = cash
              + sum(stock shares * stock price)
              + sum(crypto balance * crypto price)
              + sum(company cash + market cap if public)
              - sum(active loan remaining balance)

This is the only implementation. The per-tick recalculator and the portfolio
read path both go through compute_net_worth() so the cached value and the
live value can never drift apart.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class CompanyEquity:
    balance: int
    is_public: bool = False
    market_cap: Optional[int] = None


@dataclass(frozen=True)
class NetWorthInputs:
    cash: int
    stock_positions: list[tuple[int, int]] = field(default_factory=list)  # (shares, price)
    crypto_positions: list[tuple[float, int]] = field(default_factory=list)  # (coins, price)
    companies: list[CompanyEquity] = field(default_factory=list)
    loan_balances: list[int] = field(default_factory=list)


@dataclass(frozen=True)
class NetWorthBreakdown:
    cash: int
    stock_value: int
    crypto_value: int
    company_equity: int
    loan_debt: int
    total: int


def stock_value(positions: list[tuple[int, int]]) -> int:
    return sum(int(shares) * int(price or 0) for shares, price in positions)


def crypto_holding_value(balance: float, price: int) -> int:
    """Coins are fractional; the value is rounded to whole minor units."""
    return int(round(balance * (price or 0)))


def crypto_value(positions: list[tuple[float, int]]) -> int:
    return sum(crypto_holding_value(balance, price) for balance, price in positions)


def company_equity(companies: list[CompanyEquity]) -> int:
    total = 0
    for company in companies:
        total += company.balance
        if company.is_public and company.market_cap:
            total += company.market_cap
    return total


def loan_debt(balances: list[int]) -> int:
    return sum(balances)


def compute_net_worth(inputs: NetWorthInputs) -> NetWorthBreakdown:
    stocks = stock_value(inputs.stock_positions)
    crypto = crypto_value(inputs.crypto_positions)
    equity = company_equity(inputs.companies)
    debt = loan_debt(inputs.loan_balances)
    return NetWorthBreakdown(
        cash=inputs.cash,
        stock_value=stocks,
        crypto_value=crypto,
        company_equity=equity,
        loan_debt=debt,
        total=inputs.cash + stocks + crypto + equity - debt,
    )
