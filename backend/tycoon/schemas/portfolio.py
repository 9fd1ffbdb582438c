"""Portfolio and leaderboard schemas."""

from typing import Optional
from pydantic import BaseModel


class NetWorthResponse(BaseModel):
    cash: int
    stock_value: int
    crypto_value: int
    company_equity: int
    loan_debt: int
    total: int


class StockHoldingResponse(BaseModel):
    stock_id: str
    symbol: str
    name: str
    shares: int
    current_price: int
    average_cost: int
    total_invested: int
    current_value: int
    profit_loss: int
    profit_loss_percent: float


class CryptoHoldingResponse(BaseModel):
    crypto_id: str
    symbol: str
    name: str
    balance: float
    current_price: int
    average_purchase_price: int
    total_invested: int
    current_value: int
    profit_loss: int
    profit_loss_percent: float


class PortfolioResponse(BaseModel):
    player_id: str
    balance: int
    cached_net_worth: int
    net_worth: NetWorthResponse
    stocks: list[StockHoldingResponse]
    crypto: list[CryptoHoldingResponse]


class PlayerRankResponse(BaseModel):
    id: str
    display_name: str
    balance: int
    net_worth: int

    class Config:
        from_attributes = True


class CompanyRankResponse(BaseModel):
    id: str
    name: str
    owner_id: str
    balance: int
    is_public: bool
    market_cap: Optional[int]

    class Config:
        from_attributes = True
