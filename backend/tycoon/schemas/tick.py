"""Tick request/response schemas."""

from pydantic import BaseModel


class TickRunResponse(BaseModel):
    tick_number: int
    tick_id: str
    bot_purchases: int
    stock_updates: int
    crypto_updates: int
    loans_accrued: int = 0
    net_worth_updates: int = 0


class BotPurchaseResponse(BaseModel):
    product_id: str
    company_id: str
    quantity: int
    total_price: int


class PriceDeltaResponse(BaseModel):
    asset_id: str
    old_price: int
    new_price: int


class TickHistoryResponse(BaseModel):
    id: str
    tick_number: int
    timestamp: str
    bot_purchases: list[BotPurchaseResponse]
    stock_price_updates: list[PriceDeltaResponse]
    crypto_price_updates: list[PriceDeltaResponse]
    total_budget_spent: int


class TickHistoryListResponse(BaseModel):
    ticks: list[TickHistoryResponse]
    total: int


class LastTickResponse(BaseModel):
    tick_number: int
    timestamp: str
    seconds_until_next: float


class PriceBarResponse(BaseModel):
    timestamp: str
    open: int
    high: int
    low: int
    close: int
    volume: int

    class Config:
        from_attributes = True


class PriceHistoryResponse(BaseModel):
    asset_id: str
    bars: list[PriceBarResponse]
