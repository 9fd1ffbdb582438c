"""Markets router: price history bars for stocks and cryptocurrencies."""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from tycoon.clock import as_utc
from tycoon.database import get_db
from tycoon.models.crypto import Cryptocurrency
from tycoon.models.stock import Stock
from tycoon.schemas.tick import PriceBarResponse, PriceHistoryResponse
from tycoon.services import crypto_service, stock_service

router = APIRouter(prefix="/api/markets", tags=["markets"])


def _bars(rows) -> list[PriceBarResponse]:
    return [
        PriceBarResponse(
            timestamp=as_utc(r.timestamp).isoformat(),
            open=r.open,
            high=r.high,
            low=r.low,
            close=r.close,
            volume=r.volume,
        )
        for r in rows
    ]


@router.get("/stocks/{stock_id}/history", response_model=PriceHistoryResponse)
def get_stock_history(
    stock_id: str,
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
):
    if not db.get(Stock, stock_id):
        raise HTTPException(status_code=404, detail="Stock not found")
    rows = stock_service.get_price_history(db, stock_id, limit=limit)
    return PriceHistoryResponse(asset_id=stock_id, bars=_bars(rows))


@router.get("/crypto/{crypto_id}/history", response_model=PriceHistoryResponse)
def get_crypto_history(
    crypto_id: str,
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
):
    if not db.get(Cryptocurrency, crypto_id):
        raise HTTPException(status_code=404, detail="Cryptocurrency not found")
    rows = crypto_service.get_price_history(db, crypto_id, limit=limit)
    return PriceHistoryResponse(asset_id=crypto_id, bars=_bars(rows))
