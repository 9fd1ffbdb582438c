"""Tick router: manual trigger and tick history."""

import json
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from tycoon.clock import as_utc
from tycoon.config import settings
from tycoon.database import get_db
from tycoon.middleware.auth import require_admin
from tycoon.middleware.rate_limit import limiter
from tycoon.models.player import Player
from tycoon.models.tick import TickHistory
from tycoon.schemas.tick import (
    TickRunResponse,
    TickHistoryResponse,
    TickHistoryListResponse,
    LastTickResponse,
    BotPurchaseResponse,
    PriceDeltaResponse,
)
from tycoon.services import tick_service
from tycoon.services.ledger import LedgerConflictError
from tycoon.services.tick_lock import TickInProgressError

router = APIRouter(prefix="/api/tick", tags=["tick"])


def _deltas(raw: str, key: str) -> list[PriceDeltaResponse]:
    return [
        PriceDeltaResponse(asset_id=d[key], old_price=d["old_price"], new_price=d["new_price"])
        for d in json.loads(raw or "[]")
    ]


def _tick_to_response(tick: TickHistory) -> TickHistoryResponse:
    return TickHistoryResponse(
        id=tick.id,
        tick_number=tick.tick_number,
        timestamp=as_utc(tick.timestamp).isoformat(),
        bot_purchases=[BotPurchaseResponse(**p) for p in json.loads(tick.bot_purchases or "[]")],
        stock_price_updates=_deltas(tick.stock_price_updates, "stock_id"),
        crypto_price_updates=_deltas(tick.crypto_price_updates, "crypto_id"),
        total_budget_spent=tick.total_budget_spent,
    )


@router.post("/run", response_model=TickRunResponse)
@limiter.limit(settings.MANUAL_TICK_RATE_LIMIT)
def run_tick(
    request: Request,
    db: Session = Depends(get_db),
    current_player: Player = Depends(require_admin),
):
    """Run one tick now (admin only). Not safe to spam: effects are not idempotent."""
    try:
        result = tick_service.run_tick(db)
    except (TickInProgressError, LedgerConflictError) as e:
        raise HTTPException(status_code=409, detail=str(e))
    return TickRunResponse(**result)


@router.get("/history", response_model=TickHistoryListResponse)
def get_tick_history(
    limit: int = Query(100, ge=1, le=100),
    db: Session = Depends(get_db),
):
    """Most recent ticks, newest first."""
    ticks = tick_service.get_tick_history(db, limit=limit)
    return TickHistoryListResponse(
        ticks=[_tick_to_response(t) for t in ticks],
        total=len(ticks),
    )


@router.get("/last", response_model=Optional[LastTickResponse])
def get_last_tick(db: Session = Depends(get_db)):
    """Last committed tick and the countdown to the next one, or null."""
    last = tick_service.get_last_tick(db)
    if last is None:
        return None
    return LastTickResponse(
        tick_number=last["tick_number"],
        timestamp=last["timestamp"].isoformat(),
        seconds_until_next=tick_service.seconds_until_next_tick(last["timestamp"]),
    )
