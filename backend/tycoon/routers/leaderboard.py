"""Leaderboard router: top players and companies."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from tycoon.database import get_db
from tycoon.schemas.portfolio import PlayerRankResponse, CompanyRankResponse
from tycoon.services import leaderboard_service

router = APIRouter(prefix="/api/leaderboard", tags=["leaderboard"])


@router.get("/players/net-worth", response_model=list[PlayerRankResponse])
def top_players_by_net_worth(
    limit: int = Query(5, ge=1, le=100),
    db: Session = Depends(get_db),
):
    """Ranked by the net worth cached at the last tick."""
    return leaderboard_service.top_players_by_net_worth(db, limit=limit)


@router.get("/players/balance", response_model=list[PlayerRankResponse])
def top_players_by_balance(
    limit: int = Query(5, ge=1, le=100),
    db: Session = Depends(get_db),
):
    return leaderboard_service.top_players_by_balance(db, limit=limit)


@router.get("/companies/balance", response_model=list[CompanyRankResponse])
def top_companies_by_balance(
    limit: int = Query(5, ge=1, le=100),
    public_only: bool = Query(False),
    db: Session = Depends(get_db),
):
    return leaderboard_service.top_companies_by_balance(db, limit=limit, public_only=public_only)
