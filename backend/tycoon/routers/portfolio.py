"""Portfolio router: live holdings and net worth for a player."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from tycoon.database import get_db
from tycoon.schemas.portfolio import PortfolioResponse
from tycoon.services import portfolio_service

router = APIRouter(prefix="/api/players", tags=["portfolio"])


@router.get("/{player_id}/portfolio", response_model=PortfolioResponse)
def get_portfolio(player_id: str, db: Session = Depends(get_db)):
    try:
        return PortfolioResponse(**portfolio_service.get_portfolio(db, player_id))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
