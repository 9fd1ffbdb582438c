"""JWT bearer authentication for operator endpoints.

Identity itself lives with an external provider; this only checks a signed
token whose ``sub`` is a player id.
"""

from datetime import datetime, timedelta, timezone

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from tycoon.config import settings
from tycoon.database import get_db
from tycoon.models.player import Player

security = HTTPBearer()


def create_access_token(data: dict, expires_minutes: int = 60) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> dict:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        return payload
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )


def get_current_player(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> Player:
    payload = decode_token(credentials.credentials)
    player_id = payload.get("sub")
    if not player_id:
        raise HTTPException(status_code=401, detail="Invalid token payload")
    player = db.get(Player, player_id)
    if not player:
        raise HTTPException(status_code=401, detail="Player not found")
    return player


def require_admin(current_player: Player = Depends(get_current_player)) -> Player:
    if current_player.role != "admin":
        raise HTTPException(status_code=403, detail="Admin role required")
    return current_player
