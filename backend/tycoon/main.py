"""Tycoon market engine — FastAPI application entry point."""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from tycoon.config import settings
from tycoon.middleware.rate_limit import limiter
from tycoon.routers import tick, markets, portfolio, leaderboard
from tycoon.database import engine, Base
from tycoon.scheduler import tick_loop
import tycoon.models  # noqa: F401  registers every table on Base

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Create all tables on startup
Base.metadata.create_all(bind=engine)

_cors_origins = [o.strip() for o in settings.ALLOWED_ORIGINS.split(",") if o.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    tick_task = None
    if settings.TICK_SCHEDULER_ENABLED:
        tick_task = asyncio.create_task(tick_loop())
        logger.info("Tick loop started (interval: %ss)", settings.TICK_INTERVAL_SECONDS)
    yield
    if tick_task:
        tick_task.cancel()
        try:
            await tick_task
        except asyncio.CancelledError:
            pass
        logger.info("Tick loop stopped")


app = FastAPI(
    title="Tycoon Market Engine",
    description="Periodic market tick engine for the tycoon economy simulation.",
    version="1.0.0",
    lifespan=lifespan,
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(tick.router)
app.include_router(markets.router)
app.include_router(portfolio.router)
app.include_router(leaderboard.router)


@app.get("/")
def root():
    return {
        "name": "Tycoon Market Engine",
        "version": "1.0.0",
        "docs": "/docs",
    }


@app.get("/health")
def health():
    return {"status": "ok", "scheduler_enabled": settings.TICK_SCHEDULER_ENABLED}
