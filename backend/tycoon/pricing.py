"""
Stochastic price model for stocks and cryptocurrencies.

Each tick advances every asset by one step. A step's return is built from:

    stocks:  r = kappa * (fair - p) / p  +  w_m * momentum  +  sigma * L * eps
    crypto:  r = drift  +  w_m * (p - p_prev) / p_prev  +  sigma * L * eps

where eps ~ N(0, 1) comes from an injected random.Random, L is a liquidity
dampener in (0, 1] (thin books -> bigger moves), and sigma follows a slow
clustering process:

    sigma' = base + persistence * (sigma - base) + sensitivity * |r|

so a large move raises volatility for a while before it decays back to
baseline. Returns are clamped to a maximum single-tick move and the resulting
price is floored at one minor unit, so prices are always strictly positive.

Coefficients are heuristic and grouped in frozen params dataclasses so they
can be tuned without touching the step functions.
"""

import math
import random
from dataclasses import dataclass
from typing import Optional

from tycoon.money import clamp_price

PRICE_FLOOR = 1  # one minor unit


@dataclass(frozen=True)
class StockModelParams:
    reversion: float = 0.02
    momentum_weight: float = 0.3
    momentum_decay: float = 0.8
    # Per-tick sigma at rest (~1.7% daily). Stays under the calmest coin,
    # 0.05 daily / sqrt(288) ~ 0.003 per tick.
    base_volatility: float = 0.001
    volatility_persistence: float = 0.9
    shock_sensitivity: float = 0.05
    min_volatility: float = 0.0003
    max_volatility: float = 0.015
    liquidity_reference: float = 1_000_000.0
    max_move: float = 0.2
    cluster_threshold: float = 0.005  # |r| above this stamps a volatility cluster
    fair_value_drift: float = 0.0005


@dataclass(frozen=True)
class CryptoModelParams:
    ticks_per_day: int = 288  # 5-minute ticks
    momentum_weight: float = 0.2
    drift_reversion: float = 0.95
    drift_noise: float = 0.0005
    max_drift: float = 0.01
    volatility_persistence: float = 0.9
    shock_sensitivity: float = 0.5
    max_volatility_multiplier: float = 4.0
    liquidity_reference: float = 1_000_000.0
    max_move: float = 0.35


@dataclass(frozen=True)
class StockState:
    price: int
    fair_value: Optional[int] = None
    momentum: float = 0.0
    volatility: Optional[float] = None
    liquidity: int = 1_000_000


@dataclass(frozen=True)
class StockStep:
    old_price: int
    new_price: int
    fair_value: int
    momentum: float
    volatility: float
    realized_return: float
    clustered: bool


@dataclass(frozen=True)
class CryptoState:
    price: int
    previous_price: Optional[int] = None
    base_volatility: float = 0.1
    volatility: Optional[float] = None
    trend_drift: float = 0.0
    liquidity: int = 1_000_000


@dataclass(frozen=True)
class CryptoStep:
    old_price: int
    new_price: int
    volatility: float
    trend_drift: float
    realized_return: float


def liquidity_dampener(liquidity: float, reference: float) -> float:
    """Map liquidity to a shock multiplier in (0, 1]; deeper pools move less."""
    liquidity = max(liquidity or 0.0, 0.0)
    return math.sqrt(reference / (reference + liquidity))


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def step_stock(
    state: StockState,
    rng: random.Random,
    params: StockModelParams = StockModelParams(),
) -> StockStep:
    """Advance one stock by a single tick.

    Args:
        state: Current price, fair value, momentum, volatility, liquidity.
        rng: Source of the random shock.
        params: Model coefficients.

    Returns:
        The new price and the updated momentum/volatility state.
    """
    price = max(state.price, PRICE_FLOOR)
    fair_value = state.fair_value if state.fair_value and state.fair_value > 0 else price
    volatility = state.volatility if state.volatility and state.volatility > 0 else params.base_volatility

    reversion = params.reversion * (fair_value - price) / price
    momentum = params.momentum_weight * state.momentum
    shock = rng.gauss(0.0, 1.0) * volatility * liquidity_dampener(
        state.liquidity, params.liquidity_reference
    )

    r = _clamp(reversion + momentum + shock, -params.max_move, params.max_move)
    new_price = clamp_price(price * (1 + r), PRICE_FLOOR)
    realized = (new_price - price) / price

    new_momentum = params.momentum_decay * state.momentum + (1 - params.momentum_decay) * realized
    new_volatility = _clamp(
        params.base_volatility
        + params.volatility_persistence * (volatility - params.base_volatility)
        + params.shock_sensitivity * abs(realized),
        params.min_volatility,
        params.max_volatility,
    )

    # The anchor itself wanders slowly so prices don't pin to one level forever
    new_fair_value = clamp_price(
        fair_value * (1 + rng.gauss(0.0, params.fair_value_drift)), PRICE_FLOOR
    )

    return StockStep(
        old_price=state.price,
        new_price=new_price,
        fair_value=new_fair_value,
        momentum=new_momentum,
        volatility=new_volatility,
        realized_return=realized,
        clustered=abs(realized) >= params.cluster_threshold,
    )


def step_crypto(
    state: CryptoState,
    rng: random.Random,
    params: CryptoModelParams = CryptoModelParams(),
) -> CryptoStep:
    """Advance one cryptocurrency by a single tick.

    There is no fair-value anchor. Direction comes from ``trend_drift``,
    which random-walks but is pulled back toward zero every step.
    """
    price = max(state.price, PRICE_FLOOR)
    base = max(state.base_volatility, 0.0)
    daily_vol = state.volatility if state.volatility and state.volatility > 0 else base
    per_tick_vol = daily_vol / math.sqrt(params.ticks_per_day)

    previous = state.previous_price if state.previous_price and state.previous_price > 0 else price
    last_return = (price - previous) / previous

    shock = rng.gauss(0.0, 1.0) * per_tick_vol * liquidity_dampener(
        state.liquidity, params.liquidity_reference
    )
    r = _clamp(
        state.trend_drift + params.momentum_weight * last_return + shock,
        -params.max_move,
        params.max_move,
    )
    new_price = clamp_price(price * (1 + r), PRICE_FLOOR)
    realized = (new_price - price) / price

    new_drift = _clamp(
        params.drift_reversion * state.trend_drift + rng.gauss(0.0, params.drift_noise),
        -params.max_drift,
        params.max_drift,
    )

    # Clustering runs on the daily scale; a big tick move lifts it above base
    new_volatility = _clamp(
        base
        + params.volatility_persistence * (daily_vol - base)
        + params.shock_sensitivity * abs(realized),
        base,
        base * params.max_volatility_multiplier if base > 0 else 0.0,
    )

    return CryptoStep(
        old_price=state.price,
        new_price=new_price,
        volatility=new_volatility,
        trend_drift=new_drift,
        realized_return=realized,
    )


def ohlc_bar(old_price: int, new_price: int) -> dict:
    """One step per tick, so high/low just bound open and close."""
    return {
        "open": old_price,
        "high": max(old_price, new_price),
        "low": min(old_price, new_price),
        "close": new_price,
        "volume": 0,
    }
