"""
Bot demand model.

Scores catalog products by how attractive they are to simulated buyers and
splits a fixed spending budget across them.

Key formulas:
    price preference:  exp(-z^2 / 2),  z = (ln(price + 1) - ln(SWEET_SPOT)) / WIDTH
    unit penalty:      1 / (1 + (price_dollars / 5000)^1.2)
    demand:            min(total_sold / 100, 1)
    score:             penalty * (0.4*quality + 0.3*preference + 0.2*demand + 0.1)

All amounts are integer minor units (cents). Nothing here touches the database;
the purchase service feeds it plain product snapshots.
"""

import math
from dataclasses import dataclass
from typing import Optional

from tycoon.money import MAX_SAFE_MONEY

SWEET_SPOT_PRICE = 100_000  # ~$1,000
PRICE_PREFERENCE_WIDTH = 2.0
PENALTY_REFERENCE_DOLLARS = 5000.0
PENALTY_EXPONENT = 1.2
DEFAULT_QUALITY = 0.5


@dataclass(frozen=True)
class ProductSnapshot:
    """The fields of a product the demand model reads."""

    id: str
    company_id: str
    price: int
    stock: Optional[int] = None  # None = unlimited
    total_sold: int = 0
    quality_rating: Optional[float] = None
    max_per_order: Optional[int] = None


@dataclass(frozen=True)
class PlannedPurchase:
    product_id: str
    company_id: str
    quantity: int
    total_price: int


def price_preference(price: int) -> float:
    """Gaussian bump in log-price space centred on the sweet-spot price."""
    z = (math.log(price + 1) - math.log(SWEET_SPOT_PRICE)) / PRICE_PREFERENCE_WIDTH
    return math.exp(-(z ** 2) / 2)


def unit_price_penalty(price: int) -> float:
    """Dampens allocation to expensive items."""
    return 1.0 / (1.0 + math.pow((price / 100) / PENALTY_REFERENCE_DOLLARS, PENALTY_EXPONENT))


def demand_score(total_sold: int) -> float:
    return min((total_sold or 0) / 100, 1.0)


def attractiveness(product: ProductSnapshot) -> float:
    """Score a product in [0, 1]."""
    # A stored rating of 0 counts as "unrated", same as a missing one
    quality = product.quality_rating or DEFAULT_QUALITY
    raw = unit_price_penalty(product.price) * (
        0.4 * quality
        + 0.3 * price_preference(product.price)
        + 0.2 * demand_score(product.total_sold)
        + 0.1
    )
    return max(0.0, min(1.0, raw))


def is_eligible(product: ProductSnapshot, price_ceiling: int) -> bool:
    if product.price <= 0 or product.price > price_ceiling:
        return False
    return product.stock is None or product.stock > 0


def plan_purchases(products: list[ProductSnapshot], budget: int) -> list[PlannedPurchase]:
    """Split ``budget`` across ``products`` in proportion to attractiveness.

    Products are visited in the given order. Each gets
    ``floor(score / total_score * budget)`` as its desired spend, capped by
    remaining stock, ``max_per_order``, and whatever is left of the budget.

    Args:
        products: Eligible products, in priority order.
        budget: Total spend available, in minor units.

    Returns:
        One planned purchase per product that gets at least one unit.
        The sum of ``total_price`` never exceeds ``budget``.
    """
    if budget <= 0 or not products:
        return []

    scored = [(p, attractiveness(p)) for p in products]
    total_score = sum(score for _, score in scored)
    if total_score <= 0:
        return []

    plan = []
    remaining = budget
    for product, score in scored:
        if remaining <= 0:
            break

        desired_spend = math.floor(score / total_score * budget)
        if desired_spend < product.price:
            continue

        quantity = desired_spend // product.price
        if product.stock is not None:
            quantity = min(quantity, product.stock)
        if product.max_per_order:
            quantity = min(quantity, product.max_per_order)
        if quantity <= 0:
            continue

        if quantity * product.price > remaining:
            quantity = remaining // product.price
            if quantity <= 0:
                continue

        total_price = quantity * product.price
        if total_price > MAX_SAFE_MONEY:
            continue

        plan.append(PlannedPurchase(
            product_id=product.id,
            company_id=product.company_id,
            quantity=quantity,
            total_price=total_price,
        ))
        remaining -= total_price

    return plan
