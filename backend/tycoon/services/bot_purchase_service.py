"""Bot purchase service: simulated buyers spending a fixed budget each tick."""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from tycoon.config import settings
from tycoon.clock import utcnow
from tycoon.demand import PlannedPurchase, ProductSnapshot, is_eligible, plan_purchases
from tycoon.models.company import Company
from tycoon.models.marketplace_sale import MarketplaceSale, BOT_PURCHASER
from tycoon.models.product import Product
from tycoon.money import is_safe_amount
from tycoon.services.ledger import apply_with_retry

logger = logging.getLogger(__name__)


def get_candidate_products(db: Session, limit: int, price_ceiling: int) -> list[Product]:
    """Active, in-stock products under the price ceiling, best sellers first."""
    return (
        db.query(Product)
        .filter(
            Product.is_active.is_(True),
            Product.is_archived.is_(False),
            Product.price > 0,
            Product.price <= price_ceiling,
            or_(Product.stock.is_(None), Product.stock > 0),
        )
        .order_by(Product.total_revenue.desc(), Product.id)
        .limit(limit)
        .all()
    )


def _snapshot(product: Product) -> ProductSnapshot:
    return ProductSnapshot(
        id=product.id,
        company_id=product.company_id,
        price=product.price,
        stock=product.stock,
        total_sold=product.total_sold or 0,
        quality_rating=product.quality_rating,
        max_per_order=product.max_per_order,
    )


def _apply_purchase(db: Session, planned: PlannedPurchase, now: datetime) -> Optional[dict]:
    """Product -> company -> sale, committed together by the caller.

    Rows are re-read here so a retry after a version conflict works from
    current stock and balances.
    """
    product = db.get(Product, planned.product_id)
    if product is None:
        return None

    unit_price = planned.total_price // planned.quantity
    quantity = planned.quantity
    if product.stock is not None:
        quantity = min(quantity, product.stock)
    if quantity <= 0:
        return None
    total_price = quantity * unit_price

    company = db.get(Company, product.company_id)
    if (
        not is_safe_amount((product.total_sold or 0) + quantity)
        or not is_safe_amount(product.total_revenue + total_price)
        or (company is not None and not is_safe_amount(company.balance + total_price))
    ):
        logger.warning("Skipping bot purchase of %s: amount would overflow", product.id)
        return None

    # 1. Product counters
    if product.stock is not None:
        product.stock -= quantity
    product.total_sold = (product.total_sold or 0) + quantity
    product.total_revenue = (product.total_revenue or 0) + total_price
    product.updated_at = now

    # 2. Credit company
    if company is not None:
        company.balance += total_price
        company.updated_at = now

    # 3. Sale audit row. Bots are not accounts, so no transfer record is written.
    db.add(MarketplaceSale(
        product_id=product.id,
        company_id=product.company_id,
        quantity=quantity,
        purchaser_id=BOT_PURCHASER,
        purchaser_type=BOT_PURCHASER,
        total_price=total_price,
        created_at=now,
    ))

    return {
        "product_id": product.id,
        "company_id": product.company_id,
        "quantity": quantity,
        "total_price": total_price,
    }


def execute_bot_purchases(
    db: Session,
    budget: Optional[int] = None,
    now: Optional[datetime] = None,
) -> list[dict]:
    """Spend the bot budget across the catalog.

    Steps:
    1. Load up to BOT_MAX_PRODUCTS candidates ordered by revenue
    2. Score and allocate the budget (tycoon.demand)
    3. Apply each purchase as its own committed unit

    Returns:
        One ``{product_id, company_id, quantity, total_price}`` per purchase.
    """
    budget = settings.BOT_BUDGET_CENTS if budget is None else budget
    now = now or utcnow()
    logger.info("Bot purchasing with budget %d cents", budget)

    candidates = get_candidate_products(db, settings.BOT_MAX_PRODUCTS, settings.BOT_PRICE_CEILING_CENTS)
    snapshots = [
        s for s in (_snapshot(p) for p in candidates)
        if is_eligible(s, settings.BOT_PRICE_CEILING_CENTS)
    ]
    if not snapshots:
        logger.info("No eligible products for bot purchases")
        return []

    plan = plan_purchases(snapshots, budget)
    if not plan:
        logger.info("Bot allocation produced no purchases")
        return []

    purchases = []
    for planned in plan:
        result = apply_with_retry(
            db,
            lambda session, p=planned: _apply_purchase(session, p, now),
            label=f"bot purchase {planned.product_id}",
        )
        if result is not None:
            purchases.append(result)

    logger.info("Bot made %d purchases", len(purchases))
    return purchases
